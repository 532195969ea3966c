"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class BackendError(DomainException):
    """A read or write against the backend tables failed."""


class AuthenticationError(DomainException):
    """Credentials were rejected or no session is open."""


class ConfigurationError(DomainException):
    """A deployment setting has an invalid value."""
