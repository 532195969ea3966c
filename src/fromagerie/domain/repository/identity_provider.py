"""Abstract identity provider (sessions and accounts)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fromagerie.domain.model.user import User


class IdentityProvider(ABC):

    @abstractmethod
    async def get_session(self) -> User | None:
        """Return the user of the current session, or None."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> User:
        """Open a session; raise AuthenticationError on bad credentials."""

    @abstractmethod
    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> User:
        """Create an account with profile metadata and open a session."""

    @abstractmethod
    async def sign_out(self) -> None:
        """Close the current session."""

    @abstractmethod
    async def update_user(
        self,
        email: str | None = None,
        password: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> User:
        """Update the signed-in user and return the new record."""
