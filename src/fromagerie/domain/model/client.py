"""Client aggregate: a known customer of the dairy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fromagerie.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Client:

    id: str | None
    name: str
    contact: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(name: str, contact: str | None = None) -> Client:
        """Create a new client; a blank contact is stored as None."""
        if not name or not name.strip():
            raise ValidationError("Client name is required")
        contact = (contact or "").strip()
        return Client(id=None, name=name.strip(), contact=contact or None)

    @property
    def sort_key(self) -> str:
        return self.name.casefold()
