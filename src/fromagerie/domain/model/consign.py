"""Consigns: returnable containers (jars, bottles) lent to clients.

Every hand-over or return is an append-only ``ConsignMovement`` with a
signed quantity.  What a client still holds is a ``ConsignBalance``,
derived by summing the movements per (client, type) pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fromagerie.domain.exceptions import ValidationError


@dataclass(frozen=True)
class ConsignType:

    id: str | None
    label: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(label: str) -> ConsignType:
        if not label or not label.strip():
            raise ValidationError("Consign type label is required")
        return ConsignType(id=None, label=label.strip())

    @property
    def sort_key(self) -> str:
        return self.label.casefold()


@dataclass(frozen=True)
class ConsignMovement:
    """One signed entry of the consign log (positive = lent, negative = returned)."""

    id: str | None
    client_id: str
    type_id: str
    quantity: int
    note: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ConsignBalance:
    """Net quantity of one consign type still held by one client."""

    client_id: str
    type_id: str
    quantity: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.client_id, self.type_id)


@dataclass(frozen=True)
class ConsignItem:
    """Input: how many containers of one type a transaction moves."""

    type_id: str
    quantity: float
