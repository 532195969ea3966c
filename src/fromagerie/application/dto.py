"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry what a collaborator (form, CLI) submitted to the store
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fromagerie.domain.model.consign import ConsignItem


@dataclass(frozen=True)
class ItemPayload:
    """Input: a catalog product as typed in the catalog form."""

    name: str
    price: str | int | float
    quantity_type: str
    multiple_of: float | None = None
    comment_enabled: bool = False
    step: float | None = None


@dataclass(frozen=True)
class NewOrderEntry:
    """Input: one product line as the customer typed it.

    ``quantity`` is a display quantity (pieces, or kilograms for
    products sold by weight).
    """

    item_id: str
    quantity: float
    comment: str | None = None


@dataclass(frozen=True)
class NewOrder:
    """Input: a whole order submission."""

    customer_name: str
    entries: list[NewOrderEntry]
    contact: str = ""
    notes: str = ""
    client_id: str | None = None


@dataclass(frozen=True)
class ConsignTransaction:
    """Input: a batch of consigns handed to, or returned by, one client."""

    client_id: str
    items: list[ConsignItem] = field(default_factory=list)
    note: str | None = None


@dataclass(frozen=True)
class SignupPayload:

    email: str
    password: str
    display_name: str
    phone: str
    delivery_location: str
    company: str | None = None


@dataclass(frozen=True)
class ProfilePayload:

    email: str
    display_name: str
    phone: str
    delivery_location: str
    company: str | None = None
