"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from fromagerie.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount in Malagasy ariary.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "MGA"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | float | Decimal) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, (int, float, Decimal)):
            raise TypeError(f"Can only multiply Money by a number, got {type(factor).__name__}")
        if isinstance(factor, float) and not math.isfinite(factor):
            raise ValidationError(f"Cannot multiply Money by {factor}")
        # str() keeps the float's shortest repr, so 1.5 stays exactly 1.5
        return Money(self.amount * Decimal(str(factor)), self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        if self.amount == self.amount.to_integral_value():
            text = f"{self.amount:,.0f}"
        else:
            text = f"{self.amount:,.1f}"
        return f"{text.replace(',', ' ')} Ar"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


class QuantityType(Enum):
    """How a product is priced. The value is the wire/display label."""

    PER_PIECE = "/pc"
    PER_KG = "/kg"
    PER_100G = "/100g"
    PER_500G = "/500g"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_piece(self) -> bool:
        return self is QuantityType.PER_PIECE

    @property
    def default_step(self) -> float:
        return DEFAULT_INPUT_STEP[self]

    @staticmethod
    def parse(raw: str | QuantityType) -> QuantityType:
        if isinstance(raw, QuantityType):
            return raw
        try:
            return QuantityType(raw)
        except ValueError as exc:
            options = ", ".join(qt.value for qt in QuantityType)
            raise ValidationError(
                f"Unknown quantity type {raw!r} (expected one of {options})"
            ) from exc


DEFAULT_INPUT_STEP: dict[QuantityType, float] = {
    QuantityType.PER_PIECE: 1,
    QuantityType.PER_KG: 0.1,
    QuantityType.PER_100G: 1,
    QuantityType.PER_500G: 0.5,
}

# How many kilograms one priced unit represents.
DEFAULT_KG_PER_UNIT: dict[QuantityType, float] = {
    QuantityType.PER_PIECE: 1,
    QuantityType.PER_KG: 1,
    QuantityType.PER_100G: 0.1,
    QuantityType.PER_500G: 0.5,
}
