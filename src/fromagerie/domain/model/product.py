"""Product aggregate (a cheese or dairy item of the catalog).

Products live independently of orders. They have their own lifecycle:
prices change, products are added and removed from the catalog.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fromagerie.domain.exceptions import ValidationError
from fromagerie.domain.model.value_objects import Money, QuantityType


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    ``multiple_of`` is expressed in canonical units; ``step`` is the
    increment offered to whoever types a display quantity.  Both are
    positive when set.  Orders never point at a live Product: they copy
    name, quantity type and price when they are created.
    """

    id: str | None
    name: str
    price: Money
    quantity_type: QuantityType
    multiple_of: float | None = None
    comment_enabled: bool = False
    step: float | None = None

    @staticmethod
    def create(
        name: str,
        price: Money,
        quantity_type: QuantityType | str,
        multiple_of: float | None = None,
        comment_enabled: bool = False,
        step: float | None = None,
        product_id: str | None = None,
    ) -> Product:
        """Build a product from user input, applying catalog defaults.

        A multiple that is not a positive number is cleared; a step that
        is not positive falls back to the quantity type's default.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        qt = QuantityType.parse(quantity_type)
        return Product(
            id=product_id,
            name=name.strip(),
            price=price,
            quantity_type=qt,
            multiple_of=multiple_of if _is_positive(multiple_of) else None,
            comment_enabled=bool(comment_enabled),
            step=step if _is_positive(step) else qt.default_step,
        )


def _is_positive(value: float | None) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0
