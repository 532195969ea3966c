"""Domain service: quantity conversion and validation.

Customers type *display* quantities in business-friendly units: pieces,
or kilograms for anything sold by weight.  Prices and stored line items
use *canonical* units, i.e. the product's own pricing unit (one piece,
one kg, one 100 g block, one 500 g block).  The multiple-of rule is
checked in canonical space because the display-to-canonical factor can
be fractional.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from fromagerie.domain.model.product import Product
from fromagerie.domain.model.value_objects import DEFAULT_KG_PER_UNIT, QuantityType

MULTIPLE_TOLERANCE = 1e-4


def _quantity_type(source: Product | QuantityType) -> QuantityType:
    if isinstance(source, QuantityType):
        return source
    return source.quantity_type


def _unit_size_in_kg(
    source: Product | QuantityType,
    kg_per_unit: Mapping[QuantityType, float] | None,
) -> float:
    factors = DEFAULT_KG_PER_UNIT if kg_per_unit is None else kg_per_unit
    return factors.get(_quantity_type(source), 1)


def display_unit_label_for(source: Product | QuantityType) -> str:
    return "pc" if _quantity_type(source).is_piece else "kg"


def input_step_for(item: Product) -> float:
    """Increment offered when typing a quantity for *item*."""
    if item.step is not None and item.step > 0:
        return item.step
    return item.quantity_type.default_step


def to_unit_quantity(
    source: Product | QuantityType,
    display_quantity: float,
    kg_per_unit: Mapping[QuantityType, float] | None = None,
) -> float:
    """Convert a display quantity into canonical units."""
    if not math.isfinite(display_quantity) or display_quantity == 0:
        return 0
    if _quantity_type(source).is_piece:
        return display_quantity
    size = _unit_size_in_kg(source, kg_per_unit)
    if size <= 0:
        return display_quantity
    return display_quantity / size


def to_display_quantity(
    source: Product | QuantityType,
    unit_quantity: float,
    kg_per_unit: Mapping[QuantityType, float] | None = None,
) -> float:
    """Convert a canonical quantity back into display units."""
    if not math.isfinite(unit_quantity) or unit_quantity == 0:
        return 0
    if _quantity_type(source).is_piece:
        return unit_quantity
    size = _unit_size_in_kg(source, kg_per_unit)
    if size <= 0:
        return unit_quantity
    return unit_quantity * size


def validate_quantity_multiple(
    item: Product,
    display_quantity: float,
    tolerance: float = MULTIPLE_TOLERANCE,
    kg_per_unit: Mapping[QuantityType, float] | None = None,
) -> str | None:
    """Return an error message, or None when *display_quantity* is acceptable.

    Items without a configured multiple accept anything, and a zero
    quantity is never an error (it simply means "not ordered").
    """
    if not item.multiple_of or display_quantity == 0:
        return None

    unit_quantity = to_unit_quantity(item, display_quantity, kg_per_unit)
    if unit_quantity == 0:
        return None

    ratio = unit_quantity / item.multiple_of
    if abs(ratio - round(ratio)) < tolerance:
        return None

    return (
        f"Quantity must be a multiple of {item.multiple_of:g} "
        f"{item.quantity_type.label}"
    )
