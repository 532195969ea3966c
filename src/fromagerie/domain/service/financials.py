"""Domain service: order financials.

Every product line of an order carries a flat transport surcharge, no
matter how much of the product was ordered.
"""

from __future__ import annotations

from dataclasses import dataclass

from fromagerie.domain.model.order import Order
from fromagerie.domain.model.value_objects import Money

TRANSPORT_FEE_PER_LINE = Money.of(1000)


@dataclass(frozen=True)
class OrderFinancials:

    product_total: Money
    transport_fee: Money
    grand_total: Money


def compute_order_financials(
    order: Order,
    fee_per_line: Money = TRANSPORT_FEE_PER_LINE,
) -> OrderFinancials:
    """Derive product subtotal, transport fee and grand total of *order*."""
    product_total = order.product_total
    transport_fee = fee_per_line * len(order.items)
    return OrderFinancials(
        product_total=product_total,
        transport_fee=transport_fee,
        grand_total=product_total + transport_fee,
    )
