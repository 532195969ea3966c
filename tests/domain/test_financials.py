"""Unit tests for order financials."""

import itertools

from fromagerie.domain.model.order import Order
from fromagerie.domain.model.value_objects import Money, QuantityType
from fromagerie.domain.service.financials import TRANSPORT_FEE_PER_LINE, compute_order_financials
from tests.fakes import line_item


def _order(items) -> Order:
    return Order(id="o1", customer_name="Rasoa", items=tuple(items))


LINES = [
    line_item("Tomme", 5000, 2),
    line_item("Brie", 20000, 1.5, QuantityType.PER_KG),
    line_item("Beurre", 1200, 3, QuantityType.PER_100G),
]


class TestComputeOrderFinancials:

    def test_default_fee_is_one_thousand_per_line(self):
        assert TRANSPORT_FEE_PER_LINE == Money.of(1000)

    def test_totals(self):
        financials = compute_order_financials(_order(LINES))
        assert financials.product_total == Money.of(43600)
        assert financials.transport_fee == Money.of(3000)
        assert financials.grand_total == Money.of(46600)

    def test_fee_does_not_depend_on_quantity(self):
        financials = compute_order_financials(_order([line_item("Tomme", 5000, 40)]))
        assert financials.transport_fee == Money.of(1000)

    def test_empty_order_costs_nothing(self):
        financials = compute_order_financials(_order([]))
        assert financials.grand_total == Money.zero()

    def test_custom_fee(self):
        financials = compute_order_financials(_order(LINES), Money.of(500))
        assert financials.transport_fee == Money.of(1500)
        assert financials.grand_total == Money.of(45100)

    def test_independent_of_line_order(self):
        expected = compute_order_financials(_order(LINES))
        for permutation in itertools.permutations(LINES):
            assert compute_order_financials(_order(permutation)) == expected

    def test_additive_over_lines(self):
        whole = compute_order_financials(_order(LINES))
        parts = [compute_order_financials(_order([line])) for line in LINES]
        total = Money.zero()
        for part in parts:
            total = total + part.grand_total
        assert whole.grand_total == total
