"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from fromagerie.domain.exceptions import ValidationError
from fromagerie.domain.model.value_objects import (
    DEFAULT_INPUT_STEP,
    DEFAULT_KG_PER_UNIT,
    Money,
    QuantityType,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("1500"))
        assert m.amount == Decimal("1500")
        assert m.currency == "MGA"

    def test_of_factory_from_string(self):
        assert Money.of("2500.50").amount == Decimal("2500.50")

    def test_of_factory_from_int(self):
        assert Money.of(1000).amount == Decimal("1000")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(12.5)

    def test_addition(self):
        assert Money.of(1000) + Money.of("500.5") == Money.of("1500.5")

    def test_multiplication_by_int(self):
        assert Money.of(1200) * 3 == Money.of(3600)

    def test_multiplication_by_float_is_exact(self):
        assert Money.of(1200) * 1.5 == Money.of(1800)
        assert Money.of(3) * 0.1 == Money.of("0.3")

    def test_multiplication_by_non_number_rejected(self):
        with pytest.raises(TypeError):
            Money.of(10) * "2"

    def test_multiplication_by_infinity_rejected(self):
        with pytest.raises(ValidationError):
            Money.of(10) * float("inf")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "MGA") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of(15)) == "15 Ar"
        assert str(Money.of(1234567)) == "1 234 567 Ar"
        assert str(Money.of("2500.5")) == "2 500.5 Ar"

    def test_comparison_operators(self):
        assert Money.of(5) < Money.of(10)
        assert Money.of(10) > Money.of(5)
        assert Money.of(10) >= Money.of(10)
        assert Money.of(10) <= Money.of(10)

    def test_zero(self):
        assert Money.zero() == Money.of(0)


# ── QuantityType ─────────────────────────────────────────────────────────────


class TestQuantityType:

    def test_wire_labels(self):
        assert [qt.value for qt in QuantityType] == ["/pc", "/kg", "/100g", "/500g"]

    def test_parse_label(self):
        assert QuantityType.parse("/500g") is QuantityType.PER_500G

    def test_parse_passes_members_through(self):
        assert QuantityType.parse(QuantityType.PER_KG) is QuantityType.PER_KG

    def test_parse_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown quantity type"):
            QuantityType.parse("/litre")

    def test_only_pieces_are_pieces(self):
        assert QuantityType.PER_PIECE.is_piece
        assert not any(qt.is_piece for qt in QuantityType if qt is not QuantityType.PER_PIECE)

    def test_default_steps(self):
        assert DEFAULT_INPUT_STEP == {
            QuantityType.PER_PIECE: 1,
            QuantityType.PER_KG: 0.1,
            QuantityType.PER_100G: 1,
            QuantityType.PER_500G: 0.5,
        }
        assert QuantityType.PER_KG.default_step == 0.1

    def test_unit_sizes(self):
        assert DEFAULT_KG_PER_UNIT[QuantityType.PER_100G] == 0.1
        assert DEFAULT_KG_PER_UNIT[QuantityType.PER_500G] == 0.5
