"""
Tests for core.primitives - Money and CatalogItem.
"""

from decimal import Decimal

import pytest

from core.primitives.item import CatalogItem, make_item
from core.primitives.money import Money, round_money, to_decimal


# ── Money construction ───────────────────────────────────────

class TestMoneyConstruction:
    def test_scales_to_two_digits(self):
        assert Money(10).amount == Decimal("10.00")
        assert str(Money(10)) == "10.00 SEK"

    def test_rounds_half_up(self):
        assert Money("2.345").amount == Decimal("2.35")
        assert Money("2.344").amount == Decimal("2.34")
        assert Money("-2.345").amount == Decimal("-2.35")

    def test_float_goes_through_repr(self):
        assert Money(0.1).amount == Decimal("0.10")
        assert Money(1.005).amount == Decimal("1.01")

    def test_rejects_bool(self):
        with pytest.raises(TypeError, match="bool"):
            Money(True)

    def test_rejects_bad_currency(self):
        with pytest.raises(ValueError, match="3-letter"):
            Money(1, "SWEDISH")

    def test_equal_when_scaled_values_equal(self):
        assert Money("10") == Money("10.000")
        assert Money(10) != Money(10, "EUR")


# ── Money arithmetic ─────────────────────────────────────────

class TestMoneyArithmetic:
    def test_add_and_subtract(self):
        assert Money("10.10") + Money("0.90") == Money(11)
        assert Money(5) - Money(8) == Money(-3)

    def test_multiply_by_quantity(self):
        assert Money(15).multiply(3) == Money(45)

    def test_multiply_by_rate_rounds(self):
        assert Money("10.05").multiply(Decimal("0.12")) == Money("1.21")

    def test_multiply_by_money_is_type_error(self):
        with pytest.raises(TypeError, match="Money by Money"):
            Money(2).multiply(Money(3))

    def test_currency_mismatch(self):
        with pytest.raises(ValueError, match="Currency mismatch"):
            Money(1) + Money(1, "EUR")

    def test_predicates_and_negate(self):
        assert Money(1).is_positive()
        assert Money(-1).is_negative()
        assert Money.zero().is_zero()
        assert Money(3).negate() == Money(-3)

    def test_tiny_negative_renders_as_plain_zero(self):
        tiny = Money("0.01").multiply(Decimal("-0.12"))
        assert str(tiny) == "0.00 SEK"
        assert tiny.to_dict()["amount"] == "0.00"
        assert str(Money.zero().negate()) == "0.00 SEK"
        assert str(Money("-0.004")) == "0.00 SEK"

    def test_ordering(self):
        assert Money(1) < Money(2)
        assert Money(2) >= Money(2)
        assert max(Money(1), Money(5), Money(3)) == Money(5)

    def test_immutable(self):
        m = Money(1)
        with pytest.raises(Exception):
            m.amount = Decimal(2)


class TestMoneySerialization:
    def test_round_trip_dict(self):
        m = Money("49.60")
        assert m.to_dict() == {"amount": "49.60", "currency": "SEK"}
        assert Money.from_dict(m.to_dict()) == m


class TestDecimalHelpers:
    def test_to_decimal_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            to_decimal([1])

    def test_round_money(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")

    def test_round_money_drops_negative_zero_sign(self):
        assert not round_money(Decimal("-0.001")).is_signed()
        assert round_money(Decimal("-0.005")) == Decimal("-0.01")


# ── CatalogItem ──────────────────────────────────────────────

class TestCatalogItem:
    def test_unit_vat_and_price_with_vat(self):
        item = make_item("2", "Barilla Pasta", 15.0, 0.12)
        assert item.unit_vat() == Money("1.80")
        assert item.unit_price_with_vat() == Money("16.80")

    def test_vat_percent_is_integral_when_whole(self):
        assert str(make_item("1", "A", 10, 0.25).vat_percent) == "25"
        assert str(make_item("1", "A", 10, "0.125").vat_percent) == "12.5"

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError, match="negative"):
            make_item("1", "A", -1, 0.12)

    def test_rejects_rate_out_of_range(self):
        with pytest.raises(ValueError, match="between 0 and 1"):
            make_item("1", "A", 1, 12)

    def test_rejects_empty_id(self):
        with pytest.raises(ValueError, match="item_id"):
            make_item("", "A", 1, 0.12)

    def test_dict_round_trip(self):
        item = make_item("3", "Arla Milk", 22.0, 0.12, "1L")
        assert CatalogItem.from_dict(item.to_dict()) == item
