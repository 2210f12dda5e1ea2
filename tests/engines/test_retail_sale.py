"""
POS Retail Engine - Sale Aggregate Tests
==========================================
Tests verify:
- Line arithmetic (subtotal, VAT, total with VAT)
- Merge of repeated item ids in first-seen order
- total_with_vat == total + vat - discount
- OPEN -> SETTLED transition and its guards
- Receipt snapshot and completed-sale summary
"""

from datetime import datetime, timezone

import pytest

from core.commands.rejection import ReasonCode
from core.primitives.item import make_item
from core.primitives.money import Money
from core.time.clock import FixedClock, SystemClock, get_default_clock
from engines.retail.errors import (
    InvalidQuantity,
    SaleAlreadySettled,
    SaleNotOpen,
    SaleNotSettled,
)
from engines.retail.events import RETAIL_SALE_COMPLETED_V1, build_sale_summary
from engines.retail.sale import LineItem, Sale, SaleStatus

NOW = datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)

PASTA = make_item("2", "Barilla Pasta", 15.0, 0.12)
CORNFLAKES = make_item("1", "Kellogg's Cornflakes", 10.0, 0.12)
MILK = make_item("3", "Arla Milk", 22.0, 0.12)


def make_sale(sale_id="sale-1"):
    return Sale(sale_id=sale_id, clock=FixedClock(NOW))


# ══════════════════════════════════════════════════════════════
# LINE ITEM
# ══════════════════════════════════════════════════════════════

class TestLineItem:
    def test_derived_amounts(self):
        line = LineItem(item=PASTA, quantity=3)
        assert line.subtotal == Money("45.00")
        assert line.vat_amount == Money("5.40")
        assert line.total_with_vat == Money("50.40")

    def test_vat_rounded_per_unit_before_quantity(self):
        item = make_item("x", "Gum", "0.05", "0.25")
        line = LineItem(item=item, quantity=10)
        # 0.0125 rounds to 0.01 per unit
        assert line.vat_amount == Money("0.10")

    def test_total_with_vat_is_subtotal_plus_vat(self):
        line = LineItem(item=MILK, quantity=7)
        assert line.total_with_vat == line.subtotal + line.vat_amount

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True, "2"])
    def test_rejects_non_positive_int(self, quantity):
        with pytest.raises(InvalidQuantity, match="positive integer"):
            LineItem(item=PASTA, quantity=quantity)

    def test_merged_returns_new_line(self):
        line = LineItem(item=PASTA, quantity=1)
        merged = line.merged(2)
        assert merged.quantity == 3
        assert line.quantity == 1


# ══════════════════════════════════════════════════════════════
# ADDING ITEMS
# ══════════════════════════════════════════════════════════════

class TestAddItem:
    def test_single_item_totals(self):
        sale = make_sale()
        registration = sale.add_item(PASTA, 3)

        assert sale.calculate_total() == Money("45.00")
        assert sale.calculate_total_vat() == Money("5.40")
        assert sale.calculate_total_with_vat() == Money("50.40")
        assert registration.quantity == 3
        assert registration.merged is False
        assert registration.running_total == Money("50.40")
        assert registration.running_vat == Money("5.40")

    def test_repeated_id_merges_in_place(self):
        sale = make_sale()
        sale.add_item(CORNFLAKES)
        sale.add_item(MILK)
        registration = sale.add_item(CORNFLAKES, 2)

        assert [line.item_id for line in sale.lines] == ["1", "3"]
        assert sale.find_line("1").quantity == 3
        assert registration.merged is True
        assert registration.quantity == 3

    def test_lines_are_immutable_view(self):
        sale = make_sale()
        sale.add_item(PASTA)
        assert isinstance(sale.lines, tuple)

    def test_invalid_quantity_carries_reason(self):
        sale = make_sale()
        with pytest.raises(InvalidQuantity) as exc_info:
            sale.add_item(PASTA, 0)
        assert exc_info.value.code == ReasonCode.INVALID_QUANTITY
        assert sale.lines == ()

    def test_empty_sale_totals_are_zero(self):
        sale = make_sale()
        assert sale.calculate_total().is_zero()
        assert sale.calculate_total_with_vat().is_zero()

    def test_created_at_comes_from_clock(self):
        assert make_sale().created_at == NOW

    def test_defaults_to_system_clock(self):
        sale = Sale()
        assert isinstance(get_default_clock(), SystemClock)
        assert sale.created_at.tzinfo is timezone.utc


# ══════════════════════════════════════════════════════════════
# DISCOUNT
# ══════════════════════════════════════════════════════════════

class TestApplyDiscount:
    def test_identity_holds_with_discount(self):
        sale = make_sale()
        sale.add_item(PASTA, 3)
        sale.add_item(MILK, 2)
        sale.apply_discount("1001", Money("7.25"))

        expected = (
            sale.calculate_total() + sale.calculate_total_vat() - Money("7.25")
        )
        assert sale.calculate_total_with_vat() == expected
        assert sale.customer_id == "1001"
        assert sale.has_discount

    def test_last_write_wins(self):
        sale = make_sale()
        sale.add_item(PASTA)
        sale.apply_discount("1001", Money(5))
        sale.apply_discount("1002", Money(2))
        assert sale.discount_amount == Money(2)
        assert sale.customer_id == "1002"

    def test_discount_may_exceed_total(self):
        sale = make_sale()
        sale.add_item(CORNFLAKES)
        sale.apply_discount(None, Money(100))
        assert sale.calculate_total_with_vat() == Money("-88.80")

    def test_discount_must_be_money(self):
        sale = make_sale()
        with pytest.raises(TypeError, match="Money"):
            sale.apply_discount("1001", 5)


# ══════════════════════════════════════════════════════════════
# SETTLEMENT
# ══════════════════════════════════════════════════════════════

class TestSettlePayment:
    def test_settle_computes_change(self):
        sale = make_sale()
        sale.add_item(PASTA, 3)
        payment = sale.settle_payment(Money(100))

        assert payment.total_due == Money("50.40")
        assert payment.change == Money("49.60")
        assert payment.amount_paid == Money("50.40")
        assert payment.settled_at == NOW
        assert sale.status is SaleStatus.SETTLED
        assert sale.is_settled
        assert sale.payment is payment

    def test_underpayment_gives_negative_change(self):
        sale = make_sale()
        sale.add_item(PASTA, 3)
        payment = sale.settle_payment(Money(50))
        assert payment.change == Money("-0.40")

    def test_second_settlement_fails(self):
        sale = make_sale()
        sale.add_item(PASTA)
        sale.settle_payment(Money(20))
        with pytest.raises(SaleAlreadySettled) as exc_info:
            sale.settle_payment(Money(20))
        assert exc_info.value.code == ReasonCode.SALE_ALREADY_SETTLED

    def test_settled_sale_rejects_items_and_discounts(self):
        sale = make_sale()
        sale.add_item(PASTA)
        sale.settle_payment(Money(20))

        with pytest.raises(SaleNotOpen, match="Cannot add item"):
            sale.add_item(MILK)
        with pytest.raises(SaleNotOpen, match="Cannot apply discount"):
            sale.apply_discount("1001", Money(1))
        assert len(sale.lines) == 1

    def test_empty_sale_can_settle(self):
        sale = make_sale()
        payment = sale.settle_payment(Money(0))
        assert payment.change.is_zero()

    def test_notified_flag_follows_settlement(self):
        sale = make_sale()
        assert not sale.is_notified
        with pytest.raises(SaleNotSettled):
            sale.mark_notified()

        sale.settle_payment(Money(0))
        assert not sale.is_notified
        sale.mark_notified()
        assert sale.is_notified


class TestReceiptSnapshot:
    def test_receipt_captured_at_settlement(self):
        clock = FixedClock(NOW)
        sale = Sale(sale_id="sale-9", clock=clock)
        sale.add_item(PASTA, 3)
        sale.apply_discount("1001", Money(1))
        clock.advance(45)
        sale.settle_payment(Money(100))

        receipt = sale.receipt
        assert receipt.sale_id == "sale-9"
        assert receipt.sale_time == NOW
        assert (receipt.settled_at - NOW).total_seconds() == 45
        assert receipt.total == Money(45)
        assert receipt.total_vat == Money("5.40")
        assert receipt.discount == Money(1)
        assert receipt.total_with_vat == Money("49.40")
        assert receipt.customer_id == "1001"
        assert receipt.payment.change == Money("50.60")

    def test_open_sale_has_no_receipt(self):
        assert make_sale().receipt is None


class TestSaleSummary:
    def test_summary_from_settled_sale(self):
        sale = make_sale()
        sale.add_item(PASTA, 3)
        sale.settle_payment(Money(100))

        summary = build_sale_summary(sale)
        assert summary.event_type == RETAIL_SALE_COMPLETED_V1
        assert summary.amount_paid == Money("50.40")
        assert summary.tendered == Money(100)
        assert summary.change == Money("49.60")

        payload = summary.to_payload()
        assert payload["total_with_vat"] == "50.40"
        assert payload["lines"][0] == {
            "item_id": "2", "quantity": 3,
            "subtotal": "45.00", "vat_amount": "5.40",
        }

    def test_summary_requires_settlement(self):
        with pytest.raises(SaleNotSettled):
            build_sale_summary(make_sale())
