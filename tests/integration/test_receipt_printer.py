"""
Tests for integration.printer - receipt text layout.
"""

import io
from datetime import datetime, timezone

from core.primitives.item import make_item
from core.primitives.money import Money
from core.time.clock import FixedClock
from engines.retail.sale import Sale
from integration.printer import (
    RECEIPT_FOOTER,
    RECEIPT_HEADER,
    StreamReceiptPrinter,
    format_amount,
    format_line,
    render_receipt,
)

NOW = datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)
PASTA = make_item("2", "Barilla Pasta", 15.0, 0.12)


def settled_receipt(discount=None):
    sale = Sale(sale_id="sale-1", clock=FixedClock(NOW))
    sale.add_item(PASTA, 3)
    if discount is not None:
        sale.apply_discount("1002", discount)
    sale.settle_payment(Money(100))
    return sale.receipt


class TestFormatting:
    def test_amount_uses_colon_mark(self):
        assert format_amount(Money("50.4")) == "50:40"

    def test_amount_right_aligned_to_width(self):
        line = format_line("Total :", Money("50.40"), width=40)
        assert line.endswith("50:40 SEK")
        assert line.index(" SEK") == 40

    def test_long_label_keeps_one_space(self):
        line = format_line("X" * 60, Money(1), width=40)
        assert line == "X" * 60 + " 1:00 SEK"


class TestRenderReceipt:
    def test_layout(self):
        text = render_receipt(settled_receipt())
        lines = text.splitlines()

        assert lines[0] == RECEIPT_HEADER
        assert lines[1] == "Time of Sale : 2026-03-02 09:30"
        assert lines[-1] == RECEIPT_FOOTER
        assert any(l.startswith("Barilla Pasta 3 x 15:00") and l.endswith("45:00 SEK") for l in lines)
        assert any(l.startswith("Total :") and l.endswith("50:40 SEK") for l in lines)
        assert any(l.startswith("VAT :") and l.endswith("5:40 SEK") for l in lines)
        assert any(l.startswith("Cash :") and l.endswith("100:00 SEK") for l in lines)
        assert any(l.startswith("Change :") and l.endswith("49:60 SEK") for l in lines)
        assert not any(l.startswith("Discount :") for l in lines)

    def test_amount_column_aligned(self):
        text = render_receipt(settled_receipt())
        for line in text.splitlines():
            if line.endswith(" SEK"):
                assert len(line) == 44

    def test_discount_line_when_discounted(self):
        text = render_receipt(settled_receipt(discount=Money("2.25")))
        assert "Discount :" in text
        assert "-2:25 SEK" in text


class TestStreamReceiptPrinter:
    def test_writes_to_stream(self):
        stream = io.StringIO()
        printer = StreamReceiptPrinter(stream)
        printer.print_receipt(settled_receipt())
        assert stream.getvalue().startswith(RECEIPT_HEADER)
        assert printer.printed_count == 1
