"""
POS Integration - Receipt Printing
====================================
ReceiptSink is the contract the completion notifier prints through.
StreamReceiptPrinter renders a plain-text receipt to any text stream
(stdout by default).

Layout: item and total labels on the left, amounts right-aligned so
that they end at `width`, followed by the currency code. Amounts use
the Swedish receipt convention of ':' as the decimal mark.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, List, Optional, Protocol, TextIO

from core.config.settings import RECEIPT_WIDTH
from core.primitives.money import Money

if TYPE_CHECKING:
    from engines.retail.receipt import Receipt

logger = logging.getLogger("pos.integration")

RECEIPT_HEADER = "------------------ Begin receipt -------------------"
RECEIPT_FOOTER = "------------------ End receipt ---------------------"
TIME_FORMAT = "%Y-%m-%d %H:%M"


class ReceiptSink(Protocol):
    def print_receipt(self, receipt: "Receipt") -> None:
        ...  # pragma: no cover


def format_amount(amount: Money, decimal_mark: str = ":") -> str:
    return f"{amount.amount:.2f}".replace(".", decimal_mark)


def format_line(left: str, amount: Money, width: int = RECEIPT_WIDTH) -> str:
    value = format_amount(amount)
    padding = max(width - len(left) - len(value), 1)
    return f"{left}{' ' * padding}{value} {amount.currency}"


def render_receipt(receipt: "Receipt", width: int = RECEIPT_WIDTH) -> str:
    out: List[str] = [
        RECEIPT_HEADER,
        f"Time of Sale : {receipt.sale_time.strftime(TIME_FORMAT)}",
        "",
    ]

    for line in receipt.lines:
        left = f"{line.item.name} {line.quantity} x {format_amount(line.item.price)}"
        out.append(format_line(left, line.subtotal, width))
    out.append("")

    if receipt.has_discount:
        out.append(format_line("Discount :", receipt.discount.negate(), width))
    out.append(format_line("Total :", receipt.total_with_vat, width))
    out.append(format_line("VAT :", receipt.total_vat, width))
    out.append("")

    out.append(format_line("Cash :", receipt.payment.tendered, width))
    out.append(format_line("Change :", receipt.payment.change, width))
    out.append(RECEIPT_FOOTER)
    return "\n".join(out)


class StreamReceiptPrinter:
    def __init__(self, stream: Optional[TextIO] = None, width: int = RECEIPT_WIDTH):
        self._stream = stream
        self._width = width
        self._printed = 0

    def print_receipt(self, receipt: "Receipt") -> None:
        stream = self._stream or sys.stdout
        stream.write(render_receipt(receipt, self._width) + "\n")
        stream.flush()
        self._printed += 1
        logger.debug(f"Receipt printed for sale {receipt.sale_id}")

    @property
    def printed_count(self) -> int:
        return self._printed
