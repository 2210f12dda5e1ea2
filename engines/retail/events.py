"""
POS Retail Engine - Event Types and Payload Builders
======================================================
Retail owns the sale lifecycle: open sale -> add lines ->
apply discount -> settle -> completion fan-out.

The completed-sale event is consumed by accounting (bookkeeping)
and inventory (stock issue). Cash records the payment directly,
before the event is published.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Tuple

from core.primitives.money import Money
from engines.retail.errors import SaleNotSettled

if TYPE_CHECKING:
    from engines.retail.sale import LineItem, Sale


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

RETAIL_SALE_COMPLETED_V1 = "retail.sale.completed.v1"


# ══════════════════════════════════════════════════════════════
# SALE SUMMARY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SaleSummary:
    """Everything a completion handler may read about a paid sale."""

    sale_id: str
    customer_id: Optional[str]
    sale_time: datetime
    lines: Tuple["LineItem", ...]
    total: Money
    total_vat: Money
    discount: Money
    total_with_vat: Money
    amount_paid: Money
    tendered: Money
    change: Money
    event_type: str = RETAIL_SALE_COMPLETED_V1

    def to_payload(self) -> dict:
        return {
            "event_type": self.event_type,
            "sale_id": self.sale_id,
            "customer_id": self.customer_id,
            "sale_time": self.sale_time.isoformat(),
            "lines": [
                {
                    "item_id": line.item_id,
                    "quantity": line.quantity,
                    "subtotal": str(line.subtotal.amount),
                    "vat_amount": str(line.vat_amount.amount),
                }
                for line in self.lines
            ],
            "total": str(self.total.amount),
            "total_vat": str(self.total_vat.amount),
            "discount": str(self.discount.amount),
            "total_with_vat": str(self.total_with_vat.amount),
            "amount_paid": str(self.amount_paid.amount),
            "tendered": str(self.tendered.amount),
            "change": str(self.change.amount),
            "currency": self.total.currency,
        }


# ══════════════════════════════════════════════════════════════
# PAYLOAD BUILDERS
# ══════════════════════════════════════════════════════════════

def build_sale_summary(sale: "Sale") -> SaleSummary:
    receipt = sale.receipt
    if receipt is None:
        raise SaleNotSettled(sale.sale_id)

    payment = receipt.payment
    return SaleSummary(
        sale_id=receipt.sale_id,
        customer_id=receipt.customer_id,
        sale_time=receipt.sale_time,
        lines=receipt.lines,
        total=receipt.total,
        total_vat=receipt.total_vat,
        discount=receipt.discount,
        total_with_vat=receipt.total_with_vat,
        amount_paid=payment.amount_paid,
        tendered=payment.tendered,
        change=payment.change,
    )
