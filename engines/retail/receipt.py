"""
POS Retail Engine - Receipt Snapshot
======================================
Frozen copy of a settled sale, taken at settlement time.

The receipt never reads the Sale again once captured: printers and
audit consumers see the exact figures the customer paid against.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Tuple

from core.primitives.money import Money
from engines.cash.services import PaymentRecord

if TYPE_CHECKING:
    from engines.retail.sale import LineItem, Sale


@dataclass(frozen=True)
class Receipt:
    sale_id: str
    sale_time: datetime
    settled_at: datetime
    lines: Tuple["LineItem", ...]
    total: Money
    total_vat: Money
    discount: Money
    total_with_vat: Money
    customer_id: Optional[str]
    payment: PaymentRecord

    @classmethod
    def capture(cls, sale: "Sale", payment: PaymentRecord) -> Receipt:
        return cls(
            sale_id=sale.sale_id,
            sale_time=sale.created_at,
            settled_at=payment.settled_at,
            lines=sale.lines,
            total=sale.calculate_total(),
            total_vat=sale.calculate_total_vat(),
            discount=sale.discount_amount,
            total_with_vat=sale.calculate_total_with_vat(),
            customer_id=sale.customer_id,
            payment=payment,
        )

    @property
    def has_discount(self) -> bool:
        return not self.discount.is_zero()

    def to_dict(self) -> dict:
        return {
            "sale_id": self.sale_id,
            "sale_time": self.sale_time.isoformat(),
            "settled_at": self.settled_at.isoformat(),
            "lines": [line.to_dict() for line in self.lines],
            "total": self.total.to_dict(),
            "total_vat": self.total_vat.to_dict(),
            "discount": self.discount.to_dict(),
            "total_with_vat": self.total_with_vat.to_dict(),
            "customer_id": self.customer_id,
            "payment": self.payment.to_dict(),
        }
