"""
POS Retail Engine - Sale Aggregate
====================================
One customer transaction at one terminal.

Lifecycle:
    OPEN     - items and discounts accepted, totals readable at will
    SETTLED  - payment recorded, receipt captured, nothing accepted

There is no abandoned state. A sale that is never settled is
simply dropped by its owner.

RULES:
- Lines keep first-seen order; re-adding an item id merges quantities
- Lines are immutable values; the aggregate swaps them on merge
- Totals are derived on every read, never cached
- total_with_vat == total + vat - discount, always
- No locks: one sale is driven by one caller at a time
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from core.primitives.item import CatalogItem
from core.primitives.money import Money
from core.time.clock import Clock, get_default_clock
from engines.cash.services import PaymentRecord, PaymentSettlement
from engines.retail.errors import (
    InvalidQuantity,
    SaleAlreadySettled,
    SaleNotOpen,
    SaleNotSettled,
)
from engines.retail.policies import (
    quantity_must_be_positive_policy,
    sale_must_be_open_policy,
)
from engines.retail.receipt import Receipt

logger = logging.getLogger("pos.retail")


class SaleStatus(Enum):
    OPEN = "OPEN"
    SETTLED = "SETTLED"


# ══════════════════════════════════════════════════════════════
# LINE ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LineItem:
    """One product on the sale: catalog snapshot plus quantity."""

    item: CatalogItem
    quantity: int

    def __post_init__(self):
        reason = quantity_must_be_positive_policy(self.quantity)
        if reason is not None:
            raise InvalidQuantity(self.quantity, reason)

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @property
    def subtotal(self) -> Money:
        return self.item.price.multiply(self.quantity)

    @property
    def vat_amount(self) -> Money:
        return self.item.unit_vat().multiply(self.quantity)

    @property
    def total_with_vat(self) -> Money:
        return self.item.unit_price_with_vat().multiply(self.quantity)

    def merged(self, quantity: int) -> LineItem:
        return replace(self, quantity=self.quantity + quantity)

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.item.name,
            "quantity": self.quantity,
            "unit_price": self.item.price.to_dict(),
            "subtotal": self.subtotal.to_dict(),
            "vat_amount": self.vat_amount.to_dict(),
            "total_with_vat": self.total_with_vat.to_dict(),
        }


# ══════════════════════════════════════════════════════════════
# READ VIEWS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ItemRegistration:
    """What the cashier display shows after each scan."""

    item: CatalogItem
    quantity: int
    merged: bool
    running_total: Money
    running_vat: Money


@dataclass(frozen=True)
class SaleTotals:
    total: Money
    total_vat: Money
    discount: Money
    total_with_vat: Money
    line_count: int


# ══════════════════════════════════════════════════════════════
# SALE
# ══════════════════════════════════════════════════════════════

class Sale:
    """The transaction aggregate. Owns every amount calculation."""

    def __init__(self, *, sale_id: Optional[str] = None, clock: Optional[Clock] = None):
        self._clock = clock or get_default_clock()
        self._sale_id = sale_id or uuid.uuid4().hex
        self._created_at = self._clock.now_utc()
        self._lines: List[LineItem] = []
        self._discount = Money.zero()
        self._customer_id: Optional[str] = None
        self._status = SaleStatus.OPEN
        self._payment: Optional[PaymentRecord] = None
        self._receipt: Optional[Receipt] = None
        self._notified = False

    # ── state ─────────────────────────────────────────────────

    @property
    def sale_id(self) -> str:
        return self._sale_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def status(self) -> SaleStatus:
        return self._status

    @property
    def is_open(self) -> bool:
        return self._status is SaleStatus.OPEN

    @property
    def is_settled(self) -> bool:
        return self._status is SaleStatus.SETTLED

    @property
    def is_notified(self) -> bool:
        return self._notified

    @property
    def lines(self) -> Tuple[LineItem, ...]:
        return tuple(self._lines)

    @property
    def discount_amount(self) -> Money:
        return self._discount

    @property
    def has_discount(self) -> bool:
        return not self._discount.is_zero()

    @property
    def customer_id(self) -> Optional[str]:
        return self._customer_id

    @property
    def payment(self) -> Optional[PaymentRecord]:
        return self._payment

    @property
    def receipt(self) -> Optional[Receipt]:
        return self._receipt

    def find_line(self, item_id: str) -> Optional[LineItem]:
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None

    # ── open-phase operations ─────────────────────────────────

    def _require_open(self, operation: str) -> None:
        reason = sale_must_be_open_policy(self, operation)
        if reason is not None:
            raise SaleNotOpen(self._sale_id, operation, reason)

    def add_item(self, item: CatalogItem, quantity: int = 1) -> ItemRegistration:
        self._require_open("add item")
        reason = quantity_must_be_positive_policy(quantity)
        if reason is not None:
            raise InvalidQuantity(quantity, reason)

        merged = False
        for index, line in enumerate(self._lines):
            if line.item_id == item.item_id:
                self._lines[index] = line.merged(quantity)
                line_quantity = self._lines[index].quantity
                merged = True
                break
        else:
            self._lines.append(LineItem(item=item, quantity=quantity))
            line_quantity = quantity

        logger.debug(
            f"Sale {self._sale_id}: {quantity} x {item.item_id} "
            f"({'merged' if merged else 'new line'})"
        )
        return ItemRegistration(
            item=item,
            quantity=line_quantity,
            merged=merged,
            running_total=self.calculate_total_with_vat(),
            running_vat=self.calculate_total_vat(),
        )

    def apply_discount(self, customer_id: Optional[str], discount_amount: Money) -> None:
        """Replace (never accumulate) the sale's discount."""
        self._require_open("apply discount")
        if not isinstance(discount_amount, Money):
            raise TypeError("discount_amount must be Money.")
        self._customer_id = customer_id
        self._discount = discount_amount

    # ── derived reads ─────────────────────────────────────────

    def calculate_total(self) -> Money:
        total = Money.zero()
        for line in self._lines:
            total = total + line.subtotal
        return total

    def calculate_total_vat(self) -> Money:
        total_vat = Money.zero()
        for line in self._lines:
            total_vat = total_vat + line.vat_amount
        return total_vat

    def calculate_total_with_vat(self) -> Money:
        return self.calculate_total() + self.calculate_total_vat() - self._discount

    def totals(self) -> SaleTotals:
        return SaleTotals(
            total=self.calculate_total(),
            total_vat=self.calculate_total_vat(),
            discount=self._discount,
            total_with_vat=self.calculate_total_with_vat(),
            line_count=len(self._lines),
        )

    # ── settlement ────────────────────────────────────────────

    def settle_payment(
        self,
        tendered: Money,
        settlement: Optional[PaymentSettlement] = None,
    ) -> PaymentRecord:
        reason = sale_must_be_open_policy(self, "settle payment")
        if reason is not None:
            raise SaleAlreadySettled(self._sale_id, reason)

        settlement = settlement or PaymentSettlement()
        payment = settlement.settle(
            tendered=tendered,
            total_due=self.calculate_total_with_vat(),
            settled_at=self._clock.now_utc(),
        )
        self._payment = payment
        self._receipt = Receipt.capture(self, payment)
        self._status = SaleStatus.SETTLED

        logger.info(
            f"Sale {self._sale_id} settled: due {payment.total_due}, "
            f"tendered {payment.tendered}, change {payment.change}"
        )
        return payment

    def mark_notified(self) -> None:
        """Called once the till has accepted the payment."""
        if not self.is_settled:
            raise SaleNotSettled(self._sale_id)
        self._notified = True
