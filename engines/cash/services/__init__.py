"""
POS Cash Engine - Settlement and Till Ledger
==============================================
PaymentSettlement turns tendered cash into a PaymentRecord.
CashRegister is the till: it records every settled payment and
tracks the drawer balance.

Settlement is permissive: tendered < total due produces negative
change. Whether to refuse underpayment is decided by the caller
(see engines.retail.policies.payment_must_cover_total_policy).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Protocol, Tuple

from core.primitives.money import Money

logger = logging.getLogger("pos.cash")


# ══════════════════════════════════════════════════════════════
# PAYMENT RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PaymentRecord:
    """Immutable proof of a cash settlement."""

    tendered: Money
    total_due: Money
    change: Money
    settled_at: datetime

    @property
    def amount_paid(self) -> Money:
        """What the till keeps: tendered minus change handed back."""
        return self.tendered - self.change

    def to_dict(self) -> dict:
        return {
            "tendered": self.tendered.to_dict(),
            "total_due": self.total_due.to_dict(),
            "change": self.change.to_dict(),
            "settled_at": self.settled_at.isoformat(),
        }


# ══════════════════════════════════════════════════════════════
# SETTLEMENT
# ══════════════════════════════════════════════════════════════

class PaymentSettlement:
    """Stateless change computation."""

    @staticmethod
    def compute_change(tendered: Money, total_due: Money) -> Money:
        return tendered - total_due

    def settle(
        self,
        tendered: Money,
        total_due: Money,
        settled_at: datetime,
    ) -> PaymentRecord:
        change = self.compute_change(tendered, total_due)
        if change.is_negative():
            logger.warning(
                f"Underpayment accepted: tendered {tendered}, due {total_due}, "
                f"change {change}"
            )
        return PaymentRecord(
            tendered=tendered,
            total_due=total_due,
            change=change,
            settled_at=settled_at,
        )


# ══════════════════════════════════════════════════════════════
# TILL LEDGER
# ══════════════════════════════════════════════════════════════

class TillLedger(Protocol):
    def record_payment(self, sale_id: str, payment: PaymentRecord) -> None:
        ...  # pragma: no cover


class CashRegister:
    """In-memory till: payments in arrival order plus running balance."""

    def __init__(self, opening_balance: Money | None = None):
        self._balance = opening_balance or Money.zero()
        self._payments: List[Tuple[str, PaymentRecord]] = []

    def record_payment(self, sale_id: str, payment: PaymentRecord) -> None:
        self._payments.append((sale_id, payment))
        self._balance = self._balance + payment.amount_paid
        logger.info(
            f"Payment recorded for sale {sale_id}: "
            f"paid {payment.amount_paid}, balance {self._balance}"
        )

    @property
    def balance(self) -> Money:
        return self._balance

    @property
    def payment_count(self) -> int:
        return len(self._payments)

    def payments(self) -> Tuple[Tuple[str, PaymentRecord], ...]:
        return tuple(self._payments)
