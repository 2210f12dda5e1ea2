"""
POS Reporting Engine - Revenue Observers
==========================================
Sale observers receive the paid amount of every completed sale.

RevenueTracker     - running revenue and sale count, read by UIs
RevenueLogObserver - writes the running revenue to the pos.revenue
                     logger (route it to a file via LOGGING config)
"""

from __future__ import annotations

import logging
from typing import Optional

from core.primitives.money import Money

logger = logging.getLogger("pos.revenue")


class RevenueTracker:
    def __init__(self):
        self._revenue = Money.zero()
        self._sale_count = 0

    def on_sale_completed(self, total_paid: Money) -> None:
        self._revenue = self._revenue + total_paid
        self._sale_count += 1

    @property
    def revenue(self) -> Money:
        return self._revenue

    @property
    def sale_count(self) -> int:
        return self._sale_count


class RevenueLogObserver:
    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger
        self._revenue = Money.zero()

    def on_sale_completed(self, total_paid: Money) -> None:
        self._revenue = self._revenue + total_paid
        self._log.info(f"Total revenue: {self._revenue} (last sale {total_paid})")

    @property
    def revenue(self) -> Money:
        return self._revenue
