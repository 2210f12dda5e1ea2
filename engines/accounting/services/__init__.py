"""
POS Accounting Engine - Bookkeeping
=====================================
External accounting reference implementation.

record_sale()        - keep the completed-sale summary (the journal)
update_statistics()  - running revenue figures for management

Accounting is management-first, not statutory. Nothing here is
persisted across restarts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from core.primitives.money import Money

if TYPE_CHECKING:
    from engines.retail.events import SaleSummary

logger = logging.getLogger("pos.accounting")


@dataclass(frozen=True)
class SalesStatistics:
    sale_count: int
    revenue: Money
    largest_sale: Optional[Money]

    @property
    def average_sale(self) -> Money:
        if self.sale_count == 0:
            return Money.zero(self.revenue.currency)
        return Money(self.revenue.amount / self.sale_count, self.revenue.currency)


class AccountingSystem:
    def __init__(self):
        self._journal: List["SaleSummary"] = []
        self._sale_count = 0
        self._revenue = Money.zero()
        self._largest_sale: Optional[Money] = None

    def record_sale(self, summary: "SaleSummary") -> None:
        self._journal.append(summary)
        logger.info(
            f"Journal: sale {summary.sale_id} total {summary.total_with_vat} "
            f"(VAT {summary.total_vat}, discount {summary.discount})"
        )

    def update_statistics(self, total_paid: Money) -> None:
        self._sale_count += 1
        self._revenue = self._revenue + total_paid
        if self._largest_sale is None or total_paid > self._largest_sale:
            self._largest_sale = total_paid
        logger.debug(
            f"Statistics: {self._sale_count} sales, revenue {self._revenue}"
        )

    def journal(self) -> Tuple["SaleSummary", ...]:
        return tuple(self._journal)

    def statistics(self) -> SalesStatistics:
        return SalesStatistics(
            sale_count=self._sale_count,
            revenue=self._revenue,
            largest_sale=self._largest_sale,
        )
