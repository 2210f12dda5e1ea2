"""
POS Accounting Engine - Event Subscriptions
=============================================
Accounting reacts to retail.sale.completed.v1 by booking the sale
and folding the paid amount into its statistics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from engines.accounting.services import AccountingSystem

if TYPE_CHECKING:
    from engines.retail.events import SaleSummary


class AccountingCompletionHandler:
    name = "accounting"

    def __init__(self, accounting: AccountingSystem):
        self._accounting = accounting

    def handle(self, summary: "SaleSummary") -> None:
        self._accounting.record_sale(summary)
        self._accounting.update_statistics(summary.amount_paid)
