"""
POS Inventory Engine - Event Subscriptions
============================================
Inventory reacts to retail.sale.completed.v1 by issuing stock for
every sold line.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from engines.inventory.services import InventorySystem

if TYPE_CHECKING:
    from engines.retail.events import SaleSummary

logger = logging.getLogger("pos.inventory")


class InventoryCompletionHandler:
    name = "inventory"

    def __init__(self, inventory: InventorySystem):
        self._inventory = inventory

    def handle(self, summary: "SaleSummary") -> None:
        if not self._inventory.apply_sale(summary.lines, sale_id=summary.sale_id):
            logger.warning(
                f"Sale {summary.sale_id}: inventory partially updated, "
                f"see reconciliation queue"
            )
