"""
POS Retail Engine - Event Subscriptions
=========================================
Retail subscribes to no external events.
Other engines subscribe TO retail.sale.completed.v1:
- accounting books the sale and updates statistics
- inventory issues stock for each sold line
- reporting observers receive the amount paid

subscribe_defaults() wires the reference collaborators in that order.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.events.registry import CompletionRegistry, SaleObserver
from engines.accounting.services import AccountingSystem
from engines.accounting.subscriptions import AccountingCompletionHandler
from engines.inventory.services import InventorySystem
from engines.inventory.subscriptions import InventoryCompletionHandler


def subscribe_defaults(
    registry: CompletionRegistry,
    accounting: Optional[AccountingSystem] = None,
    inventory: Optional[InventorySystem] = None,
    observers: Iterable[SaleObserver] = (),
) -> None:
    if accounting is not None:
        registry.register_handler(AccountingCompletionHandler(accounting))
    if inventory is not None:
        registry.register_handler(InventoryCompletionHandler(inventory))
    for observer in observers:
        registry.register_observer(observer)
