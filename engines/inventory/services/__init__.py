"""
POS Inventory Engine - Stock Levels
=====================================
External inventory reference implementation.

RULES:
- Stock is an integer per item id, never negative
- decrement_stock() is atomic: check and subtract under one lock
- apply_sale() does NOT roll back lines already decremented when a
  later line fails. Failed lines are queued for manual reconciliation.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from engines.retail.sale import LineItem

logger = logging.getLogger("pos.inventory")


@dataclass(frozen=True)
class ReconciliationEntry:
    item_id: str
    requested: int
    available: Optional[int]
    sale_id: Optional[str] = None


class InventorySystem:
    def __init__(self, initial_stock: Optional[Mapping[str, int]] = None):
        self._lock = threading.Lock()
        self._stock: Dict[str, int] = {}
        self._reconciliation: List[ReconciliationEntry] = []
        for item_id, quantity in (initial_stock or {}).items():
            self.receive_stock(item_id, quantity)

    def receive_stock(self, item_id: str, quantity: int) -> int:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
            raise ValueError(f"Received quantity must be a non-negative integer, got {quantity!r}.")
        with self._lock:
            self._stock[item_id] = self._stock.get(item_id, 0) + quantity
            return self._stock[item_id]

    def stock_level(self, item_id: str) -> Optional[int]:
        with self._lock:
            return self._stock.get(item_id)

    def decrement_stock(self, item_id: str, quantity: int) -> bool:
        with self._lock:
            available = self._stock.get(item_id)
            if available is None or available < quantity:
                return False
            self._stock[item_id] = available - quantity
            return True

    def apply_sale(self, lines: Iterable["LineItem"], sale_id: Optional[str] = None) -> bool:
        """Decrement every line; True only when all lines succeeded."""
        all_applied = True
        for line in lines:
            if self.decrement_stock(line.item_id, line.quantity):
                continue
            all_applied = False
            entry = ReconciliationEntry(
                item_id=line.item_id,
                requested=line.quantity,
                available=self.stock_level(line.item_id),
                sale_id=sale_id,
            )
            self._reconciliation.append(entry)
            logger.warning(
                f"Stock decrement failed for item {line.item_id} "
                f"(requested {line.quantity}, available {entry.available}); "
                f"queued for reconciliation"
            )
        return all_applied

    def reconciliation_queue(self) -> Tuple[ReconciliationEntry, ...]:
        return tuple(self._reconciliation)
