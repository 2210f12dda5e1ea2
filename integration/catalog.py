"""
POS Integration - Item Catalog
================================
Contract the sale engine uses to resolve scanned item ids.

find_item() never raises for business outcomes. It returns a
CatalogLookup tagged with one of:

    FOUND        - item attached
    NOT_FOUND    - the id does not exist (permanent)
    UNAVAILABLE  - backend failure (transient, retry later)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Protocol

from core.primitives.item import CatalogItem, make_item

logger = logging.getLogger("pos.integration")


class LookupStatus(Enum):
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class CatalogLookup:
    item_id: str
    status: LookupStatus
    item: Optional[CatalogItem] = None
    detail: str = ""

    def __post_init__(self):
        if (self.status is LookupStatus.FOUND) != (self.item is not None):
            raise ValueError("Exactly FOUND lookups carry an item.")

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def hit(cls, item: CatalogItem) -> CatalogLookup:
        return cls(item_id=item.item_id, status=LookupStatus.FOUND, item=item)

    @classmethod
    def not_found(cls, item_id: str) -> CatalogLookup:
        return cls(item_id=item_id, status=LookupStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls, item_id: str, detail: str) -> CatalogLookup:
        return cls(item_id=item_id, status=LookupStatus.UNAVAILABLE, detail=detail)


class Catalog(Protocol):
    def find_item(self, item_id: str) -> CatalogLookup:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CATALOG
# ══════════════════════════════════════════════════════════════

class InMemoryCatalog:
    """
    Dictionary-backed catalog for terminals and tests.

    Outages are simulated two ways: specific ids that always fail
    (the demo uses "9999"), or the whole catalog taken offline.
    """

    def __init__(
        self,
        items: Iterable[CatalogItem] = (),
        unavailable_ids: Iterable[str] = (),
    ):
        self._items: Dict[str, CatalogItem] = {}
        self._unavailable_ids = frozenset(unavailable_ids)
        self._offline_reason: Optional[str] = None
        for item in items:
            self.add_item(item)

    def add_item(self, item: CatalogItem) -> None:
        if item.item_id in self._items:
            raise ValueError(f"Item '{item.item_id}' already in catalog.")
        self._items[item.item_id] = item

    def set_offline(self, reason: str) -> None:
        self._offline_reason = reason
        logger.warning(f"Catalog offline: {reason}")

    def restore(self) -> None:
        self._offline_reason = None
        logger.info("Catalog back online")

    def find_item(self, item_id: str) -> CatalogLookup:
        if self._offline_reason is not None:
            return CatalogLookup.unavailable(item_id, self._offline_reason)

        if item_id in self._unavailable_ids:
            logger.warning(f"Catalog backend failed for item {item_id}")
            return CatalogLookup.unavailable(
                item_id, "Could not connect to catalog database",
            )

        item = self._items.get(item_id)
        if item is None:
            return CatalogLookup.not_found(item_id)
        return CatalogLookup.hit(item)

    def __len__(self) -> int:
        return len(self._items)


# ══════════════════════════════════════════════════════════════
# ADAPTER FOR REMOTE BACKENDS
# ══════════════════════════════════════════════════════════════

TRANSIENT_ERRORS = (ConnectionError, TimeoutError, OSError)


class CatalogAdapter:
    """
    Wraps a raw fetch callable (returns the item or None) into the
    Catalog contract. Transport failures become UNAVAILABLE lookups.
    """

    def __init__(self, fetch: Callable[[str], Optional[CatalogItem]]):
        self._fetch = fetch

    def find_item(self, item_id: str) -> CatalogLookup:
        try:
            item = self._fetch(item_id)
        except TRANSIENT_ERRORS as exc:
            logger.warning(
                f"Catalog backend failed for item {item_id}: {exc}",
                exc_info=True,
            )
            return CatalogLookup.unavailable(item_id, str(exc) or type(exc).__name__)

        if item is None:
            return CatalogLookup.not_found(item_id)
        return CatalogLookup.hit(item)


def default_catalog() -> InMemoryCatalog:
    """Demo product range with the outage trigger id '9999'."""
    return InMemoryCatalog(
        items=(
            make_item("1", "Kellogg's Cornflakes", 10.0, 0.12,
                      "500g, whole grain, fortified with vitamins"),
            make_item("2", "Barilla Pasta", 15.0, 0.12,
                      "500g, spaghetti, bronze cut"),
            make_item("3", "Arla Milk", 22.0, 0.12,
                      "1L, organic whole milk, pasteurized"),
            make_item("4", "Wasa Crispbread", 30.0, 0.25,
                      "275g, whole grain, low sugar"),
            make_item("5", "Fazer Chocolate", 75.0, 0.25,
                      "200g, milk chocolate, Finnish quality"),
        ),
        unavailable_ids=("9999",),
    )
