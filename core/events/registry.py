"""
POS Completion Bus - Registry
===============================
Holds the two post-sale extension points:

    completion handlers  - receive the full SaleSummary and replicate
                           state (accounting, inventory)
    sale observers       - receive only the amount paid, for lightweight
                           aggregation (revenue displays, revenue logs)

Rules:
- Registration order is notification order
- The same object may not be registered twice on one extension point
- In-memory only, thread-safe
- Registered once per process (or per run), not changed mid-sale
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING, Protocol, Tuple

from core.events.errors import DuplicateRegistrationError, InvalidCompletionTarget

if TYPE_CHECKING:
    from core.primitives.money import Money
    from engines.retail.events import SaleSummary

logger = logging.getLogger("pos.events")


HANDLER_EXTENSION_POINT = "completion handler"
OBSERVER_EXTENSION_POINT = "sale observer"


class SaleCompletionHandler(Protocol):
    """Replicates a settled sale into an external system."""

    name: str

    def handle(self, summary: "SaleSummary") -> None:
        ...  # pragma: no cover


class SaleObserver(Protocol):
    """Gets told how much was paid, nothing else."""

    def on_sale_completed(self, total_paid: "Money") -> None:
        ...  # pragma: no cover


def target_name(target: object) -> str:
    name = getattr(target, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(target).__qualname__


class CompletionRegistry:
    """In-memory registry of completion handlers and sale observers."""

    def __init__(self):
        self._handlers: list[SaleCompletionHandler] = []
        self._observers: list[SaleObserver] = []
        self._lock = Lock()

    @staticmethod
    def _register(
        targets: list,
        target: object,
        extension_point: str,
        method: str,
    ) -> None:
        if not callable(getattr(target, method, None)):
            raise InvalidCompletionTarget(extension_point, target, method)

        for existing in targets:
            if existing is target:
                raise DuplicateRegistrationError(extension_point, target_name(target))

        targets.append(target)

    def register_handler(self, handler: SaleCompletionHandler) -> None:
        with self._lock:
            self._register(self._handlers, handler, HANDLER_EXTENSION_POINT, "handle")
        logger.info(f"Completion handler registered: {target_name(handler)}")

    def register_observer(self, observer: SaleObserver) -> None:
        with self._lock:
            self._register(
                self._observers, observer, OBSERVER_EXTENSION_POINT, "on_sale_completed",
            )
        logger.info(f"Sale observer registered: {target_name(observer)}")

    def handlers(self) -> Tuple[SaleCompletionHandler, ...]:
        with self._lock:
            return tuple(self._handlers)

    def observers(self) -> Tuple[SaleObserver, ...]:
        with self._lock:
            return tuple(self._observers)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)
