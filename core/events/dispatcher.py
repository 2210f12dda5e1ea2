"""
POS Completion Bus - Dispatcher
=================================
Delivers a settled sale to registered handlers and observers.

Dispatch behavior:
1. Walk targets in registration order
2. Call each target once
3. Catch the target's exception
4. Log failure with traceback
5. Continue to next target
6. NEVER undo the settlement

By the time anything is dispatched the customer has paid.
A broken bookkeeping link must not be able to un-sell the goods.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, List

from core.events.registry import SaleCompletionHandler, SaleObserver, target_name

if TYPE_CHECKING:
    from core.primitives.money import Money
    from engines.retail.events import SaleSummary

logger = logging.getLogger("pos.events")


STAGE_HANDLERS = "completion_handlers"
STAGE_OBSERVERS = "sale_observers"


@dataclass(frozen=True)
class DispatchFailure:
    target: str
    error: str
    error_type: str

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "error": self.error,
            "error_type": self.error_type,
        }


@dataclass
class DispatchResult:
    """Outcome of one dispatch stage. Failures are data, not exceptions."""

    stage: str
    sale_id: str
    notified: int = 0
    failed: int = 0
    failures: List[DispatchFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "stage": self.stage,
            "sale_id": self.sale_id,
            "notified": self.notified,
            "failed": self.failed,
            "failures": [f.to_dict() for f in self.failures],
        }


def _deliver(
    stage: str,
    sale_id: str,
    targets: Iterable[Any],
    call: Callable[[Any], None],
) -> DispatchResult:
    result = DispatchResult(stage=stage, sale_id=sale_id)

    for target in targets:
        name = target_name(target)
        try:
            call(target)
            result.notified += 1
            logger.debug(f"Delivered sale {sale_id} → {name} ({stage})")

        except Exception as exc:
            result.failed += 1
            result.failures.append(
                DispatchFailure(
                    target=name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
            )
            logger.error(
                f"{stage} target failed: {name} for sale {sale_id}: {exc}",
                exc_info=True,
            )
            # Continue to next target

    logger.info(
        f"Dispatch complete: {stage} for sale {sale_id}: "
        f"{result.notified} notified, {result.failed} failed"
    )
    return result


def dispatch_completion(
    summary: "SaleSummary",
    handlers: Iterable[SaleCompletionHandler],
) -> DispatchResult:
    """
    Hand the full SaleSummary to every completion handler.

    This function NEVER raises for handler failures.
    """
    return _deliver(
        STAGE_HANDLERS,
        summary.sale_id,
        handlers,
        lambda handler: handler.handle(summary),
    )


def notify_observers(
    sale_id: str,
    total_paid: "Money",
    observers: Iterable[SaleObserver],
) -> DispatchResult:
    """
    Tell every sale observer how much was paid.

    This function NEVER raises for observer failures.
    """
    return _deliver(
        STAGE_OBSERVERS,
        sale_id,
        observers,
        lambda observer: observer.on_sale_completed(total_paid),
    )
