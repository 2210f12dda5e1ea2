"""
POS Promotion Engine - Application Service
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from core.config.rules import DiscountRuleStore, InMemoryDiscountRuleStore, default_discount_rules
from core.primitives.money import Money
from engines.promotion.policies import DiscountPipeline, DiscountResult

if TYPE_CHECKING:
    from engines.retail.sale import LineItem

logger = logging.getLogger("pos.promotion")


class DiscountAuditStore:
    """Every computed DiscountResult, in computation order."""

    def __init__(self):
        self._results: List[DiscountResult] = []
        self._by_customer: Dict[str, int] = {}

    def record(self, result: DiscountResult) -> None:
        self._results.append(result)
        if result.customer_id is not None:
            self._by_customer[result.customer_id] = (
                self._by_customer.get(result.customer_id, 0) + 1
            )

    def results(self) -> tuple:
        return tuple(self._results)

    def last(self) -> Optional[DiscountResult]:
        return self._results[-1] if self._results else None

    def requests_for(self, customer_id: str) -> int:
        return self._by_customer.get(customer_id, 0)

    @property
    def result_count(self) -> int:
        return len(self._results)


class DiscountService:
    def __init__(
        self,
        rule_store: DiscountRuleStore | None = None,
        audit_store: DiscountAuditStore | None = None,
    ):
        self._rule_store = rule_store or InMemoryDiscountRuleStore(default_discount_rules())
        self._audit_store = audit_store or DiscountAuditStore()

    def evaluate(
        self,
        lines: Iterable["LineItem"],
        pre_discount_total: Money,
        customer_id: Optional[str] = None,
    ) -> DiscountResult:
        pipeline = DiscountPipeline(self._rule_store.get_rules())
        result = pipeline.evaluate(lines, pre_discount_total, customer_id)
        self._audit_store.record(result)

        logger.info(
            f"Discount for customer {customer_id or '-'}: {result.total} "
            f"(customer {result.customer}, volume {result.volume}, "
            f"item {result.item}, bundle {result.bundle})"
        )
        for step in result.trace:
            logger.debug(f"  {step}")
        return result

    def compute_discount(
        self,
        lines: Iterable["LineItem"],
        pre_discount_total: Money,
        customer_id: Optional[str] = None,
    ) -> Money:
        return self.evaluate(lines, pre_discount_total, customer_id).total

    @property
    def last_result(self) -> Optional[DiscountResult]:
        return self._audit_store.last()

    @property
    def audit_store(self) -> DiscountAuditStore:
        return self._audit_store
