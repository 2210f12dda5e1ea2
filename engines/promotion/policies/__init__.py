"""
POS Promotion Engine - Discount Policies
==========================================
Pure discount computation. No I/O, no logging, no clock.

A sale's discount is the sum of four independent components:

    customer  - pre-discount total x customer tier rate
    volume    - pre-discount total x highest tier strictly exceeded
    item      - sum of line subtotal x per-item rate
    bundle    - for each complete bundle, member subtotals x bundle rate

Each component is rounded on its own (Money rounds after every
operation), then the components are added.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from core.config.rules import DiscountRules
from core.primitives.money import Money

if TYPE_CHECKING:
    from engines.retail.sale import LineItem


@dataclass(frozen=True)
class DiscountResult:
    """Discount total with its per-component breakdown."""

    total: Money
    customer: Money
    volume: Money
    item: Money
    bundle: Money
    customer_id: Optional[str] = None
    applied_bundles: Tuple[str, ...] = ()
    trace: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total": self.total.to_dict(),
            "customer": self.customer.to_dict(),
            "volume": self.volume.to_dict(),
            "item": self.item.to_dict(),
            "bundle": self.bundle.to_dict(),
            "customer_id": self.customer_id,
            "applied_bundles": list(self.applied_bundles),
            "trace": list(self.trace),
        }


# ══════════════════════════════════════════════════════════════
# COMPONENTS
# ══════════════════════════════════════════════════════════════

def customer_discount(
    total: Money, customer_id: Optional[str], rules: DiscountRules,
) -> Money:
    return total.multiply(rules.customer_rate(customer_id))


def volume_discount(total: Money, rules: DiscountRules) -> Money:
    """Step function: only the highest tier whose threshold is exceeded."""
    for tier in rules.tiers_descending():
        if total > tier.threshold:
            return total.multiply(tier.rate)
    return Money.zero(total.currency)


def item_discount(lines: Sequence["LineItem"], rules: DiscountRules) -> Money:
    discount = Money.zero()
    for line in lines:
        rate = rules.item_rate(line.item_id)
        if rate is not None:
            discount = discount + line.subtotal.multiply(rate)
    return discount


def bundle_discount(
    lines: Sequence["LineItem"], rules: DiscountRules,
) -> Tuple[Money, Tuple[str, ...]]:
    """Returns the bundle component and the ids of bundles that applied."""
    present = {line.item_id for line in lines}
    discount = Money.zero()
    applied: List[str] = []
    for bundle in rules.bundles:
        if not bundle.item_ids <= present:
            continue
        member_total = Money.zero()
        for line in lines:
            if line.item_id in bundle.item_ids:
                member_total = member_total + line.subtotal
        discount = discount + member_total.multiply(bundle.rate)
        applied.append(bundle.bundle_id)
    return discount, tuple(applied)


# ══════════════════════════════════════════════════════════════
# PIPELINE
# ══════════════════════════════════════════════════════════════

class DiscountPipeline:
    """Evaluates every component against one rule snapshot."""

    def __init__(self, rules: DiscountRules):
        self._rules = rules

    @property
    def rules(self) -> DiscountRules:
        return self._rules

    def evaluate(
        self,
        lines: Iterable["LineItem"],
        pre_discount_total: Money,
        customer_id: Optional[str] = None,
    ) -> DiscountResult:
        lines = tuple(lines)
        rules = self._rules

        customer = customer_discount(pre_discount_total, customer_id, rules)
        volume = volume_discount(pre_discount_total, rules)
        item = item_discount(lines, rules)
        bundle, applied = bundle_discount(lines, rules)

        trace = [
            f"customer {customer_id or '-'} "
            f"@ {rules.customer_rate(customer_id)}: {customer}",
            f"volume on {pre_discount_total}: {volume}",
            f"item rates: {item}",
            f"bundles {', '.join(applied) or '-'}: {bundle}",
        ]
        return DiscountResult(
            total=customer + volume + item + bundle,
            customer=customer,
            volume=volume,
            item=item,
            bundle=bundle,
            customer_id=customer_id,
            applied_bundles=applied,
            trace=tuple(trace),
        )
