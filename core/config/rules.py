"""
POS Core Config - Discount Rules
==================================
Doctrine: No hardcoded discount rates in engine logic.
Customer tiers, volume tiers, item rates and bundles are data,
served by a DiscountRuleStore and evaluated by the promotion
engine's pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Protocol, Tuple

from core.primitives.money import Money, Number, to_decimal


def _rate(value: Number) -> Decimal:
    rate = to_decimal(value)
    if not 0 <= rate <= 1:
        raise ValueError(f"Discount rate must be between 0 and 1, got {rate}.")
    return rate


# ══════════════════════════════════════════════════════════════
# RULE VALUES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VolumeTier:
    """Applies `rate` when the pre-discount total is strictly above `threshold`."""

    threshold: Money
    rate: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.threshold, Money):
            raise TypeError("threshold must be Money.")
        object.__setattr__(self, "rate", _rate(self.rate))


@dataclass(frozen=True)
class BundleRule:
    """
    Combination discount.

    Qualifies when every id in `item_ids` is present in the sale.
    The rate applies to the summed subtotal of the member lines only.
    """

    bundle_id: str
    item_ids: FrozenSet[str]
    rate: Decimal
    name: str = ""

    def __post_init__(self) -> None:
        if not self.bundle_id:
            raise ValueError("bundle_id must be non-empty.")
        ids = frozenset(self.item_ids)
        if not ids:
            raise ValueError(f"Bundle '{self.bundle_id}' requires at least one item.")
        object.__setattr__(self, "item_ids", ids)
        object.__setattr__(self, "rate", _rate(self.rate))


@dataclass(frozen=True)
class DiscountRules:
    """Complete, immutable rule set consumed by one pipeline run."""

    customer_rates: Dict[str, Decimal] = field(default_factory=dict)
    item_rates: Dict[str, Decimal] = field(default_factory=dict)
    volume_tiers: Tuple[VolumeTier, ...] = ()
    bundles: Tuple[BundleRule, ...] = ()

    def customer_rate(self, customer_id: str | None) -> Decimal:
        if customer_id is None:
            return Decimal(0)
        return self.customer_rates.get(customer_id, Decimal(0))

    def item_rate(self, item_id: str) -> Decimal | None:
        return self.item_rates.get(item_id)

    def tiers_descending(self) -> Tuple[VolumeTier, ...]:
        return tuple(sorted(self.volume_tiers, key=lambda t: t.threshold, reverse=True))


# ══════════════════════════════════════════════════════════════
# RULE STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class DiscountRuleStore(Protocol):
    """
    Source of discount rules.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_rules(self) -> DiscountRules:
        """Return a snapshot of the currently configured rules."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY RULE STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemoryDiscountRuleStore:
    """Simple in-memory rule store for testing and bootstrap."""

    def __init__(self, rules: DiscountRules | None = None) -> None:
        rules = rules or DiscountRules()
        self._customer_rates: Dict[str, Decimal] = dict(rules.customer_rates)
        self._item_rates: Dict[str, Decimal] = dict(rules.item_rates)
        self._volume_tiers: list[VolumeTier] = list(rules.volume_tiers)
        self._bundles: list[BundleRule] = list(rules.bundles)

    def set_customer_rate(self, customer_id: str, rate: Number) -> None:
        self._customer_rates[customer_id] = _rate(rate)

    def set_item_rate(self, item_id: str, rate: Number) -> None:
        self._item_rates[item_id] = _rate(rate)

    def add_volume_tier(self, threshold: Money, rate: Number) -> None:
        self._volume_tiers.append(VolumeTier(threshold=threshold, rate=rate))

    def add_bundle(
        self,
        bundle_id: str,
        item_ids: Iterable[str],
        rate: Number,
        name: str = "",
    ) -> None:
        if any(b.bundle_id == bundle_id for b in self._bundles):
            raise ValueError(f"Bundle '{bundle_id}' already configured.")
        self._bundles.append(
            BundleRule(bundle_id=bundle_id, item_ids=frozenset(item_ids),
                       rate=rate, name=name)
        )

    def get_rules(self) -> DiscountRules:
        return DiscountRules(
            customer_rates=dict(self._customer_rates),
            item_rates=dict(self._item_rates),
            volume_tiers=tuple(self._volume_tiers),
            bundles=tuple(self._bundles),
        )


def default_discount_rules() -> DiscountRules:
    """Rule set shipped with the demo terminal."""
    return DiscountRules(
        customer_rates={
            "1001": Decimal("0.10"),
            "1002": Decimal("0.05"),
            "1003": Decimal("0.15"),
        },
        item_rates={"5": Decimal("0.05")},
        volume_tiers=(
            VolumeTier(threshold=Money(1000), rate=Decimal("0.03")),
            VolumeTier(threshold=Money(500), rate=Decimal("0.02")),
        ),
        bundles=(
            BundleRule(
                bundle_id="breakfast",
                name="Cornflakes + Milk",
                item_ids=frozenset({"1", "3"}),
                rate=Decimal("0.10"),
            ),
        ),
    )
