"""
POS Core Config - Public API
===============================
Admin-configurable discount rules and runtime settings.
Doctrine: No hardcoded rates in engine logic.
"""

from core.config.rules import (
    BundleRule,
    DiscountRules,
    DiscountRuleStore,
    InMemoryDiscountRuleStore,
    VolumeTier,
    default_discount_rules,
)

__all__ = [
    "BundleRule",
    "DiscountRules",
    "DiscountRuleStore",
    "InMemoryDiscountRuleStore",
    "VolumeTier",
    "default_discount_rules",
]
