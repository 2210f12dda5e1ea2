"""
POS Core Primitives - Shared Value Types
==========================================
Engine-agnostic building blocks consumed by every POS engine.

- Pure Python, immutable (frozen dataclasses)
- Deterministic (same input, same output)

Primitives:
    money  - fixed-point monetary value with half-up rounding
    item   - catalog item snapshot (price + VAT rate)
"""

from core.primitives.item import CatalogItem, make_item
from core.primitives.money import (
    DEFAULT_CURRENCY,
    MONEY_SCALE,
    Money,
    round_money,
    to_decimal,
)

__all__ = [
    "CatalogItem",
    "DEFAULT_CURRENCY",
    "MONEY_SCALE",
    "Money",
    "make_item",
    "round_money",
    "to_decimal",
]
