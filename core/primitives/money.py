"""
POS Money Primitive - Fixed-Point Monetary Value
==================================================
Used by every other POS component: catalog prices, line totals,
VAT, discounts, payments and revenue figures.

RULES (NON-NEGOTIABLE):
- Two fractional digits, round-half-up after EVERY operation
- Immutable: every operation returns a new Money
- Money x Money is a type error; multiply() takes a plain scalar
- Currency is explicit on every value (single-currency deployment)

Floats are accepted as literals only. They are converted through
their shortest repr, so Money(0.1) is exactly 0.10, never
0.1000000000000000055511151231257827.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from functools import total_ordering
from typing import Union


MONEY_SCALE = 2
DEFAULT_CURRENCY = "SEK"

_QUANTUM = Decimal(1).scaleb(-MONEY_SCALE)

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric literal to Decimal without binary float noise."""
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value.")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(
        f"Cannot convert {type(value).__name__} to a decimal amount."
    )


def round_money(value: Decimal) -> Decimal:
    rounded = value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        # -0.00 collapses to 0.00
        return rounded.copy_abs()
    return rounded


# ══════════════════════════════════════════════════════════════
# MONEY VALUE OBJECT
# ══════════════════════════════════════════════════════════════

@total_ordering
@dataclass(frozen=True)
class Money:
    """
    Signed monetary value scaled to MONEY_SCALE fractional digits.

    Examples:
        Money(10)            -> 10.00 SEK
        Money("2.345")       -> 2.35 SEK  (half-up)
        Money(15.0) * 3      -> use Money(15.0).multiply(3)
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if isinstance(self.amount, Money):
            raise TypeError("Money cannot wrap another Money.")
        object.__setattr__(self, "amount", round_money(to_decimal(self.amount)))

        if not self.currency or not isinstance(self.currency, str):
            raise ValueError("currency must be a non-empty ISO 4217 string.")
        if len(self.currency) != 3:
            raise ValueError(
                f"currency must be 3-letter ISO 4217 code, "
                f"got '{self.currency}'."
            )

    # ── arithmetic ────────────────────────────────────────────

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor: Number) -> Money:
        """Scale by a dimensionless factor (quantity, VAT or discount rate)."""
        if isinstance(factor, Money):
            raise TypeError(
                "Cannot multiply Money by Money. "
                "Pass a plain rate or quantity instead."
            )
        return Money(self.amount * to_decimal(factor), self.currency)

    def negate(self) -> Money:
        return Money(-self.amount, self.currency)

    # ── predicates ────────────────────────────────────────────

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def _assert_same_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot operate with {type(other).__name__}.")
        if self.currency != other.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} vs {other.currency}. "
                f"Cross-currency operations require explicit conversion."
            )

    # ── rendering / serialization ─────────────────────────────

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict) -> Money:
        return cls(amount=Decimal(str(data["amount"])), currency=data["currency"])

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount=Decimal(0), currency=currency)
