"""
POS Command Layer - Rejection Model
=====================================
Structured reasons for refused sale operations.

Policies return a RejectionReason (or None when they pass).
Engines turn a reason into their typed error, so every refusal is:
- Deterministic (same input, same rejection)
- Machine-readable (code)
- Human-readable (message)
- Traceable to the policy that produced it
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a refused operation.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INVALID_QUANTITY').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Sale lifecycle ────────────────────────────────────────
    NO_ACTIVE_SALE = "NO_ACTIVE_SALE"
    SALE_NOT_OPEN = "SALE_NOT_OPEN"
    SALE_ALREADY_SETTLED = "SALE_ALREADY_SETTLED"
    SALE_NOT_SETTLED = "SALE_NOT_SETTLED"

    # ── Input validation ──────────────────────────────────────
    INVALID_QUANTITY = "INVALID_QUANTITY"

    # ── Settlement / discount policy ──────────────────────────
    UNDERPAYMENT = "UNDERPAYMENT"
    DISCOUNT_EXCEEDS_TOTAL = "DISCOUNT_EXCEEDS_TOTAL"
