"""
POS Retail Engine - Policies
==============================
Validation policies for sale operations.

Each policy returns None when the operation may proceed, or a
RejectionReason explaining the refusal. Callers raise the matching
typed error from engines.retail.errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.primitives.money import Money

if TYPE_CHECKING:
    from engines.retail.sale import Sale


def quantity_must_be_positive_policy(quantity: object) -> Optional[RejectionReason]:
    """Quantities are whole units, at least one."""
    if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0:
        return None

    return RejectionReason(
        code=ReasonCode.INVALID_QUANTITY,
        message=f"Quantity must be a positive integer, got {quantity!r}.",
        policy_name="quantity_must_be_positive_policy",
    )


def sale_must_be_open_policy(sale: "Sale", operation: str) -> Optional[RejectionReason]:
    """
    Reject add_item / apply_discount / settle_payment once the sale
    is settled. Settlement is irreversible.
    """
    if sale.is_open:
        return None

    code = (
        ReasonCode.SALE_ALREADY_SETTLED
        if operation == "settle payment"
        else ReasonCode.SALE_NOT_OPEN
    )
    return RejectionReason(
        code=code,
        message=(
            f"Sale '{sale.sale_id}' is {sale.status.value}. "
            f"Only open sales accept '{operation}'."
        ),
        policy_name="sale_must_be_open_policy",
    )


def payment_must_cover_total_policy(
    tendered: Money,
    total_due: Money,
) -> Optional[RejectionReason]:
    """Opt-in: tendered cash must cover the amount due."""
    if tendered >= total_due:
        return None

    return RejectionReason(
        code=ReasonCode.UNDERPAYMENT,
        message=(
            f"Tendered amount ({tendered}) is below "
            f"total due ({total_due})."
        ),
        policy_name="payment_must_cover_total_policy",
    )


def discount_within_total_policy(
    discount: Money,
    total_with_vat: Money,
) -> Optional[RejectionReason]:
    """Opt-in: a discount may not push the payable amount below zero."""
    if discount <= total_with_vat:
        return None

    return RejectionReason(
        code=ReasonCode.DISCOUNT_EXCEEDS_TOTAL,
        message=(
            f"Discount ({discount}) exceeds "
            f"pre-discount total ({total_with_vat})."
        ),
        policy_name="discount_within_total_policy",
    )


def sale_must_be_active_policy(
    sale: Optional["Sale"],
    operation: str,
) -> Optional[RejectionReason]:
    """Terminal operations need a started sale."""
    if sale is not None:
        return None

    return RejectionReason(
        code=ReasonCode.NO_ACTIVE_SALE,
        message=f"No sale in progress. Start a sale before '{operation}'.",
        policy_name="sale_must_be_active_policy",
    )


def sale_must_be_settled_policy(sale: "Sale") -> Optional[RejectionReason]:
    """Completion fan-out only runs for paid sales."""
    if sale.is_settled:
        return None

    return RejectionReason(
        code=ReasonCode.SALE_NOT_SETTLED,
        message=f"Sale '{sale.sale_id}' is {sale.status.value}, not settled.",
        policy_name="sale_must_be_settled_policy",
    )
