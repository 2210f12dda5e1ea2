"""
POS Retail Engine - Errors
============================
Typed failures surfaced to the immediate caller.

Validation errors carry the RejectionReason of the policy that
refused the operation. Lookup errors carry the lookup kind so a
UI can tell "item not found" apart from "try again later" without
catching different exception classes.
"""

from __future__ import annotations

from typing import Optional

from core.commands.rejection import RejectionReason
from integration.catalog import LookupStatus


class RetailError(Exception):
    """Base error for retail sale operations."""

    def __init__(self, message: str, reason: Optional[RejectionReason] = None):
        self.reason = reason
        super().__init__(message)

    @property
    def code(self) -> Optional[str]:
        return self.reason.code if self.reason else None


class InvalidQuantity(RetailError):
    """Quantity is not a positive integer."""

    def __init__(self, quantity: object, reason: Optional[RejectionReason] = None):
        self.quantity = quantity
        super().__init__(
            f"Quantity must be a positive integer, got {quantity!r}.",
            reason,
        )


class SaleNotOpen(RetailError):
    """Items or discounts submitted to a sale that is already settled."""

    def __init__(self, sale_id: str, operation: str,
                 reason: Optional[RejectionReason] = None):
        self.sale_id = sale_id
        self.operation = operation
        super().__init__(
            f"Sale '{sale_id}' is settled. Cannot {operation}.",
            reason,
        )


class SaleAlreadySettled(RetailError):
    """Second settlement attempt on the same sale."""

    def __init__(self, sale_id: str, reason: Optional[RejectionReason] = None):
        self.sale_id = sale_id
        super().__init__(f"Sale '{sale_id}' is already settled.", reason)


class SaleNotSettled(RetailError):
    """Completion requested for a sale that has not been paid."""

    def __init__(self, sale_id: str, reason: Optional[RejectionReason] = None):
        self.sale_id = sale_id
        super().__init__(
            f"Sale '{sale_id}' has no payment. Settle it before completion.",
            reason,
        )


class SaleAlreadyNotified(RetailError):
    """Completion fan-out already ran for this sale."""

    def __init__(self, sale_id: str):
        self.sale_id = sale_id
        super().__init__(f"Completion for sale '{sale_id}' was already sent.")


class NoActiveSale(RetailError):
    """Terminal operation issued before start_sale()."""

    def __init__(self, operation: str, reason: Optional[RejectionReason] = None):
        self.operation = operation
        super().__init__(f"No sale in progress. Cannot {operation}.", reason)


class UnderpaymentRejected(RetailError):
    """Tendered amount below total due while underpayment is refused."""

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.message, reason)


class ItemLookupError(RetailError):
    """
    Catalog could not deliver the item.

    kind:      LookupStatus.NOT_FOUND or LookupStatus.UNAVAILABLE
    retryable: True only for UNAVAILABLE (transient backend failure)
    """

    def __init__(self, item_id: str, kind: LookupStatus, detail: str = ""):
        self.item_id = item_id
        self.kind = kind
        self.detail = detail
        if kind is LookupStatus.NOT_FOUND:
            message = f"Item with ID '{item_id}' was not found in the catalog."
        else:
            message = f"Catalog unavailable while looking up item '{item_id}'."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind is LookupStatus.UNAVAILABLE
