"""
POS Retail Engine - Application Service
=========================================
RetailService is the terminal controller: it drives one current
sale through start -> scan items -> discount -> end -> payment.

CompletionNotifier runs the post-settlement protocol, in order:

    1. record payment in the till     (failure propagates)
    2. print the receipt              (failure logged, swallowed)
    3. completion handlers            (each failure logged, swallowed)
    4. sale observers                 (each failure logged, swallowed)

A sale is completed at most once. When the till fails the sale stays
settled but unnotified, and retry_completion() runs the protocol again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.config import settings
from core.events.dispatcher import DispatchResult, dispatch_completion, notify_observers
from core.events.registry import CompletionRegistry, SaleCompletionHandler, SaleObserver
from core.primitives.money import Money
from core.time.clock import Clock, get_default_clock
from engines.cash.services import PaymentRecord, PaymentSettlement, TillLedger
from engines.promotion.services import DiscountService
from engines.retail.errors import (
    InvalidQuantity,
    ItemLookupError,
    NoActiveSale,
    SaleAlreadyNotified,
    SaleNotOpen,
    SaleNotSettled,
    UnderpaymentRejected,
)
from engines.retail.events import build_sale_summary
from engines.retail.policies import (
    discount_within_total_policy,
    payment_must_cover_total_policy,
    quantity_must_be_positive_policy,
    sale_must_be_active_policy,
    sale_must_be_open_policy,
    sale_must_be_settled_policy,
)
from engines.retail.receipt import Receipt
from engines.retail.sale import ItemRegistration, Sale, SaleTotals
from integration.catalog import Catalog
from integration.printer import ReceiptSink

logger = logging.getLogger("pos.retail")


# ══════════════════════════════════════════════════════════════
# COLLABORATORS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RetailCollaborators:
    """Everything a terminal needs, passed in explicitly."""

    catalog: Catalog
    discounts: DiscountService
    cash_register: TillLedger
    registry: CompletionRegistry
    printer: Optional[ReceiptSink] = None
    clock: Optional[Clock] = None


# ══════════════════════════════════════════════════════════════
# COMPLETION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CompletionReport:
    sale_id: str
    receipt: Receipt
    payment: PaymentRecord
    printed: bool
    handlers: DispatchResult
    observers: DispatchResult

    @property
    def all_succeeded(self) -> bool:
        return (
            self.printed
            and self.handlers.all_succeeded
            and self.observers.all_succeeded
        )

    def to_dict(self) -> dict:
        return {
            "sale_id": self.sale_id,
            "payment": self.payment.to_dict(),
            "printed": self.printed,
            "handlers": self.handlers.to_dict(),
            "observers": self.observers.to_dict(),
        }


class CompletionNotifier:
    def __init__(
        self,
        cash_register: TillLedger,
        registry: CompletionRegistry,
        printer: Optional[ReceiptSink] = None,
    ):
        self._cash_register = cash_register
        self._registry = registry
        self._printer = printer

    def _print(self, receipt: Receipt) -> bool:
        if self._printer is None:
            return False
        try:
            self._printer.print_receipt(receipt)
            return True
        except Exception as exc:
            logger.error(
                f"Receipt printing failed for sale {receipt.sale_id}: {exc}",
                exc_info=True,
            )
            return False

    def complete(self, sale: Sale) -> CompletionReport:
        reason = sale_must_be_settled_policy(sale)
        if reason is not None:
            raise SaleNotSettled(sale.sale_id, reason)
        if sale.is_notified:
            raise SaleAlreadyNotified(sale.sale_id)

        payment = sale.payment
        receipt = sale.receipt

        self._cash_register.record_payment(sale.sale_id, payment)
        sale.mark_notified()

        printed = self._print(receipt)
        handlers = dispatch_completion(build_sale_summary(sale), self._registry.handlers())
        observers = notify_observers(
            sale.sale_id, payment.total_due, self._registry.observers(),
        )

        logger.info(
            f"Sale {sale.sale_id} completed: printed={printed}, "
            f"handlers {handlers.notified}/{handlers.notified + handlers.failed}, "
            f"observers {observers.notified}/{observers.notified + observers.failed}"
        )
        return CompletionReport(
            sale_id=sale.sale_id,
            receipt=receipt,
            payment=payment,
            printed=printed,
            handlers=handlers,
            observers=observers,
        )


# ══════════════════════════════════════════════════════════════
# RETAIL SERVICE
# ══════════════════════════════════════════════════════════════

class RetailService:
    def __init__(
        self,
        collaborators: RetailCollaborators,
        *,
        reject_underpayment: Optional[bool] = None,
        allow_negative_total: Optional[bool] = None,
        settlement: Optional[PaymentSettlement] = None,
    ):
        self._collaborators = collaborators
        self._clock = collaborators.clock or get_default_clock()
        self._settlement = settlement or PaymentSettlement()
        self._notifier = CompletionNotifier(
            cash_register=collaborators.cash_register,
            registry=collaborators.registry,
            printer=collaborators.printer,
        )
        self._reject_underpayment = (
            settings.REJECT_UNDERPAYMENT
            if reject_underpayment is None else reject_underpayment
        )
        self._allow_negative_total = (
            settings.ALLOW_NEGATIVE_TOTAL
            if allow_negative_total is None else allow_negative_total
        )
        self._current: Optional[Sale] = None

    # ── state ─────────────────────────────────────────────────

    @property
    def current_sale(self) -> Optional[Sale]:
        return self._current

    @property
    def has_active_sale(self) -> bool:
        return self._current is not None and self._current.is_open

    @property
    def notifier(self) -> CompletionNotifier:
        return self._notifier

    def _require_sale(self, operation: str) -> Sale:
        reason = sale_must_be_active_policy(self._current, operation)
        if reason is not None:
            raise NoActiveSale(operation, reason)
        return self._current

    # ── registration ──────────────────────────────────────────

    def register_handler(self, handler: SaleCompletionHandler) -> None:
        self._collaborators.registry.register_handler(handler)

    def register_observer(self, observer: SaleObserver) -> None:
        self._collaborators.registry.register_observer(observer)

    # ── sale flow ─────────────────────────────────────────────

    def start_sale(self) -> Sale:
        previous = self._current
        if previous is not None and previous.is_open:
            logger.warning(
                f"Discarding unsettled sale {previous.sale_id} "
                f"({len(previous.lines)} lines)"
            )
        self._current = Sale(clock=self._clock)
        logger.info(f"Sale {self._current.sale_id} started")
        return self._current

    def enter_item(self, item_id: str, quantity: int = 1) -> ItemRegistration:
        sale = self._require_sale("enter item")
        reason = sale_must_be_open_policy(sale, "add item")
        if reason is not None:
            raise SaleNotOpen(sale.sale_id, "add item", reason)
        reason = quantity_must_be_positive_policy(quantity)
        if reason is not None:
            raise InvalidQuantity(quantity, reason)

        lookup = self._collaborators.catalog.find_item(item_id)
        if not lookup.found:
            logger.warning(
                f"Item lookup failed for {item_id}: {lookup.status.value}"
                + (f" ({lookup.detail})" if lookup.detail else "")
            )
            raise ItemLookupError(item_id, lookup.status, lookup.detail)
        return sale.add_item(lookup.item, quantity)

    def request_discount(self, customer_id: Optional[str]) -> Money:
        sale = self._require_sale("request discount")
        reason = sale_must_be_open_policy(sale, "apply discount")
        if reason is not None:
            raise SaleNotOpen(sale.sale_id, "apply discount", reason)

        discount = self._collaborators.discounts.compute_discount(
            sale.lines, sale.calculate_total(), customer_id,
        )

        if not self._allow_negative_total:
            ceiling = sale.calculate_total() + sale.calculate_total_vat()
            reason = discount_within_total_policy(discount, ceiling)
            if reason is not None:
                logger.warning(f"{reason.message} Capping at {ceiling}.")
                discount = ceiling

        sale.apply_discount(customer_id, discount)
        return discount

    def end_sale(self) -> SaleTotals:
        sale = self._require_sale("end sale")
        totals = sale.totals()
        logger.info(
            f"Sale {sale.sale_id} ended: {totals.line_count} lines, "
            f"total with VAT {totals.total_with_vat}"
        )
        return totals

    def process_payment(self, tendered: Money) -> CompletionReport:
        sale = self._require_sale("process payment")

        if self._reject_underpayment and sale.is_open:
            reason = payment_must_cover_total_policy(
                tendered, sale.calculate_total_with_vat(),
            )
            if reason is not None:
                raise UnderpaymentRejected(reason)

        sale.settle_payment(tendered, self._settlement)
        return self._notifier.complete(sale)

    def retry_completion(self) -> CompletionReport:
        """Re-run completion for a settled sale whose till recording failed."""
        sale = self._require_sale("retry completion")
        return self._notifier.complete(sale)
