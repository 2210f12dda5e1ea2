"""
Console demo for the POS sale engine.

Runs one scripted sale against the in-memory reference collaborators,
then the two lookup failure paths (unknown id, catalog outage).

Usage:
    python scripts/pos_demo.py
    python scripts/pos_demo.py --customer 1001 --paid 200
    python scripts/pos_demo.py --log-level DEBUG
"""

from __future__ import annotations

import argparse

from core.config.rules import InMemoryDiscountRuleStore, default_discount_rules
from core.config.settings import LOG_LEVEL, configure_logging
from core.events.registry import CompletionRegistry
from core.primitives.money import Money
from engines.accounting.services import AccountingSystem
from engines.cash.services import CashRegister
from engines.inventory.services import InventorySystem
from engines.promotion.services import DiscountService
from engines.reporting.services import RevenueLogObserver, RevenueTracker
from engines.retail.errors import ItemLookupError, RetailError
from engines.retail.services import RetailCollaborators, RetailService
from engines.retail.subscriptions import subscribe_defaults
from integration.catalog import default_catalog
from integration.printer import StreamReceiptPrinter, format_amount


SCRIPTED_ITEMS = (("1", 1), ("1", 1), ("3", 1), ("2", 1))
INITIAL_STOCK = {"1": 50, "2": 50, "3": 50, "4": 50, "5": 50}


def build_service() -> tuple[RetailService, RevenueTracker, AccountingSystem]:
    registry = CompletionRegistry()
    accounting = AccountingSystem()
    tracker = RevenueTracker()
    subscribe_defaults(
        registry,
        accounting=accounting,
        inventory=InventorySystem(INITIAL_STOCK),
        observers=(tracker, RevenueLogObserver()),
    )
    service = RetailService(
        RetailCollaborators(
            catalog=default_catalog(),
            discounts=DiscountService(
                InMemoryDiscountRuleStore(default_discount_rules()),
            ),
            cash_register=CashRegister(),
            registry=registry,
            printer=StreamReceiptPrinter(),
        )
    )
    return service, tracker, accounting


def run_sale(service: RetailService, customer: str | None, paid: Money) -> None:
    service.start_sale()
    for item_id, quantity in SCRIPTED_ITEMS:
        registration = service.enter_item(item_id, quantity)
        item = registration.item
        print(f"Add {quantity} item with item id {item_id}:")
        print(f"Item ID: {item.item_id}")
        print(f"Item name: {item.name}")
        print(f"Item cost: {format_amount(item.price)} SEK")
        print(f"VAT: {item.vat_percent}%")
        print(f"Item description: {item.description}")
        print()
        print(f"Total cost (incl VAT): {format_amount(registration.running_total)} SEK")
        print(f"Total VAT: {format_amount(registration.running_vat)} SEK")
        print()

    if customer:
        discount = service.request_discount(customer)
        print(f"Discount for customer {customer}: {format_amount(discount)} SEK")

    totals = service.end_sale()
    print(f"End sale:\nTotal cost (incl VAT): {format_amount(totals.total_with_vat)} SEK\n")

    report = service.process_payment(paid)
    print(f"Change to give the customer: {format_amount(report.payment.change)} SEK")


def run_error_paths(service: RetailService) -> None:
    service.start_sale()
    for item_id in ("invalid-id", "9999"):
        try:
            service.enter_item(item_id)
        except ItemLookupError as exc:
            hint = "Please try again later." if exc.retryable else "Please check the item ID."
            print(f"Error: {exc} {hint}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="POS sale engine demo")
    parser.add_argument("--customer", default=None, help="customer id for a discount")
    parser.add_argument("--paid", default="100", help="cash tendered")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    service, tracker, accounting = build_service()

    try:
        run_sale(service, args.customer, Money(args.paid))
    except RetailError as exc:
        print(f"Sale failed: {exc}")
        return 1

    run_error_paths(service)

    stats = accounting.statistics()
    print(f"\nSales today: {stats.sale_count}, revenue {tracker.revenue}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
