"""
POS Integration Layer - Public API
====================================
Contracts for the systems a terminal talks to, plus in-process
reference implementations.

Catalog: item id -> CatalogLookup (FOUND / NOT_FOUND / UNAVAILABLE)
Printer: Receipt -> text on a stream
"""

from integration.catalog import (
    Catalog,
    CatalogAdapter,
    CatalogLookup,
    InMemoryCatalog,
    LookupStatus,
    default_catalog,
)
from integration.printer import (
    ReceiptSink,
    StreamReceiptPrinter,
    render_receipt,
)

__all__ = [
    # Catalog
    "Catalog",
    "CatalogAdapter",
    "CatalogLookup",
    "InMemoryCatalog",
    "LookupStatus",
    "default_catalog",
    # Printer
    "ReceiptSink",
    "StreamReceiptPrinter",
    "render_receipt",
]
