"""
POS Item Primitive - Catalog Item Snapshot
============================================
The immutable product description handed out by the catalog and
embedded (by reference) in every sale line.

RULES:
- Items are read-only snapshots; a price change is a new item value
- Price is Money, VAT rate is a plain fraction (0.12 means 12%)
- No back-reference to any sale

This file contains NO lookup logic. See integration.catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from core.primitives.money import Money, Number, to_decimal


@dataclass(frozen=True)
class CatalogItem:
    """
    Product as known by the catalog.

    Fields:
        item_id:     Catalog identifier (scanned / typed by the cashier).
        name:        Short display name printed on the receipt.
        description: Longer marketing text.
        price:       Unit price excluding VAT.
        vat_rate:    VAT fraction applied per unit.
    """

    item_id: str
    name: str
    description: str
    price: Money
    vat_rate: Decimal

    def __post_init__(self):
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not isinstance(self.price, Money):
            raise TypeError("price must be Money.")
        if self.price.is_negative():
            raise ValueError("Price amount cannot be negative.")

        rate = to_decimal(self.vat_rate)
        if not 0 <= rate <= 1:
            raise ValueError(f"VAT rate must be between 0 and 1, got {rate}.")
        object.__setattr__(self, "vat_rate", rate)

    def unit_vat(self) -> Money:
        """VAT for a single unit, rounded to the money scale."""
        return self.price.multiply(self.vat_rate)

    def unit_price_with_vat(self) -> Money:
        return self.price + self.unit_vat()

    @property
    def vat_percent(self) -> Decimal:
        percent = self.vat_rate * 100
        whole = percent.to_integral_value()
        return whole if percent == whole else percent.normalize()

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "description": self.description,
            "price": self.price.to_dict(),
            "vat_rate": str(self.vat_rate),
        }

    @classmethod
    def from_dict(cls, data: dict) -> CatalogItem:
        return cls(
            item_id=data["item_id"],
            name=data["name"],
            description=data.get("description", ""),
            price=Money.from_dict(data["price"]),
            vat_rate=Decimal(str(data["vat_rate"])),
        )


def make_item(
    item_id: str,
    name: str,
    price: Number,
    vat_rate: Number,
    description: str = "",
) -> CatalogItem:
    """Convenience constructor for seeding catalogs from literals."""
    return CatalogItem(
        item_id=item_id,
        name=name,
        description=description,
        price=Money(price),
        vat_rate=to_decimal(vat_rate),
    )
