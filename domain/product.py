"""
Domain: Product entity.

A Product is a sellable menu item. The catalog store owns the authoritative
stock count; checkout decrements it and inventory edits overwrite it.

Contract excerpts implemented here:
- product_id is unique and stable for the product's lifetime.
- price is a non-negative fixed-point amount (two decimal places).
- stock >= 0 after any committed operation. The entity itself does not reject
  other values so reporting can still compute over malformed data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from decimal import Decimal

_IMAGE_URL_TEMPLATE = "https://picsum.photos/seed/{seed}/400"
_WHITESPACE = re.compile(r"\s+")

# Products at or below this many units show up as low-stock alerts.
LOW_STOCK_THRESHOLD: int = 10


def placeholder_image_url(name: str) -> str:
    """Derive the placeholder image reference used for new products."""

    return _IMAGE_URL_TEMPLATE.format(seed=_WHITESPACE.sub("", name))


@dataclass(frozen=True, slots=True)
class Product:
    """
    Immutable snapshot of a catalog product.

    Mutations produce new instances (see `with_stock`, `with_fields`); the store
    decides which snapshot is current.
    """

    product_id: str
    name: str
    category: str
    price: Decimal
    stock: int
    image_url: str = ""

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= LOW_STOCK_THRESHOLD

    def with_stock(self, stock: int) -> "Product":
        return replace(self, stock=stock)

    def with_fields(self, *, name: str, category: str, price: Decimal, stock: int) -> "Product":
        """Full overwrite of the mutable fields. id and image_url are kept."""

        return replace(self, name=name, category=category, price=price, stock=stock)
