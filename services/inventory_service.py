"""
Inventory service for creating and editing catalog products.

Edits are full overwrites: callers supply the complete desired state of name,
category, price and stock. Stock overwrites are guarded against concurrent
checkouts with a compare-and-set on the stock value read just before writing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List
from uuid import uuid4

from domain.errors import InvalidRequest, ProductNotFound
from domain.money import parse_money
from domain.product import Product, placeholder_image_url
from repositories.stores import CatalogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProductDraft:
    """Operator-entered data for a new product."""

    name: str
    category: str
    price: Decimal
    stock: int


def _clean_text(field: str, value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise InvalidRequest(f"{field} is required")
    return text


def _clean_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequest(f"stock must be an integer, got {value!r}")
    if value < 0:
        raise InvalidRequest("stock must be >= 0")
    return value


def _clean_price(value: Any) -> Decimal:
    try:
        return parse_money("price", value)
    except ValueError as e:
        raise InvalidRequest(str(e)) from None


def list_products(*, catalog: CatalogStore) -> List[Product]:
    """All products ordered by name."""

    return sorted(catalog.list_products(), key=lambda product: product.name.lower())


def get_product(product_id: str, *, catalog: CatalogStore) -> Product:
    product = catalog.get_product(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def create_product(draft: ProductDraft, *, catalog: CatalogStore) -> Product:
    """
    Add a product to the catalog.

    Assigns a fresh product id and derives a placeholder image from the name.

    Raises:
        InvalidRequest: empty name/category, negative or malformed price/stock
    """

    name = _clean_text("name", draft.name)
    product = Product(
        product_id=str(uuid4()),
        name=name,
        category=_clean_text("category", draft.category),
        price=_clean_price(draft.price),
        stock=_clean_stock(draft.stock),
        image_url=placeholder_image_url(name),
    )

    created = catalog.insert_product(product)
    logger.info(
        f"Product {created.product_id} created",
        extra={"product_id": created.product_id, "product_name": created.name, "stock": created.stock},
    )
    return created


def update_product(product: Product, *, catalog: CatalogStore) -> Product:
    """
    Overwrite name, category, price and stock of an existing product.

    Raises:
        InvalidRequest: invalid field values
        ProductNotFound: unknown product id
        Conflict: stock changed (e.g. by a checkout) between read and write
    """

    fields = {
        "name": _clean_text("name", product.name),
        "category": _clean_text("category", product.category),
        "price": _clean_price(product.price),
        "stock": _clean_stock(product.stock),
    }

    with catalog.write_lock():
        current = catalog.get_product(product.product_id)
        if current is None:
            raise ProductNotFound(product.product_id)
        updated = catalog.update_product(product.product_id, fields, expected_stock=current.stock)

    logger.info(
        f"Product {updated.product_id} updated",
        extra={
            "product_id": updated.product_id,
            "previous_price": str(current.price),
            "price": str(updated.price),
            "previous_stock": current.stock,
            "stock": updated.stock,
        },
    )
    return updated


__all__ = ["ProductDraft", "list_products", "get_product", "create_product", "update_product"]
