"""
Product repository (Supabase persistence).

This module provides *only* persistence operations for the Product domain
entity. It contains no business rules about carts or pricing; it only enforces
simple persistence constraints through conditional updates:
- stock adjustments apply only if the resulting stock stays >= 0
  (`adjust_product_stock` database function, see supabase/schema.sql)
- overwrites can be guarded by the stock value the caller last read
"""

from __future__ import annotations

from contextlib import nullcontext
from decimal import Decimal
from typing import Any, ContextManager, List, Mapping, Optional

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore[import-not-found]

from domain.errors import Conflict, ProductNotFound
from domain.product import Product
from repositories.stores import PRODUCT_MUTABLE_FIELDS

# Supabase table name for products.
# Keep this aligned with your database schema.
_PRODUCTS_TABLE: str = "products"
_PRODUCT_COLUMNS: str = "id, name, category, price, stock, image_url"


def execute_query(query: Any, action: str) -> Any:
    """
    Execute a PostgREST query, raising RuntimeError with context on failure.

    supabase-py raises APIError for most failures; older builders report them
    on `response.error` instead.
    """

    try:
        response = query.execute()
    except APIError as e:
        raise RuntimeError(f"Failed to {action}: {e}") from e

    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return response


def _row_to_product(row: Mapping[str, Any]) -> Product:
    """Convert a Supabase row into a Product."""

    return Product(
        product_id=str(row["id"]),
        name=str(row["name"]),
        category=str(row["category"]),
        price=Decimal(str(row["price"])),
        stock=int(row["stock"]),
        image_url=str(row.get("image_url") or ""),
    )


def _fields_to_payload(fields: Mapping[str, object]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key in PRODUCT_MUTABLE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        # Numeric columns accept strings; this keeps Decimal prices exact.
        payload[key] = str(value) if key == "price" else value
    return payload


class SupabaseProductRepository:
    """Catalog store backed by the Supabase `products` table."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def write_lock(self) -> ContextManager[object]:
        # Cross-process safety comes from the conditional updates, not a local lock.
        return nullcontext()

    def list_products(self) -> List[Product]:
        response = execute_query(
            self._client.table(_PRODUCTS_TABLE).select(_PRODUCT_COLUMNS).order("name"),
            "fetch products",
        )
        rows = getattr(response, "data", None) or []
        return [_row_to_product(row) for row in rows]

    def get_product(self, product_id: str) -> Optional[Product]:
        response = execute_query(
            self._client.table(_PRODUCTS_TABLE)
            .select(_PRODUCT_COLUMNS)
            .eq("id", product_id)
            .limit(1),
            f"fetch product {product_id}",
        )
        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return _row_to_product(rows[0])

    def insert_product(self, product: Product) -> Product:
        payload: dict[str, Any] = {
            "id": product.product_id,
            "name": product.name,
            "category": product.category,
            "price": str(product.price),
            "stock": product.stock,
            "image_url": product.image_url,
        }
        response = execute_query(self._client.table(_PRODUCTS_TABLE).insert(payload), "add product")
        rows = getattr(response, "data", None) or []
        return _row_to_product(rows[0]) if rows else product

    def update_product(
        self,
        product_id: str,
        fields: Mapping[str, object],
        *,
        expected_stock: Optional[int] = None,
    ) -> Product:
        unknown = set(fields) - set(PRODUCT_MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update product fields: {sorted(unknown)}")

        query = self._client.table(_PRODUCTS_TABLE).update(_fields_to_payload(fields)).eq("id", product_id)
        if expected_stock is not None:
            # Only overwrite if no checkout changed the stock since it was read.
            query = query.eq("stock", expected_stock)

        response = execute_query(query, f"update product {product_id}")
        rows = getattr(response, "data", None) or []
        if rows:
            return _row_to_product(rows[0])

        # No row updated: either the product is gone or the stock guard failed.
        current = self.get_product(product_id)
        if current is None:
            raise ProductNotFound(product_id)
        raise Conflict(
            f"Stock for product {product_id} changed from {expected_stock} to {current.stock}",
            product_id=product_id,
        )

    def adjust_stock(self, product_id: str, delta: int) -> int:
        response = execute_query(
            self._client.rpc(
                "adjust_product_stock",
                {"p_product_id": product_id, "p_delta": delta},
            ),
            f"adjust stock for product {product_id}",
        )

        new_stock = getattr(response, "data", None)
        if isinstance(new_stock, list):
            new_stock = new_stock[0] if new_stock else None
        if isinstance(new_stock, Mapping):
            new_stock = new_stock.get("adjust_product_stock")
        if new_stock is not None:
            return int(new_stock)

        if self.get_product(product_id) is None:
            raise ProductNotFound(product_id)
        raise Conflict(
            f"Stock for product {product_id} cannot be adjusted by {delta}",
            product_id=product_id,
        )


__all__ = ["SupabaseProductRepository", "execute_query"]
