"""
In-memory catalog and sale ledger.

Used when Supabase is not configured (data is not persisted) and in tests.

Both stores share one re-entrant lock: it is the single-writer serialization
point for stock changes, so a checkout's read-validate-decrement sequence and an
inventory edit can never interleave within this process.
"""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from domain.errors import Conflict, ProductNotFound
from domain.product import Product
from domain.sale import SaleRecord
from repositories.stores import PRODUCT_MUTABLE_FIELDS

logger = logging.getLogger(__name__)


class InMemoryCatalogRepository:
    """Catalog store keyed by product_id, preserving insertion order."""

    def __init__(self, products: Iterable[Product] = (), lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._products: Dict[str, Product] = {}
        for product in products:
            self._products[product.product_id] = product

    def write_lock(self) -> threading.RLock:
        return self._lock

    def list_products(self) -> List[Product]:
        with self._lock:
            return list(self._products.values())

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def insert_product(self, product: Product) -> Product:
        with self._lock:
            if product.product_id in self._products:
                raise ValueError(f"Product already exists: {product.product_id}")
            self._products[product.product_id] = product
            return product

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

        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                raise ProductNotFound(product_id)
            if expected_stock is not None and current.stock != expected_stock:
                raise Conflict(
                    f"Stock for product {product_id} changed from {expected_stock} to {current.stock}",
                    product_id=product_id,
                )
            updated = current.with_fields(
                name=str(fields.get("name", current.name)),
                category=str(fields.get("category", current.category)),
                price=Decimal(str(fields.get("price", current.price))),
                stock=int(fields.get("stock", current.stock)),  # type: ignore[arg-type]
            )
            self._products[product_id] = updated
            return updated

    def adjust_stock(self, product_id: str, delta: int) -> int:
        with self._lock:
            current = self._products.get(product_id)
            if current is None:
                raise ProductNotFound(product_id)
            new_stock = current.stock + delta
            if new_stock < 0:
                raise Conflict(
                    f"Stock for product {product_id} cannot go below zero "
                    f"(stock {current.stock}, delta {delta})",
                    product_id=product_id,
                )
            self._products[product_id] = current.with_stock(new_stock)
            return new_stock


class InMemorySaleLedger:
    """Sale ledger holding records most-recent-first."""

    def __init__(self, sales: Iterable[SaleRecord] = (), lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._sales: List[SaleRecord] = list(sales)

    def list_sales(self) -> List[SaleRecord]:
        with self._lock:
            return list(self._sales)

    def append_sale(self, sale: SaleRecord) -> SaleRecord:
        with self._lock:
            self._sales.insert(0, sale)
            return sale


def create_memory_stores(
    products: Iterable[Product] = (),
    sales: Iterable[SaleRecord] = (),
) -> tuple[InMemoryCatalogRepository, InMemorySaleLedger]:
    """Create a catalog and ledger pair sharing one write lock."""

    lock = threading.RLock()
    catalog = InMemoryCatalogRepository(products, lock=lock)
    ledger = InMemorySaleLedger(sales, lock=lock)
    logger.info(
        "In-memory stores initialized; data will not be persisted",
        extra={"product_count": len(catalog.list_products()), "sale_count": len(ledger.list_sales())},
    )
    return catalog, ledger


__all__ = ["InMemoryCatalogRepository", "InMemorySaleLedger", "create_memory_stores"]
