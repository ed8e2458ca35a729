"""
Store interfaces for the catalog and the sale ledger.

Services depend on these protocols only; the backing (in-memory or Supabase) is
chosen at startup by `repositories.factory.build_stores`.

Atomicity contract every backing must honor:
- `adjust_stock` is a conditional update: it applies the delta only if the
  resulting stock stays >= 0, and raises Conflict otherwise.
- `update_product(..., expected_stock=n)` applies the overwrite only if the
  stored stock still equals n, and raises Conflict otherwise.
- `write_lock()` serializes writers sharing the same process. Backings shared
  across processes rely on the conditional updates above instead.
- A ledger that also implements `record_checkout` applies the stock decrements and
  records the sale in one storage transaction; checkout then uses it instead of
  separate `adjust_stock` and `append_sale` calls.
"""

from __future__ import annotations

from typing import ContextManager, List, Mapping, Optional, Protocol, runtime_checkable

from domain.product import Product
from domain.sale import SaleRecord


class CatalogStore(Protocol):
    def list_products(self) -> List[Product]:
        ...

    def get_product(self, product_id: str) -> Optional[Product]:
        ...

    def insert_product(self, product: Product) -> Product:
        ...

    def update_product(
        self,
        product_id: str,
        fields: Mapping[str, object],
        *,
        expected_stock: Optional[int] = None,
    ) -> Product:
        ...

    def adjust_stock(self, product_id: str, delta: int) -> int:
        ...

    def write_lock(self) -> ContextManager[object]:
        ...


class SaleLedger(Protocol):
    def list_sales(self) -> List[SaleRecord]:
        ...

    def append_sale(self, sale: SaleRecord) -> SaleRecord:
        ...


@runtime_checkable
class TransactionalSaleLedger(SaleLedger, Protocol):
    def record_checkout(self, sale: SaleRecord) -> SaleRecord:
        """
        Decrement stock for every item and record the sale atomically.

        Raises:
            ProductNotFound: an item references an unknown product
            Conflict: a product no longer has enough stock
        """
        ...


# Fields an inventory edit may overwrite.
PRODUCT_MUTABLE_FIELDS = ("name", "category", "price", "stock")


__all__ = ["CatalogStore", "SaleLedger", "TransactionalSaleLedger", "PRODUCT_MUTABLE_FIELDS"]
