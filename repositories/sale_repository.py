"""
Sale repository (Supabase persistence).

This module provides *only* persistence operations for the SaleRecord domain
entity. It does not validate stock or compute totals; it only inserts and
fetches sale records and their line items.

Tables:
- sales (id, total, created_at)
- sale_items (sale_id, line_no, product_id, quantity, price)

Checkouts go through the `create_sale_and_update_stock` database function,
which decrements stock and writes both tables in a single transaction.
"""

from __future__ import annotations

import logging
from datetime import timezone
from decimal import Decimal
from typing import Any, List, Mapping

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore[import-not-found]

from domain.errors import Conflict, ProductNotFound
from domain.sale import SaleItem, SaleRecord
from domain.time import parse_utc_datetime, require_utc_timestamp
from repositories.product_repository import execute_query

logger = logging.getLogger(__name__)

# Supabase table names for sale records.
# Keep these aligned with your database schema.
_SALES_TABLE: str = "sales"
_SALE_ITEMS_TABLE: str = "sale_items"

_SALE_SELECT: str = "id, total, created_at, sale_items ( line_no, product_id, quantity, price )"

# Checkout function in supabase/schema.sql and the SQLSTATE codes it raises.
_CHECKOUT_RPC: str = "create_sale_and_update_stock"
_STOCK_SHORTFALL: str = "PS001"
_PRODUCT_MISSING: str = "PS002"


def _row_to_sale(row: Mapping[str, Any]) -> SaleRecord:
    """Convert a Supabase row (with nested sale_items) into a SaleRecord."""

    item_rows = sorted(row.get("sale_items") or [], key=lambda item: int(item.get("line_no") or 0))
    return SaleRecord(
        sale_id=str(row["id"]),
        items=tuple(
            SaleItem(
                product_id=str(item["product_id"]),
                quantity=int(item["quantity"]),
                price=Decimal(str(item["price"])),
            )
            for item in item_rows
        ),
        total=Decimal(str(row["total"])),
        timestamp=parse_utc_datetime(row["created_at"]),
    )


def _item_payload(sale: SaleRecord) -> List[dict[str, Any]]:
    return [
        {"product_id": item.product_id, "quantity": item.quantity, "price": str(item.price)}
        for item in sale.items
    ]


class SupabaseSaleRepository:
    """Sale ledger backed by the Supabase `sales` and `sale_items` tables."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_sales(self) -> List[SaleRecord]:
        """
        Retrieve all sales, most recent first.

        Returns:
            List[SaleRecord] (possibly empty)
        """

        response = execute_query(
            self._client.table(_SALES_TABLE).select(_SALE_SELECT).order("created_at", desc=True),
            "fetch sales",
        )
        rows = getattr(response, "data", None) or []
        return [_row_to_sale(row) for row in rows]

    def append_sale(self, sale: SaleRecord) -> SaleRecord:
        """
        Insert a sale and its line items without touching stock.

        Used for importing sale history; checkouts go through `record_checkout`.

        If the line items cannot be written, the sale row is removed again so no
        sale is left without items.
        """

        require_utc_timestamp("timestamp", sale.timestamp)

        sale_payload: dict[str, Any] = {
            "id": sale.sale_id,
            "total": str(sale.total),
            "created_at": sale.timestamp.astimezone(timezone.utc).isoformat(),
        }
        execute_query(self._client.table(_SALES_TABLE).insert(sale_payload), "record sale")

        item_payload = [
            {"sale_id": sale.sale_id, "line_no": line_no, **line}
            for line_no, line in enumerate(_item_payload(sale), start=1)
        ]
        try:
            execute_query(self._client.table(_SALE_ITEMS_TABLE).insert(item_payload), "record sale items")
        except RuntimeError:
            logger.error("Removing sale %s after its items failed to save", sale.sale_id)
            execute_query(
                self._client.table(_SALES_TABLE).delete().eq("id", sale.sale_id),
                f"remove incomplete sale {sale.sale_id}",
            )
            raise

        return sale

    def record_checkout(self, sale: SaleRecord) -> SaleRecord:
        """
        Decrement stock and record the sale in one database transaction.

        The database function checks and decrements every product, then inserts
        the `sales` row and its `sale_items`. Any failure rolls all of it back.

        Raises:
            ProductNotFound: an item references an unknown product
            Conflict: a product no longer has enough stock
            RuntimeError: any other database failure
        """

        require_utc_timestamp("timestamp", sale.timestamp)

        params: dict[str, Any] = {
            "p_sale_id": sale.sale_id,
            "p_created_at": sale.timestamp.astimezone(timezone.utc).isoformat(),
            "p_total": str(sale.total),
            "p_items": _item_payload(sale),
        }
        try:
            response = self._client.rpc(_CHECKOUT_RPC, params).execute()
        except APIError as e:
            if e.code == _PRODUCT_MISSING:
                raise ProductNotFound(str(e.details)) from e
            if e.code == _STOCK_SHORTFALL:
                raise Conflict(
                    f"Stock for product {e.details} changed during checkout",
                    product_id=str(e.details),
                ) from e
            raise RuntimeError(f"Failed to record checkout {sale.sale_id}: {e}") from e

        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to record checkout {sale.sale_id}: {error}")

        return sale


__all__ = ["SupabaseSaleRepository"]
