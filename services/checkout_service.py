"""
Checkout service for committing a cart as a sale.

Handles:
- Validation of every line item before any stock is touched
- All-or-nothing commit: stock decrements and the sale record land together
  or not at all. Ledgers that support it (Supabase) do this in one database
  transaction; otherwise the decrements are applied one by one under the
  in-process write lock and undone if a later step fails.
- Automatic retry of the whole commit when the store reports a concurrent
  write (Conflict)

Validation failures (InvalidRequest, ProductNotFound, InsufficientStock) are
user-correctable and are never retried.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from domain.errors import Conflict, InsufficientStock, InvalidRequest, ProductNotFound
from domain.money import parse_money
from domain.sale import LineItem, SaleItem, SaleRecord, sum_line_totals
from domain.time import require_utc_timestamp, utc_now
from repositories.stores import CatalogStore, SaleLedger, TransactionalSaleLedger

logger = logging.getLogger(__name__)


def _validate_line_items(line_items: Sequence[LineItem]) -> Tuple[Tuple[SaleItem, ...], Dict[str, int]]:
    """
    Check the shape of every line item.

    Returns:
        (normalized items, requested quantity per product in first-seen order)
    """

    if not line_items:
        raise InvalidRequest("Cannot check out an empty cart")

    items: List[SaleItem] = []
    requested: Dict[str, int] = OrderedDict()

    for index, line in enumerate(line_items, start=1):
        if not line.product_id:
            raise InvalidRequest(f"Line {index}: product id is required")

        quantity = line.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRequest(f"Line {index}: quantity must be a positive integer, got {quantity!r}")

        try:
            price = parse_money("unit price", line.price)
        except ValueError as e:
            raise InvalidRequest(f"Line {index}: {e}") from None

        items.append(SaleItem(product_id=line.product_id, quantity=quantity, price=price))
        requested[line.product_id] = requested.get(line.product_id, 0) + quantity

    return tuple(items), requested


def _check_availability(catalog: CatalogStore, requested: Dict[str, int]) -> None:
    for product_id, quantity in requested.items():
        product = catalog.get_product(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        if product.stock < quantity:
            raise InsufficientStock(
                product_id=product_id,
                available=product.stock,
                requested=quantity,
                name=product.name,
            )


def _restore_stock(catalog: CatalogStore, applied: List[Tuple[str, int]]) -> None:
    """Undo decrements that were applied before the commit failed."""

    for product_id, quantity in reversed(applied):
        try:
            catalog.adjust_stock(product_id, quantity)
        except Exception:
            # Keep restoring the rest; the original failure is re-raised by the caller.
            logger.exception(
                "Failed to restore stock after aborted checkout",
                extra={"product_id": product_id, "quantity": quantity},
            )


def _commit_once(
    items: Tuple[SaleItem, ...],
    requested: Dict[str, int],
    catalog: CatalogStore,
    ledger: SaleLedger,
    now: Optional[datetime],
) -> SaleRecord:
    with catalog.write_lock():
        _check_availability(catalog, requested)

        sale = SaleRecord(
            sale_id=str(uuid4()),
            items=items,
            total=sum_line_totals(items),
            timestamp=now if now is not None else utc_now(),
        )

        if isinstance(ledger, TransactionalSaleLedger):
            return ledger.record_checkout(sale)

        applied: List[Tuple[str, int]] = []
        try:
            for product_id, quantity in requested.items():
                catalog.adjust_stock(product_id, -quantity)
                applied.append((product_id, quantity))
            ledger.append_sale(sale)
        except Exception:
            _restore_stock(catalog, applied)
            raise

    return sale


def commit_sale(
    line_items: Sequence[LineItem],
    *,
    catalog: CatalogStore,
    ledger: SaleLedger,
    now: Optional[datetime] = None,
    max_conflict_retries: int = 2,
) -> SaleRecord:
    """
    Commit a cart as a sale.

    Process:
    1. Validate line items (non-empty, positive integer quantities, valid prices)
    2. Check every product exists and has enough stock for the summed quantity
    3. Decrement stock for each distinct product
    4. Record the sale with the captured unit prices and the current time
    5. On Conflict, undo the decrements and retry from step 2

    Args:
        line_items: Cart lines (product_id, quantity, unit price at sale time)
        catalog: Catalog store holding product stock
        ledger: Sale ledger receiving the new sale
        now: Commit timestamp override (UTC); defaults to the current time
        max_conflict_retries: How many times to retry after a Conflict

    Returns:
        The committed SaleRecord

    Raises:
        InvalidRequest: empty cart or malformed line
        ProductNotFound: a line references an unknown product
        InsufficientStock: a product does not have enough units
        Conflict: concurrent writes kept winning after all retries
    """

    if now is not None:
        require_utc_timestamp("now", now)

    items, requested = _validate_line_items(line_items)

    attempt = 0
    while True:
        try:
            sale = _commit_once(items, requested, catalog, ledger, now)
        except (InvalidRequest, ProductNotFound, InsufficientStock) as e:
            logger.warning(
                f"Checkout rejected: {e}",
                extra={"error_kind": type(e).__name__, "line_count": len(items)},
            )
            raise
        except Conflict as e:
            if attempt >= max_conflict_retries:
                logger.warning(
                    f"Checkout conflict, giving up after {attempt + 1} attempts: {e}",
                    extra={"product_id": e.product_id},
                )
                raise
            attempt += 1
            logger.warning(
                f"Checkout conflict, retrying (attempt {attempt + 1}): {e}",
                extra={"product_id": e.product_id},
            )
            continue

        logger.info(
            f"Sale {sale.sale_id} committed",
            extra={
                "sale_id": sale.sale_id,
                "total": str(sale.total),
                "item_count": sale.item_count,
                "product_count": len(requested),
            },
        )
        return sale


def sale_total_for(line_items: Sequence[LineItem]) -> Decimal:
    """Subtotal of a cart without committing it."""

    items, _ = _validate_line_items(line_items)
    return sum_line_totals(items)


__all__ = ["commit_sale", "sale_total_for"]
