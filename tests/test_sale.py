"""
Tests for `domain/sale.py`.

Covers contract rules:
- SaleRecord.timestamp is required and must be a UTC timestamp.
- SaleRecord is immutable (frozen), including its item sequence.
- A sale must contain at least one item.
- total must equal sum(item.price * item.quantity) exactly.
- SaleItem needs a positive integer quantity and a non-negative price.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.sale import SaleItem, SaleRecord, sum_line_totals

UTC_TS = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _items() -> tuple[SaleItem, ...]:
    return (
        SaleItem(product_id="p1", quantity=2, price=Decimal("8.50")),
        SaleItem(product_id="p10", quantity=3, price=Decimal("0.10")),
    )


def test_sale_record_timestamp_must_be_utc() -> None:
    """Verify timestamp enforces UTC timezone-aware timestamp."""

    with pytest.raises(ValueError):
        SaleRecord(sale_id="s1", items=_items(), total=Decimal("17.30"), timestamp=datetime(2025, 1, 1, 0, 0, 0))

    with pytest.raises(ValueError):
        SaleRecord(
            sale_id="s1",
            items=_items(),
            total=Decimal("17.30"),
            timestamp=datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=2))),
        )


def test_sale_record_total_must_match_items() -> None:
    """Verify the stored total cannot disagree with the line items."""

    sale = SaleRecord(sale_id="s1", items=_items(), total=Decimal("17.30"), timestamp=UTC_TS)
    assert sale.total == sum_line_totals(sale.items)

    with pytest.raises(ValueError):
        SaleRecord(sale_id="s1", items=_items(), total=Decimal("17.29"), timestamp=UTC_TS)


def test_sale_record_requires_items() -> None:
    """Verify an empty sale cannot be constructed."""

    with pytest.raises(ValueError):
        SaleRecord(sale_id="s1", items=(), total=Decimal("0.00"), timestamp=UTC_TS)


def test_sale_record_is_immutable() -> None:
    """Verify SaleRecord cannot be mutated after creation (frozen entity)."""

    sale = SaleRecord(sale_id="s1", items=_items(), total=Decimal("17.30"), timestamp=UTC_TS)

    with pytest.raises(FrozenInstanceError):
        sale.total = Decimal("0.00")  # type: ignore[misc]

    with pytest.raises(FrozenInstanceError):
        sale.items[0].price = Decimal("1.00")  # type: ignore[misc]


def test_sale_record_freezes_item_list() -> None:
    """Verify a list passed as items is stored as a tuple, so later edits to the list do not leak in."""

    items = list(_items())
    sale = SaleRecord(sale_id="s1", items=items, total=Decimal("17.30"), timestamp=UTC_TS)  # type: ignore[arg-type]
    items.append(SaleItem(product_id="p2", quantity=1, price=Decimal("1.00")))

    assert isinstance(sale.items, tuple)
    assert len(sale.items) == 2
    assert sale.item_count == 5


def test_line_total_is_exact_decimal() -> None:
    item = SaleItem(product_id="p10", quantity=3, price=Decimal("0.10"))
    assert item.line_total == Decimal("0.30")


@pytest.mark.parametrize(
    "quantity, price",
    [
        (0, Decimal("8.50")),
        (-1, Decimal("8.50")),
        (True, Decimal("8.50")),
        (1.5, Decimal("8.50")),
        (1, Decimal("-0.01")),
        (1, 8.5),
        (1, Decimal("NaN")),
    ],
)
def test_sale_item_rejects_invalid_lines(quantity, price) -> None:
    """Verify a SaleItem needs a positive integer quantity and a non-negative Decimal price."""

    with pytest.raises(ValueError):
        SaleItem(product_id="p1", quantity=quantity, price=price)


def test_sale_item_requires_product_id() -> None:
    with pytest.raises(ValueError):
        SaleItem(product_id="", quantity=1, price=Decimal("8.50"))


def test_sale_item_allows_free_items() -> None:
    assert SaleItem(product_id="p1", quantity=1, price=Decimal("0.00")).line_total == Decimal("0.00")
