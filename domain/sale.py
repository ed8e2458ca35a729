"""
Domain: Sale records.

Contract excerpts implemented here:
- A SaleItem has a positive integer quantity and a non-negative unit price.
- A SaleItem captures the unit price at time of sale. Later price changes on
  the Product never alter the recorded value of past sales.
- A Sale has a non-empty item list and total == sum(item.price * item.quantity)
  exactly.
- A Sale is immutable once created; its timestamp is fixed at commit time.

This module captures sale events. Stock validation and decrement live with the
checkout service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Tuple

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    A cart line proposed for purchase.

    Values are taken as sent by the caller; checkout validates them before
    turning them into SaleItems.
    """

    product_id: str
    quantity: Any
    price: Any


@dataclass(frozen=True, slots=True)
class SaleItem:
    """One line of a sale: product reference, quantity and captured unit price."""

    product_id: str
    quantity: int
    price: Decimal

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValueError("product_id is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")
        if not isinstance(self.price, Decimal) or not self.price.is_finite() or self.price < 0:
            raise ValueError(f"price must be a non-negative Decimal, got {self.price!r}")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


def sum_line_totals(items: Iterable[SaleItem]) -> Decimal:
    total = Decimal("0.00")
    for item in items:
        total += item.line_total
    return total


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a committed sale.

    The total is stored redundantly for fast reporting reads; construction
    fails if it disagrees with the items.
    """

    sale_id: str
    items: Tuple[SaleItem, ...]
    total: Decimal
    timestamp: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("timestamp", self.timestamp)
        if not isinstance(self.items, tuple):
            # Freeze caller-supplied lists so the record cannot be mutated through them.
            object.__setattr__(self, "items", tuple(self.items))
        if not self.items:
            raise ValueError("A sale must contain at least one item")
        expected = sum_line_totals(self.items)
        if self.total != expected:
            raise ValueError(f"Sale total {self.total} does not match item sum {expected}")

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
