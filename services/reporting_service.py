"""
Reporting service for sales and stock summaries.

`compute_report` is a pure function of its inputs: no I/O, no mutation, and
identical inputs always produce an identical snapshot. It never raises on odd
but well-typed data (e.g. negative stock); values are used as given.

Day boundaries are evaluated in one fixed timezone passed by the caller
(REPORT_TIMEZONE, default UTC), never the host locale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from domain.product import LOW_STOCK_THRESHOLD, Product
from domain.sale import SaleRecord
from domain.time import utc_now
from repositories.stores import CatalogStore, SaleLedger

TOP_SELLER_LIMIT: int = 5

_WEEKDAY_LABELS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class DailySeriesMode(str, Enum):
    """
    How sales are grouped for the daily series.

    CALENDAR_DATE groups by actual date (chronological). WEEKDAY reproduces the
    legacy chart, which merges every sale sharing a weekday name regardless of
    week, emitted in reverse first-encountered order.
    """

    CALENDAR_DATE = "calendar_date"
    WEEKDAY = "weekday"


@dataclass(frozen=True, slots=True)
class DailySalesEntry:
    label: str
    sales: int
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class TopSeller:
    product_id: str
    name: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ReportSnapshot:
    """Aggregate view over the catalog and sale history for one reference day."""

    reference_date: date
    sales_today: int
    revenue_today: Decimal
    daily_series: Tuple[DailySalesEntry, ...]
    top_sellers: Tuple[TopSeller, ...]
    low_stock: Tuple[Product, ...]


def _local_date(moment: datetime, tz: tzinfo) -> date:
    return moment.astimezone(tz).date()


def _resolve_reference_date(reference: date | datetime, tz: tzinfo) -> date:
    if isinstance(reference, datetime):
        if reference.tzinfo is None or reference.utcoffset() is None:
            raise ValueError("reference_date must be timezone-aware")
        return _local_date(reference, tz)
    return reference


def _daily_series(sales: Sequence[SaleRecord], tz: tzinfo, mode: DailySeriesMode) -> Tuple[DailySalesEntry, ...]:
    counts: Dict[str, int] = {}
    revenue: Dict[str, Decimal] = {}

    for sale in sales:
        day = _local_date(sale.timestamp, tz)
        label = _WEEKDAY_LABELS[day.weekday()] if mode is DailySeriesMode.WEEKDAY else day.isoformat()
        counts[label] = counts.get(label, 0) + 1
        revenue[label] = revenue.get(label, Decimal("0.00")) + sale.total

    if mode is DailySeriesMode.WEEKDAY:
        labels = list(reversed(list(counts)))
    else:
        # ISO dates sort chronologically as strings.
        labels = sorted(counts)

    return tuple(DailySalesEntry(label=label, sales=counts[label], revenue=revenue[label]) for label in labels)


def _top_sellers(products: Sequence[Product], sales: Sequence[SaleRecord], limit: int) -> Tuple[TopSeller, ...]:
    known = {product.product_id: product for product in products}
    quantities: Dict[str, int] = {}

    for sale in sales:
        for item in sale.items:
            # Items for products no longer in the catalog do not rank.
            if item.product_id not in known:
                continue
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

    # sorted() is stable, so ties keep first-encountered order.
    ranked = sorted(quantities.items(), key=lambda entry: entry[1], reverse=True)
    return tuple(
        TopSeller(product_id=product_id, name=known[product_id].name, quantity=quantity)
        for product_id, quantity in ranked[:limit]
    )


def _low_stock(products: Sequence[Product], threshold: int) -> Tuple[Product, ...]:
    flagged = [product for product in products if product.stock <= threshold]
    return tuple(sorted(flagged, key=lambda product: product.stock))


def compute_report(
    products: Sequence[Product],
    sales: Sequence[SaleRecord],
    reference_date: date | datetime,
    *,
    tz: tzinfo = timezone.utc,
    series_mode: DailySeriesMode = DailySeriesMode.CALENDAR_DATE,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    top_n: int = TOP_SELLER_LIMIT,
) -> ReportSnapshot:
    """
    Derive the sales report.

    Args:
        products: Current catalog
        sales: Sale history (ledger order, most recent first)
        reference_date: The "today" for today's metrics; a date, or an aware
            datetime converted into `tz`
        tz: Timezone that defines calendar days
        series_mode: Grouping used for the daily series
        low_stock_threshold: Products at or below this stock are flagged
        top_n: Number of top sellers to return

    Returns:
        ReportSnapshot
    """

    today = _resolve_reference_date(reference_date, tz)

    sales_today = [sale for sale in sales if _local_date(sale.timestamp, tz) == today]
    revenue_today = Decimal("0.00")
    for sale in sales_today:
        revenue_today += sale.total

    return ReportSnapshot(
        reference_date=today,
        sales_today=len(sales_today),
        revenue_today=revenue_today,
        daily_series=_daily_series(sales, tz, series_mode),
        top_sellers=_top_sellers(products, sales, top_n),
        low_stock=_low_stock(products, low_stock_threshold),
    )


def build_report(
    *,
    catalog: CatalogStore,
    ledger: SaleLedger,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    series_mode: DailySeriesMode = DailySeriesMode.CALENDAR_DATE,
) -> ReportSnapshot:
    """Read both stores and compute the report for `now` (default: current time)."""

    products: List[Product] = catalog.list_products()
    sales: List[SaleRecord] = ledger.list_sales()
    return compute_report(
        products,
        sales,
        now if now is not None else utc_now(),
        tz=tz,
        series_mode=series_mode,
    )


__all__ = [
    "DailySeriesMode",
    "DailySalesEntry",
    "TopSeller",
    "ReportSnapshot",
    "compute_report",
    "build_report",
]
