"""
Sample menu and sales history for the in-memory stores.

The history is generated from a seeded random generator so repeated runs (and
tests) see the same data for the same `now`.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from domain.product import Product, placeholder_image_url
from domain.sale import SaleItem, SaleRecord, sum_line_totals
from domain.time import require_utc_timestamp


def _product(product_id: str, name: str, category: str, price: str, stock: int, seed: str) -> Product:
    return Product(
        product_id=product_id,
        name=name,
        category=category,
        price=Decimal(price),
        stock=stock,
        image_url=placeholder_image_url(seed),
    )


SAMPLE_PRODUCTS: tuple[Product, ...] = (
    # Appetizers
    _product("p1", "Hummus Platter", "Appetizer", "8.50", 50, "hummus"),
    _product("p2", "Falafel Bites", "Appetizer", "7.00", 60, "falafel"),
    _product("p3", "Stuffed Grape Leaves", "Appetizer", "6.50", 45, "grapeleaves"),
    # Main Courses
    _product("p4", "Lamb Kebabs", "Main Course", "18.00", 30, "kebabs"),
    _product("p5", "Chicken Biryani", "Main Course", "16.50", 40, "biryani"),
    _product("p6", "Grilled Salmon", "Main Course", "22.00", 25, "salmon"),
    _product("p7", "Vegetable Tagine", "Main Course", "14.00", 35, "tagine"),
    # Desserts
    _product("p8", "Baklava", "Dessert", "5.00", 70, "baklava"),
    _product("p9", "Kunafa", "Dessert", "6.50", 40, "kunafa"),
    # Drinks
    _product("p10", "Mint Lemonade", "Drinks", "4.50", 100, "lemonade"),
    _product("p11", "Turkish Coffee", "Drinks", "3.50", 80, "turkishcoffee"),
    _product("p12", "Sparkling Water", "Drinks", "3.00", 120, "water"),
)


def generate_sample_sales(
    products: Sequence[Product],
    now: datetime,
    count: int = 50,
    days: int = 30,
    rng: Optional[random.Random] = None,
) -> List[SaleRecord]:
    """
    Build a sample sales history spread over the `days` before `now`.

    Each sale has 1-3 lines of quantity 1-2, priced at the product's current
    price. Sample sales do not touch stock.

    Returns:
        List[SaleRecord] ordered most-recent-first
    """

    require_utc_timestamp("now", now)
    if not products:
        return []

    rng = rng if rng is not None else random.Random(0)
    window_seconds = days * 24 * 60 * 60

    sales: List[SaleRecord] = []
    for i in range(count):
        items = []
        for _ in range(rng.randint(1, 3)):
            product = rng.choice(products)
            items.append(SaleItem(product_id=product.product_id, quantity=rng.randint(1, 2), price=product.price))
        timestamp = now - timedelta(seconds=rng.uniform(0, window_seconds))
        sales.append(
            SaleRecord(
                sale_id=f"s{i + 1}",
                items=tuple(items),
                total=sum_line_totals(items),
                timestamp=timestamp,
            )
        )

    sales.sort(key=lambda sale: sale.timestamp, reverse=True)
    return sales


__all__ = ["SAMPLE_PRODUCTS", "generate_sample_sales"]
