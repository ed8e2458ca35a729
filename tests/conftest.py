"""
Pytest configuration.

This file adds the parent directory to the Python path so that tests
can import from the domain, repositories, services and api modules, and
provides small builders shared across test modules.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.product import Product  # noqa: E402
from repositories.memory_repository import create_memory_stores  # noqa: E402


@pytest.fixture
def make_product():
    """Build a Product with sensible defaults."""

    def _make(product_id: str, stock: int, price: str = "10.00", name=None, category: str = "Main Course") -> Product:
        return Product(
            product_id=product_id,
            name=name or f"Product {product_id}",
            category=category,
            price=Decimal(price),
            stock=stock,
        )

    return _make


@pytest.fixture
def stores(make_product):
    """In-memory catalog and ledger with two products and no sales."""

    return create_memory_stores(
        [
            make_product("p1", stock=3, price="8.50", name="Hummus Platter", category="Appetizer"),
            make_product("p2", stock=10, price="18.00", name="Lamb Kebabs"),
        ]
    )
