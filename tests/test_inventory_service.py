"""
Tests for `services/inventory_service.py`.

Covers contract rules:
- create_product assigns a fresh id and a placeholder image derived from the name.
- Empty name/category and negative or malformed price/stock are rejected.
- update_product is a full overwrite of name, category, price and stock.
- Unknown ids raise ProductNotFound.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from domain.errors import Conflict, InvalidRequest, ProductNotFound
from domain.product import Product
from services.inventory_service import (
    ProductDraft,
    create_product,
    get_product,
    list_products,
    update_product,
)


def test_create_product_assigns_id_and_image(stores) -> None:
    catalog, _ = stores

    product = create_product(
        ProductDraft(name="  Mint Lemonade ", category="Drinks", price=Decimal("4.50"), stock=100),
        catalog=catalog,
    )

    assert product.product_id not in ("p1", "p2")
    assert product.name == "Mint Lemonade"
    assert product.image_url == "https://picsum.photos/seed/MintLemonade/400"
    assert catalog.get_product(product.product_id) == product


def test_create_product_ids_are_unique(stores) -> None:
    catalog, _ = stores
    draft = ProductDraft(name="Baklava", category="Dessert", price=Decimal("5.00"), stock=70)

    first = create_product(draft, catalog=catalog)
    second = create_product(draft, catalog=catalog)

    assert first.product_id != second.product_id


@pytest.mark.parametrize(
    "draft",
    [
        ProductDraft(name="", category="Drinks", price=Decimal("1.00"), stock=1),
        ProductDraft(name="Water", category="   ", price=Decimal("1.00"), stock=1),
        ProductDraft(name="Water", category="Drinks", price=Decimal("-0.01"), stock=1),
        ProductDraft(name="Water", category="Drinks", price=Decimal("1.001"), stock=1),
        ProductDraft(name="Water", category="Drinks", price=Decimal("1.00"), stock=-1),
        ProductDraft(name="Water", category="Drinks", price=Decimal("1.00"), stock=1.5),  # type: ignore[arg-type]
    ],
)
def test_create_product_rejects_invalid_data(stores, draft) -> None:
    catalog, _ = stores

    with pytest.raises(InvalidRequest):
        create_product(draft, catalog=catalog)
    assert len(catalog.list_products()) == 2


def test_update_product_overwrites_all_mutable_fields(stores) -> None:
    catalog, _ = stores
    original = catalog.get_product("p1")

    updated = update_product(
        Product(product_id="p1", name="Hummus", category="Starter", price=Decimal("9.25"), stock=0),
        catalog=catalog,
    )

    assert (updated.name, updated.category, updated.price, updated.stock) == ("Hummus", "Starter", Decimal("9.25"), 0)
    assert updated.image_url == original.image_url
    assert catalog.get_product("p1") == updated


def test_update_product_unknown_id(stores) -> None:
    catalog, _ = stores

    with pytest.raises(ProductNotFound):
        update_product(
            Product(product_id="ghost", name="Ghost", category="None", price=Decimal("1.00"), stock=1),
            catalog=catalog,
        )


def test_update_product_rejects_invalid_fields(stores) -> None:
    catalog, _ = stores

    with pytest.raises(InvalidRequest):
        update_product(
            Product(product_id="p1", name="Hummus", category="Starter", price=Decimal("9.00"), stock=-5),
            catalog=catalog,
        )
    assert catalog.get_product("p1").stock == 3


def test_update_product_surfaces_store_conflict(stores) -> None:
    """A stock change between the read and the guarded write is reported, not overwritten."""

    catalog, _ = stores

    class _RacingCatalog:
        def __init__(self, inner):
            self.inner = inner

        def write_lock(self):
            return self.inner.write_lock()

        def get_product(self, product_id):
            product = self.inner.get_product(product_id)
            # A checkout lands right after the edit read the product.
            self.inner.adjust_stock(product_id, -1)
            return product

        def update_product(self, product_id, fields, *, expected_stock=None):
            return self.inner.update_product(product_id, fields, expected_stock=expected_stock)

    with pytest.raises(Conflict):
        update_product(
            Product(product_id="p1", name="Hummus", category="Starter", price=Decimal("9.00"), stock=50),
            catalog=_RacingCatalog(catalog),
        )
    assert catalog.get_product("p1").stock == 2


def test_list_products_orders_by_name(stores) -> None:
    catalog, _ = stores
    create_product(ProductDraft(name="Baklava", category="Dessert", price=Decimal("5.00"), stock=70), catalog=catalog)

    assert [p.name for p in list_products(catalog=catalog)] == ["Baklava", "Hummus Platter", "Lamb Kebabs"]


def test_get_product(stores) -> None:
    catalog, _ = stores

    assert get_product("p2", catalog=catalog).name == "Lamb Kebabs"
    with pytest.raises(ProductNotFound):
        get_product("ghost", catalog=catalog)
