"""
Product API Endpoints.

Endpoints for browsing the catalog and managing inventory.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_catalog, http_error
from api.models import ProductRequest, ProductResponse
from domain.errors import PosError
from domain.product import Product
from repositories.stores import CatalogStore
from services import inventory_service
from services.inventory_service import ProductDraft

router = APIRouter()


@router.get(
    "/products",
    response_model=List[ProductResponse],
    summary="List Products",
    description="List all catalog products ordered by name."
)
def list_products(catalog: CatalogStore = Depends(get_catalog)):
    try:
        products = inventory_service.list_products(catalog=catalog)
        return [ProductResponse.from_domain(product) for product in products]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch products: {str(e)}")


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Get Product"
)
def get_product(product_id: str, catalog: CatalogStore = Depends(get_catalog)):
    try:
        return ProductResponse.from_domain(inventory_service.get_product(product_id, catalog=catalog))
    except PosError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch product: {str(e)}")


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=201,
    summary="Add Product",
    description="Create a product with an initial price and stock. The id and image are assigned by the server."
)
def create_product(request: ProductRequest, catalog: CatalogStore = Depends(get_catalog)):
    try:
        draft = ProductDraft(
            name=request.name,
            category=request.category,
            price=request.price,
            stock=request.stock,
        )
        return ProductResponse.from_domain(inventory_service.create_product(draft, catalog=catalog))
    except PosError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add product: {str(e)}")


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Update Product",
    description="Overwrite name, category, price and stock of an existing product."
)
def update_product(product_id: str, request: ProductRequest, catalog: CatalogStore = Depends(get_catalog)):
    """
    Full overwrite of a product's mutable fields.

    **Conflicts:**
    If a checkout changes the product's stock while the edit is being applied,
    the edit is rejected with 409 so the operator can review the new stock.
    """
    try:
        product = Product(
            product_id=product_id,
            name=request.name,
            category=request.category,
            price=request.price,
            stock=request.stock,
        )
        return ProductResponse.from_domain(inventory_service.update_product(product, catalog=catalog))
    except PosError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update product: {str(e)}")
