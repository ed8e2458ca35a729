"""
Sales API Endpoints.

Endpoints for checkout and the sale history.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_app_settings, get_catalog, get_ledger, http_error
from api.models import CheckoutRequest, QuoteResponse, SaleResponse
from domain.errors import PosError
from domain.sale import LineItem
from repositories.stores import CatalogStore, SaleLedger
from services.checkout_service import commit_sale, sale_total_for
from settings import Settings

router = APIRouter()


def _to_line_items(request: CheckoutRequest) -> List[LineItem]:
    return [
        LineItem(product_id=item.product_id, quantity=item.quantity, price=item.price)
        for item in request.items
    ]


@router.get(
    "/sales",
    response_model=List[SaleResponse],
    summary="List Sales",
    description="Sale history, most recent first."
)
def list_sales(ledger: SaleLedger = Depends(get_ledger)):
    try:
        return [SaleResponse.from_domain(sale) for sale in ledger.list_sales()]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch sales: {str(e)}")


@router.post(
    "/sales/quote",
    response_model=QuoteResponse,
    summary="Cart Subtotal",
    description="Validate a cart's lines and return its subtotal without committing."
)
def quote_cart(request: CheckoutRequest):
    try:
        line_items = _to_line_items(request)
        return QuoteResponse(
            subtotal=sale_total_for(line_items),
            total_items=sum(item.quantity for item in line_items),
        )
    except PosError as e:
        raise http_error(e)


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    summary="Checkout",
    description="Commit a cart: validate stock, decrement it and record the sale (all-or-nothing)."
)
def checkout(
    request: CheckoutRequest,
    catalog: CatalogStore = Depends(get_catalog),
    ledger: SaleLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
):
    """
    Commit the cart as a sale.

    **All-or-Nothing Strategy:**
    Every line is validated before any stock changes. If one product is short,
    nothing is decremented and no sale is recorded.

    **Errors:**
    - 400 InvalidRequest: empty cart, non-positive quantity, invalid price
    - 404 ProductNotFound: a line references an unknown product
    - 409 InsufficientStock: adjust the cart and try again
    - 409 Conflict: concurrent checkouts kept changing stock; retry
    """
    try:
        sale = commit_sale(
            _to_line_items(request),
            catalog=catalog,
            ledger=ledger,
            max_conflict_retries=settings.checkout_conflict_retries,
        )
        return SaleResponse.from_domain(sale)
    except PosError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to complete checkout: {str(e)}")
