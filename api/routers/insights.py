"""
Insights API Endpoints.

Free-text questions about sales, answered by the insight assistant. Failures
come back as a message in the response body so the rest of the app keeps working.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_app_settings, get_catalog, get_insight_client, get_ledger
from api.models import InsightRequest, InsightResponse
from domain.errors import ServiceError
from repositories.stores import CatalogStore, SaleLedger
from services.insight_service import InsightClient, ask_sales_insights
from settings import Settings

router = APIRouter()


@router.post(
    "/insights",
    response_model=InsightResponse,
    summary="Ask Sales Insights",
    description="Ask a question about sales and inventory data."
)
def ask_insights(
    request: InsightRequest,
    catalog: CatalogStore = Depends(get_catalog),
    ledger: SaleLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
    client: Optional[InsightClient] = Depends(get_insight_client),
):
    try:
        products = catalog.list_products()
        sales = ledger.list_sales()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load data for insights: {str(e)}")

    try:
        answer = ask_sales_insights(request.question, products, sales, client=client, settings=settings)
    except ServiceError as e:
        return InsightResponse(error=str(e))

    return InsightResponse(answer=answer)
