"""
Reports API Endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_app_settings, get_catalog, get_ledger
from api.models import ReportResponse
from repositories.stores import CatalogStore, SaleLedger
from services.reporting_service import DailySeriesMode, build_report
from settings import Settings

router = APIRouter()


@router.get(
    "/reports",
    response_model=ReportResponse,
    summary="Sales Report",
    description="Today's sales and revenue, daily series, top sellers and low-stock alerts."
)
def get_report(
    series_mode: DailySeriesMode = Query(
        DailySeriesMode.CALENDAR_DATE,
        description="'calendar_date' (default) or legacy 'weekday' grouping for the daily series",
    ),
    catalog: CatalogStore = Depends(get_catalog),
    ledger: SaleLedger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
):
    """
    Build the sales report.

    Days are evaluated in the configured REPORT_TIMEZONE.
    """
    try:
        snapshot = build_report(
            catalog=catalog,
            ledger=ledger,
            tz=settings.report_tz,
            series_mode=series_mode,
        )
        return ReportResponse.from_domain(snapshot, series_mode.value)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")
