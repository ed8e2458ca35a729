"""
FastAPI dependencies.

Stores are built once per process from settings. Tests replace these with
`app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import HTTPException

from domain.errors import Conflict, InsufficientStock, InvalidRequest, PosError, ProductNotFound
from repositories.factory import build_stores
from repositories.stores import CatalogStore, SaleLedger
from services.insight_service import InsightClient
from settings import Settings, get_settings


@lru_cache(maxsize=1)
def _stores() -> tuple[CatalogStore, SaleLedger]:
    return build_stores(get_settings())


def get_app_settings() -> Settings:
    return get_settings()


def get_catalog() -> CatalogStore:
    return _stores()[0]


def get_ledger() -> SaleLedger:
    return _stores()[1]


def get_insight_client() -> Optional[InsightClient]:
    # None lets the insight service build a Gemini client from settings.
    return None


_STATUS_BY_ERROR: dict[type[PosError], int] = {
    InvalidRequest: 400,
    ProductNotFound: 404,
    InsufficientStock: 409,
    Conflict: 409,
}


def http_error(error: PosError) -> HTTPException:
    """Map a domain error kind onto an HTTPException."""

    status_code = _STATUS_BY_ERROR.get(type(error), 500)
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "detail": str(error), "status_code": status_code},
    )
