"""
Store selection.

Supabase-backed stores when credentials are configured, otherwise in-memory
stores seeded with the sample menu.
"""

from __future__ import annotations

import logging
from typing import Optional

from domain.time import utc_now
from repositories.memory_repository import create_memory_stores
from repositories.seed_data import SAMPLE_PRODUCTS, generate_sample_sales
from repositories.stores import CatalogStore, SaleLedger
from settings import Settings

logger = logging.getLogger(__name__)


def build_stores(settings: Settings, *, client: Optional[object] = None) -> tuple[CatalogStore, SaleLedger]:
    """
    Build the catalog store and sale ledger for the given settings.

    Args:
        settings: Application settings
        client: Optional pre-built Supabase client (used instead of creating one)

    Returns:
        (catalog, ledger)
    """

    if settings.use_supabase or client is not None:
        # Imported here so the in-memory mode does not need Supabase credentials.
        from repositories.client import get_supabase
        from repositories.product_repository import SupabaseProductRepository
        from repositories.sale_repository import SupabaseSaleRepository

        supabase = client if client is not None else get_supabase(settings)
        logger.info("Using Supabase stores")
        return SupabaseProductRepository(supabase), SupabaseSaleRepository(supabase)  # type: ignore[arg-type]

    logger.warning("Supabase environment variables not set. Falling back to in-memory sample data.")
    sales = generate_sample_sales(SAMPLE_PRODUCTS, now=utc_now()) if settings.seed_sample_sales else []
    return create_memory_stores(SAMPLE_PRODUCTS, sales)


__all__ = ["build_stores"]
