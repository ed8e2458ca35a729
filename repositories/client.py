"""
Supabase client initialization.

This module contains *only* the database connection setup. The client is
created lazily so the application can fall back to the in-memory stores when
Supabase credentials are not configured.

Environment variables required for the Supabase backing:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from typing import Optional

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

from settings import Settings


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client from settings.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_KEY is missing.
    """

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


_client: Optional[Client] = None


def get_supabase(settings: Settings) -> Client:
    """Return the process-wide Supabase client, creating it on first use."""

    global _client
    if _client is None:
        _client = create_supabase_client(settings)
    return _client


__all__ = ["create_supabase_client", "get_supabase"]
