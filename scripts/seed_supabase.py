#!/usr/bin/env python3
"""
Sample Data Seeding Script

Loads the sample menu (and optionally a generated sales history) into the
configured Supabase project. Products that already exist are left untouched.

Usage:
    python scripts/seed_supabase.py
    python scripts/seed_supabase.py --with-sales
    python scripts/seed_supabase.py --dry-run
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.time import utc_now
from repositories.factory import build_stores
from repositories.seed_data import SAMPLE_PRODUCTS, generate_sample_sales
from repositories.stores import CatalogStore, SaleLedger
from settings import get_settings


def seed_sample_data(
    catalog: CatalogStore,
    ledger: SaleLedger,
    *,
    now: datetime,
    with_sales: bool = False,
    dry_run: bool = False,
) -> dict[str, int]:
    """
    Insert sample products that are missing, and optionally sample sales.

    Sample sales are only generated when the ledger is empty, so re-running
    the script does not duplicate history.

    Returns:
        Dictionary with statistics: {
            'products_created': int,
            'products_existing': int,
            'sales_created': int
        }
    """
    stats = {
        'products_created': 0,
        'products_existing': 0,
        'sales_created': 0,
    }

    for product in SAMPLE_PRODUCTS:
        if catalog.get_product(product.product_id) is not None:
            stats['products_existing'] += 1
            continue
        if not dry_run:
            catalog.insert_product(product)
        stats['products_created'] += 1

    if with_sales and not ledger.list_sales():
        # Oldest first, so stored order matches commit order.
        for sale in reversed(generate_sample_sales(SAMPLE_PRODUCTS, now=now)):
            if not dry_run:
                ledger.append_sale(sale)
            stats['sales_created'] += 1

    return stats


def print_summary(stats: dict[str, int], dry_run: bool) -> None:
    print("=" * 60)
    print("SAMPLE DATA SUMMARY")
    print("=" * 60)
    print(f"Products Created:         {stats['products_created']}")
    print(f"Products Already Present: {stats['products_existing']}")
    print(f"Sales Created:            {stats['sales_created']}")
    print()

    if dry_run:
        print("** DRY RUN - No records were inserted **")

    print("=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Seed the sample menu into Supabase")
    parser.add_argument("--with-sales", action="store_true", help="Also generate 30 days of sample sales")
    parser.add_argument("--dry-run", action="store_true", help="Simulate without inserting records")
    args = parser.parse_args()

    settings = get_settings()
    if not settings.use_supabase:
        print("SUPABASE_URL and SUPABASE_KEY must be set to seed Supabase.", file=sys.stderr)
        return 1

    try:
        catalog, ledger = build_stores(settings)
        stats = seed_sample_data(
            catalog,
            ledger,
            now=utc_now(),
            with_sales=args.with_sales,
            dry_run=args.dry_run,
        )
        print_summary(stats, args.dry_run)
        return 0

    except KeyboardInterrupt:
        print("\n\nSeeding interrupted by user")
        return 130

    except Exception as e:
        print(f"\nFATAL ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
