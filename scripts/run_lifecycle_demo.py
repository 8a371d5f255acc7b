#!/usr/bin/env python3
"""
Run the product lifecycle end to end against the in-memory store and the mock
payment catalog, printing each stage to the terminal.

Usage (from repo root):
  python scripts/run_lifecycle_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.catalog.access import can_read, visible_fields
from src.catalog.lifecycle import ProductLifecycleCoordinator
from src.catalog.models import Principal
from src.database.postgres import PostgresDB
from src.integrations.clients.mocks.payment_catalog import MockPaymentCatalogClient


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    db = PostgresDB()
    catalog = MockPaymentCatalogClient()
    coordinator = ProductLifecycleCoordinator(db, catalog)

    seller = db.create_user(email="seller@example.com")
    admin = db.create_user(email="admin@example.com", role="admin")

    payload = {
        "name": "Icon Pack",
        "price": 9.99,
        "category": "icons",
        "product_file_id": "file-1",
        "image_ids": ["img-1"],
        "user_id": admin.id,  # ignored: the owner is always the caller
    }
    print_stage("SELLER SUBMITTED: New product", payload)

    product = await coordinator.create_product(payload, Principal.from_user(seller))
    print_stage("CREATED (admin view)", visible_fields(product.to_dict(), Principal.from_user(admin)))
    print_stage("CREATED (seller view)", visible_fields(product.to_dict(), Principal.from_user(db.get_user_by_id(seller.id))))
    print_stage("SELLER OWNERSHIP INDEX", db.get_user_by_id(seller.id).products)

    updated = await coordinator.update_product(
        product.id,
        {"name": "Icon Pack Pro", "price": 14.5, "approved_for_sale": "approved"},
        Principal.from_user(admin),
    )
    print_stage("ADMIN UPDATED: name, price, approval", visible_fields(updated.to_dict(), Principal.from_user(admin)))
    print_stage("PAYMENT CATALOG CALLS", [{"operation": op, **args} for op, args in catalog.calls])
    print_stage("ANONYMOUS READ DECISION", repr(can_read(None)))

    print("\n" + "=" * 60)
    print("  Demo complete. Check logs above for each stage.")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
