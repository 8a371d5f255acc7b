#!/usr/bin/env python3
"""
Rebuild users' ownership lists from the products table.

The incremental append done on product creation can lose an id when the same
user creates two products concurrently. This script recomputes the list for
one user (or every user who owns a product) from `products.user_id`.

Uses DATABASE_URL environment variable.

Usage (from repo root):
  python scripts/reconcile_ownership.py [--user-id USER_ID]
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.catalog.ownership import OwnershipIndex
from src.database.postgres_real import PostgresDB

logger = logging.getLogger("reconcile_ownership")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--user-id", help="Only reconcile this user")
    args = parser.parse_args()

    url = os.environ.get("DATABASE_URL")
    if not url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1

    db = PostgresDB(connection_string=url)
    index = OwnershipIndex(db)

    user_ids = [args.user_id] if args.user_id else sorted({p.user_id for p in db.list_products()})
    failed = 0
    for user_id in user_ids:
        try:
            products = index.recompute(user_id)
            logger.info("User %s owns %d product(s)", user_id, len(products))
        except LookupError as e:
            logger.warning("Skipping %s: %s", user_id, e)
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
