#!/usr/bin/env python3
"""
Create the marketplace tables (users, products) and optionally seed an admin.

The target comes from the same config the API uses (DATABASE_URL or
config/marketplace_config.yml). Existing tables are left as they are.

Usage (from repo root):
  python scripts/init_database.py [--admin-email EMAIL]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, OperationalError

from src.database.postgres_real import PostgresDB
from src.utils.config_loader import load_marketplace_config

logger = logging.getLogger("init_database")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--admin-email", help="Create an admin user with this email")
    args = parser.parse_args()

    config = load_marketplace_config()
    if not config.database.url:
        logger.error("DATABASE_URL is not set")
        return 1

    db = PostgresDB(connection_string=config.database.url)
    try:
        db.create_tables()
    except OperationalError as e:
        logger.error("Failed to connect to database: %s", e)
        return 2

    logger.info("Tables present: %s", sorted(inspect(db.engine).get_table_names()))

    if args.admin_email:
        try:
            admin = db.create_user(email=args.admin_email, role="admin")
            logger.info("Created admin %s (%s)", admin.email, admin.id)
        except IntegrityError:
            logger.warning("A user with email %s already exists; not seeding", args.admin_email)

    return 0


if __name__ == "__main__":
    sys.exit(main())
