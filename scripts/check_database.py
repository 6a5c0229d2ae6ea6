#!/usr/bin/env python3
"""
Database Check Script

Verifies the configured database is reachable, creates any missing tables
and prints row counts per table.
Usage: python scripts/check_database.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy import func, select

from portal.core.config import get_settings
from portal.db.database import check_database_connection, get_db_session, init_schema
from portal.models import Base


def main():
    settings = get_settings()
    print("=" * 50)
    print("STUDY ABROAD PORTAL - DATABASE CHECK")
    print("=" * 50)

    url = settings.sqlalchemy_url
    if settings.postgres_password and settings.postgres_password in url:
        url = url.replace(settings.postgres_password, "****")
    print(f"\n[1] Connecting to {url}")
    if not check_database_connection():
        print("    ❌ Database: FAILED")
        sys.exit(1)
    print("    ✅ Database: CONNECTED")

    print("\n[2] Creating missing tables...")
    init_schema()
    print("    ✅ Schema ready")

    print("\n[3] Row counts:")
    with get_db_session() as db:
        for table in Base.metadata.sorted_tables:
            count = db.execute(select(func.count()).select_from(table)).scalar_one()
            print(f"    - {table.name}: {count}")

    print("\n" + "=" * 50)
    print("Database check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
