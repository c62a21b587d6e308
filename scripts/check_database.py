#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the snapshot database is reachable and readable.
Usage: python scripts/check_database.py
"""
import sys
sys.path.insert(0, '.')

from placement_hub.core.config import get_settings
from placement_hub.db.database import get_db_session, init_db, test_database_connection
from placement_hub.services.placement_service import PlacementService


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT HUB - DATABASE CHECK")
    print("=" * 50)

    print("\n[1] Testing connection...")
    print(f"    URL: {settings.database_url}")
    if not test_database_connection():
        print("    ❌ Database: FAILED")
        sys.exit(1)
    print("    ✅ Database: CONNECTED")

    print("\n[2] Loading snapshot...")
    init_db()
    service = PlacementService()
    with get_db_session() as db:
        counts = service.load(db)
    for table, count in counts.items():
        print(f"    {table:<14} {count}")

    print("\n" + "=" * 50)
    print("Database check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
