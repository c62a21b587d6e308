#!/usr/bin/env python3
"""
Seed Script - register Career Center staff into the snapshot database.

Staff accounts are not self-registered; run this once per deployment,
then start the API with PLACEMENT_LOAD_ON_STARTUP=true.

Usage: python scripts/seed_staff.py STAFF_ID "Full Name" [email]
"""
import sys
sys.path.insert(0, '.')

from placement_hub.core.config import get_settings
from placement_hub.core.errors import PlacementError
from placement_hub.db.database import get_db_session, init_db
from placement_hub.services.placement_service import PlacementService


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    staff_id, name = sys.argv[1], sys.argv[2]
    email = sys.argv[3] if len(sys.argv) > 3 else ""

    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT HUB - SEED STAFF")
    print("=" * 50)
    print(f"    Database: {settings.database_url}")

    init_db()
    service = PlacementService()
    with get_db_session() as db:
        service.load(db)
        try:
            service.register_staff(staff_id, name, email=email)
        except PlacementError as e:
            print(f"    ❌ {e}")
            sys.exit(1)
        counts = service.save(db)

    print(f"    ✅ Staff {staff_id} registered")
    print(f"    Snapshot: {counts}")


if __name__ == "__main__":
    main()
