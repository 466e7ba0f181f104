# =============================================================================
# scripts/setup_supabase_tables.py
# Prepare a Supabase project for FabStock Manager
# =============================================================================
"""
Run this script to:
1. Print the SQL that creates the inventory/machines/maintenance/team tables
2. Check that every table is reachable with the given credentials
3. Optionally upload the built-in demo dataset (--seed)

Usage:
    python scripts/setup_supabase_tables.py [--seed]

Prerequisites:
    - SUPABASE_URL and SUPABASE_KEY set in the environment or in .env
"""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fabstock_core import config  # noqa: F401  (loads .env)
from fabstock_core.errors import FabStockError
from fabstock_core.models import Collection
from fabstock_core.models.collections import ALL_COLLECTIONS
from fabstock_core.storage import RemoteStore, schema_sql


def connect() -> RemoteStore:
    url = os.getenv("SUPABASE_URL", "")
    key = os.getenv("SUPABASE_KEY", "")

    if not url or not key:
        print("ERROR: Missing Supabase credentials.")
        print("Set SUPABASE_URL and SUPABASE_KEY (environment or .env).")
        sys.exit(1)

    print(f"Using Supabase URL: {url[:40]}...")
    return RemoteStore.connect(url, key, autostart_watchers=False)


def check_tables(store: RemoteStore) -> bool:
    print("\n[2/3] Checking tables...")
    ok = True
    for collection in ALL_COLLECTIONS:
        try:
            rows = store.select_all(collection.table)
            print(f"      {collection.table}: {len(rows)} rows")
        except FabStockError as e:
            print(f"      {collection.table}: MISSING ({e.message})")
            ok = False
    return ok


def seed_demo_data(store: RemoteStore):
    print("\n[3/3] Uploading demo dataset...")
    for collection in ALL_COLLECTIONS:
        records = collection.default_records()
        store.upsert(collection.table, Collection.serialize(records))
        print(f"      {collection.table}: {len(records)} rows upserted")


def main():
    print("=" * 70)
    print(" FABSTOCK MANAGER - SUPABASE SETUP SCRIPT")
    print("=" * 70)

    print("\n[1/3] Create the tables with this SQL (Supabase > SQL editor):\n")
    print(schema_sql())

    store = connect()
    if not check_tables(store):
        print("\nCreate the missing tables, then run this script again.")
        sys.exit(1)

    if "--seed" in sys.argv[1:]:
        seed_demo_data(store)
    else:
        print("\n[3/3] Skipped demo dataset (pass --seed to upload it).")

    print("\n" + "=" * 70)
    print(" SETUP COMPLETE! Select 'Supabase' in Settings > Storage.")
    print("=" * 70)


if __name__ == "__main__":
    main()
