"""
Script to create the PostgreSQL tables and indexes used by the API.

Also sweeps records left behind by workspaces that were deleted outside the
API (their members, channels, conversations, messages and reactions).

Usage:
    python scripts/bootstrap_db.py               # create schema
    python scripts/bootstrap_db.py --print-sql   # only print the DDL
    python scripts/bootstrap_db.py --sweep       # create schema, then sweep orphans
"""

import asyncio
import argparse

# Load environment variables from .env
from dotenv import load_dotenv
load_dotenv()

from teamchat.store.postgres import PostgresDocumentStore, schema_statements


async def bootstrap(sweep: bool = False):
    store = PostgresDocumentStore()

    print(f"\n{'='*80}")
    print("CREATING SCHEMA")
    print(f"{'='*80}")

    try:
        await store.create_schema()
        print(f"✓ {len(store.tables)} tables ready")

        if sweep:
            removed = await store.sweep_orphans()
            print("\nOrphaned records removed:")
            for table, count in removed.items():
                print(f"  {table}: {count}")
    finally:
        await store.disconnect()


async def main():
    parser = argparse.ArgumentParser(
        description='Create the Team Chat database schema'
    )
    parser.add_argument('--print-sql', action='store_true',
                        help='Print the DDL instead of executing it')
    parser.add_argument('--sweep', action='store_true',
                        help='Delete records whose workspace no longer exists')

    args = parser.parse_args()

    if args.print_sql:
        for statement in schema_statements():
            print(f"{statement};\n")
        return

    await bootstrap(sweep=args.sweep)


if __name__ == '__main__':
    asyncio.run(main())
