"""Create the catalog schema and seed the reference tables.

Usage:
    python -m src.scripts.init_database           # create missing tables
    python -m src.scripts.init_database --drop    # drop, then recreate
    python -m src.scripts.init_database --seed    # also seed genres, countries, languages
    python -m src.scripts.init_database --check   # connection and table list only
"""

import argparse
import sys

from src.database.connection import Database, get_database
from src.database.repositories.catalog import seed_reference_data
from src.settings import settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the Reelfake catalog database")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--seed", action="store_true", help="seed reference data")
    parser.add_argument("--check", action="store_true", help="check connection and list tables only")
    return parser.parse_args(argv)


def seed(db: Database) -> dict[str, int]:
    """Insert missing reference rows.

    Returns:
        Inserted row count per table.
    """
    with db.session() as session:
        inserted = seed_reference_data(session)
    for table, count in inserted.items():
        print(f"✅ {table}: {count} rows seeded")
    return inserted


def print_tables(db: Database) -> None:
    tables = db.table_names()
    print(f"\n📊 {len(tables)} tables:")
    for table in tables:
        print(f"   • {table}")


def initialize(db: Database, drop: bool = False, with_seed: bool = False) -> None:
    """Create the schema, optionally dropping it first and seeding it after."""
    if drop:
        print("🗑️  Dropping tables...")
        db.drop_tables()
    print("📋 Creating tables...")
    db.create_tables()
    if with_seed:
        seed(db)


def main(argv: list[str] | None = None) -> int:
    """Run the script.

    Returns:
        Exit code, 1 when the database is unreachable.
    """
    args = parse_args(argv)
    target = "SQLite" if settings.database.is_sqlite else f"{settings.database.host}:{settings.database.port}"
    print(f"🎬 Reelfake database initialization ({target})")

    db = get_database()
    if not db.is_reachable():
        print("❌ Cannot connect to database")
        return 1

    if not args.check:
        initialize(db, drop=args.drop, with_seed=args.seed)
    print_tables(db)
    return 0


if __name__ == "__main__":
    sys.exit(main())
