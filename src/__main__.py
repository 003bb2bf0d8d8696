"""Entry point of the src module. Allows python -m src."""

import argparse
import shutil
import sys
from pathlib import Path
from uuid import uuid4


def run_api() -> None:
    """Start the FastAPI application."""
    import uvicorn

    from src.settings import settings

    print("🌐 Starting FastAPI...")
    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )


def _stage(csv_path: Path) -> Path:
    """Copy a CSV file into the uploads directory.

    The ingestion run deletes its file when done, so the user's file
    is never handed to it directly.
    """
    from src.settings import settings

    directory = settings.upload.directory
    directory.mkdir(parents=True, exist_ok=True)
    staged = directory / f"{uuid4().hex}.csv"
    shutil.copyfile(csv_path, staged)
    return staged


def run_import(csv_path: Path, stop_on_error: bool) -> int:
    """Import a CSV file into the catalog."""
    from src.database.connection import get_database
    from src.etl.pipeline import AtomicUploadAborted, IngestionRun

    with get_database().session() as session:
        run = IngestionRun(_stage(csv_path), session)
        try:
            summary = run.process_atomic() if stop_on_error else run.process()
        except AtomicUploadAborted as e:
            for error in e.errors:
                print(f"❌ Row {error.row_number}: {error.message}")
            print("⚠️  Upload rolled back")
            return 1

    for row in summary.failed_rows:
        print(f"❌ Row {row.row_number}: {'; '.join(row.reasons)}")
    print(f"✅ {len(summary.success_rows)}/{summary.total_rows} movies imported")
    return 0


def run_validate(csv_path: Path) -> int:
    """Validate a CSV file without importing it."""
    from src.database.connection import get_database
    from src.etl.pipeline import IngestionRun

    with get_database().session() as session:
        summary = IngestionRun(_stage(csv_path), session).validate_only()

    for row in summary.invalid_rows:
        print(f"❌ Row {row.row_number}: {'; '.join(row.reasons)}")
    print(f"✅ {summary.valid_rows_count}/{summary.total_rows} rows valid")
    return 0 if summary.invalid_rows_count == 0 else 1


def main() -> None:
    """Main CLI."""
    parser = argparse.ArgumentParser(
        description="Reelfake - movie rental catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src api                              # FastAPI
  python -m src import movies.csv                # Buffered import
  python -m src import movies.csv --stop-on-error
  python -m src validate movies.csv              # Dry run
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("api", help="FastAPI")

    import_parser = subparsers.add_parser("import", help="Import a CSV file")
    import_parser.add_argument("csv_path", type=Path)
    import_parser.add_argument("--stop-on-error", action="store_true")

    validate_parser = subparsers.add_parser("validate", help="Validate a CSV file")
    validate_parser.add_argument("csv_path", type=Path)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    from src.etl.extractors.csv import SourceError

    try:
        if args.command == "api":
            run_api()
        elif args.command == "import":
            sys.exit(run_import(args.csv_path, args.stop_on_error))
        elif args.command == "validate":
            sys.exit(run_validate(args.csv_path))

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted")
        sys.exit(130)
    except (SourceError, OSError) as e:
        print(f"\n❌ ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
