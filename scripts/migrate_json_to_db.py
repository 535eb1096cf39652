#!/usr/bin/env python3
"""
Migrate learned forms from a JSON export to the SQLite database.

Usage:
    python scripts/migrate_json_to_db.py --json data/formmatch-export.json --db data/formmatch.db
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from formmatch.database import init_database, get_session
from formmatch.schema import validate_store
from formmatch.app import import_document
from formmatch.storage import load_store, stored_forms_from_export
from storage.repositories.forms import FormRepository


def migrate(json_path: Path, db_path: Path, dry_run: bool = False) -> bool:
    """
    Migrate forms from a JSON export to the database.

    Args:
        json_path: Path to JSON export file
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
    """
    print(f"Loading forms from {json_path}...")
    try:
        document = load_store(json_path, strict=True)
    except ValueError as e:
        print(f"Failed to read export: {e}")
        return False
    if not isinstance(document, dict):
        print(f"Not a form export: {json_path}")
        return False

    errors = validate_store(document)
    for e in errors:
        print(f"[invalid] {e}")

    forms, skipped = stored_forms_from_export(document)
    form_count = sum(len(by_id) for by_id in forms.values())
    print(f"Found {form_count} forms across {len(forms)} origins ({skipped} invalid records)")

    if dry_run:
        print("\n[DRY RUN] Would migrate the following forms:")
        shown = 0
        for origin, by_id in forms.items():
            for form_id, fields in by_id.items():
                shown += 1
                if shown <= 5:
                    print(f"  {shown}. {origin}/{form_id}: {len(fields)} fields")
        if form_count > 5:
            print(f"  ... and {form_count - 5} more")
        return True

    print(f"\nInitializing database at {db_path}...")
    init_database(db_path)
    session = get_session(db_path)
    repo = FormRepository(session)

    try:
        outcome = import_document(repo, document)
    except SQLAlchemyError as e:
        print(f"Failed to migrate: {e}")
        return False
    finally:
        session.close()

    print("\nMigration complete!")
    print(f"   Migrated: {outcome['forms']}")
    print(f"   Skipped records: {skipped}")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description="Migrate learned forms from a JSON export to the database")
    parser.add_argument("--json", type=Path, default=Path("data/formmatch-export.json"),
                        help="Path to JSON export file")
    parser.add_argument("--db", type=Path, default=Path("data/formmatch.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be migrated without writing")

    args = parser.parse_args(argv)

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    if not migrate(args.json, args.db, dry_run=args.dry_run):
        sys.exit(1)


if __name__ == "__main__":
    main()
