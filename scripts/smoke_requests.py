#!/usr/bin/env python3
"""Smoke test for a request database.

Validates the persisted-state invariants of the open and closed sets.

Usage:
    python scripts/smoke_requests.py [db_path]

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from mediadesk.db.schema import ClosedRequest, OpenRequest  # noqa: E402
from mediadesk.core.config import Settings  # noqa: E402
from mediadesk.db.session import open_session  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"

REQUIRED_COLUMNS = ("name", "media", "title", "media_link")


def check_database_exists(db_path: Path) -> bool:
    """Check that the database file exists."""
    if not db_path.exists():
        print(f"FAIL: Database not found: {db_path}")
        return False
    print(f"OK: Database exists: {db_path}")
    return True


def check_no_duplicates(session) -> bool:
    """Check that no id is held by both sets."""
    open_ids = {row.id for row in session.query(OpenRequest.id)}
    closed_ids = {row.id for row in session.query(ClosedRequest.id)}
    duplicated = open_ids & closed_ids

    if duplicated:
        print(f"FAIL: Ids in both sets: {sorted(duplicated)}")
        return False

    print(f"OK: {len(open_ids)} open, {len(closed_ids)} closed, no overlap")
    return True


def check_required_fields(session) -> bool:
    """Check that required fields are non-empty in both sets."""
    all_ok = True
    for model in (OpenRequest, ClosedRequest):
        for row in session.query(model).all():
            empty = [c for c in REQUIRED_COLUMNS if not (getattr(row, c) or "").strip()]
            if empty:
                print(f"    FAIL: {model.__tablename__} #{row.id} empty: {', '.join(empty)}")
                all_ok = False

    if all_ok:
        print("OK: Required fields present")
    return all_ok


def check_closed_at(session) -> bool:
    """Check closed_at is set exactly on closed rows."""
    open_with = session.query(OpenRequest).filter(OpenRequest.closed_at.isnot(None)).count()
    closed_without = session.query(ClosedRequest).filter(ClosedRequest.closed_at.is_(None)).count()

    if open_with or closed_without:
        print(f"FAIL: {open_with} open rows with closed_at, {closed_without} closed rows without")
        return False

    print("OK: closed_at consistent")
    return True


def main() -> int:
    """Run all smoke checks."""
    db_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEMO_DB_PATH

    print("=" * 60)
    print("Request database smoke test")
    print("=" * 60)

    if not check_database_exists(db_path):
        return 1

    session = open_session(Settings(db_path=db_path))
    try:
        results = [
            check_no_duplicates(session),
            check_required_fields(session),
            check_closed_at(session),
        ]
    finally:
        session.close()

    print("=" * 60)
    if all(results):
        print("All checks passed")
        return 0
    print("Some checks failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
