#!/usr/bin/env python3
"""Seed a database with sample media requests.

Usage:
    python scripts/seed_requests.py [db_path]

This script:
1. Initializes the database schema
2. Submits a handful of open requests
3. Closes some of them with a status
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from mediadesk.core.config import Settings  # noqa: E402
from mediadesk.db.session import init_db, session_scope  # noqa: E402
from mediadesk.db.store import SqlRequestStore  # noqa: E402
from mediadesk.lifecycle.manager import RequestLifecycleManager  # noqa: E402
from mediadesk.models.domain import RequestInput  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"

DEMO_REQUESTS = [
    RequestInput(
        name="Alice",
        media="book",
        title="Dune",
        author="Frank Herbert",
        media_link="https://openlibrary.org/works/OL893415W",
    ),
    RequestInput(
        name="Bob",
        media="movie",
        title="Arrival",
        author="Denis Villeneuve",
        media_link="https://www.imdb.com/title/tt2543164/",
    ),
    RequestInput(
        name="Carol",
        media="album",
        title="Kind of Blue",
        author="Miles Davis",
        media_link="https://musicbrainz.org/release-group/8e8a594f-2175-3b4c-9a3b-4d5b3a9e9f1b",
    ),
    RequestInput(
        name="Dan",
        media="game",
        title="Outer Wilds",
        media_link="https://store.steampowered.com/app/753640/",
    ),
]

# Titles to close after seeding, with the status to close them under
DEMO_CLOSURES = {"Arrival": "Approved", "Outer Wilds": "Declined"}


def seed(db_path: Path) -> None:
    """Seed requests into the database at db_path."""
    settings = Settings(db_path=db_path)
    init_db(settings)

    with session_scope(settings) as session:
        manager = RequestLifecycleManager(SqlRequestStore(session))

        for request_input in DEMO_REQUESTS:
            created = manager.submit(request_input)
            print(f"Submitted #{created.id}: {created.title} ({created.media})")

            status = DEMO_CLOSURES.get(created.title)
            if status:
                manager.close(created.id, status)
                print(f"    Closed #{created.id} as {status}")

        print(f"Open: {len(manager.list_open())}  Closed: {len(manager.list_closed())}")


def main() -> int:
    db_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEMO_DB_PATH
    print(f"Seeding {db_path}")
    seed(db_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
