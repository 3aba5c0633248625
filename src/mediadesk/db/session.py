"""SQLite engine and session wiring.

Sessions for one database file all share a single engine, and that engine
holds one connection so the file can be used from FastAPI's threadpool.
Commits are not made here: SqlRequestStore.transaction() owns them.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mediadesk.core.config import Settings
from mediadesk.db.schema import Base

# Session factories keyed by resolved database file
_factories: dict[Path, sessionmaker] = {}


def _session_factory(settings: Settings) -> sessionmaker:
    db_file = Path(settings.db_path).resolve()
    factory = _factories.get(db_file)
    if factory is not None:
        return factory

    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = _factories[db_file] = sessionmaker(bind=engine)
    return factory


def get_engine(settings: Settings) -> Engine:
    """Engine for the configured database file (created on first use)."""
    return _session_factory(settings).kw["bind"]


def open_session(settings: Settings) -> Session:
    """Open a session on the configured database. Caller closes it."""
    return _session_factory(settings)()


@contextmanager
def session_scope(settings: Settings) -> Iterator[Session]:
    """Session that is closed on exit; uncommitted work is discarded.

    Example:
        with session_scope(settings) as session:
            manager = RequestLifecycleManager(SqlRequestStore(session))
    """
    session = open_session(settings)
    try:
        yield session
    finally:
        session.close()


def init_db(settings: Settings) -> None:
    """Create any missing request tables."""
    Base.metadata.create_all(get_engine(settings))
