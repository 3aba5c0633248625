"""Shared pytest fixtures for mediadesk tests."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mediadesk.db.schema import Base
from mediadesk.db.store import SqlRequestStore
from mediadesk.lifecycle.memory import InMemoryRequestStore
from mediadesk.models.domain import RequestInput


class FakeClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "sql"])
def store(request, session):
    """Each lifecycle test runs against both store implementations."""
    if request.param == "memory":
        return InMemoryRequestStore()
    return SqlRequestStore(session)


@pytest.fixture
def dune():
    return RequestInput(name="Alice", media="book", title="Dune", media_link="http://x")
