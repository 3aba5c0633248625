"""Tests for database schema.

Invariants:
1. Open and closed tables share one column set
2. Ids come from a sequence that never reuses a value
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from mediadesk.db import repo
from mediadesk.db.schema import Base, ClosedRequest, OpenRequest, RequestId


class TestSchemaCreation:
    """Test that schema can be created without errors."""

    def test_all_tables_created(self, engine):
        """All required tables should exist after creation."""
        assert {"request_ids", "requests", "closed_requests"}.issubset(
            Base.metadata.tables.keys()
        )

    def test_open_and_closed_share_columns(self):
        """Both sets store the same fields, image included."""
        open_columns = set(OpenRequest.__table__.columns.keys())
        closed_columns = set(ClosedRequest.__table__.columns.keys())

        assert open_columns == closed_columns
        assert {"image", "created_at", "closed_at", "status"}.issubset(open_columns)


class TestRequiredColumns:
    """Required fields are NOT NULL at the database level."""

    def test_missing_title_rejected(self, session):
        """Row without title should fail to insert."""
        request_id = repo.allocate_request_id(session)
        session.add(
            OpenRequest(
                id=request_id,
                name="Alice",
                media="book",
                media_link="http://x",
                created_at=datetime.now(timezone.utc),
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()


class TestIdSequence:
    """Invariant: an allocated id is never handed out again."""

    def test_ids_increase(self, session):
        """Consecutive allocations are strictly increasing."""
        first = repo.allocate_request_id(session)
        second = repo.allocate_request_id(session)
        assert second > first

    def test_ids_not_reused_after_delete(self, session):
        """Deleting the highest id does not free it for reuse."""
        first = repo.allocate_request_id(session)
        session.commit()
        session.query(RequestId).filter(RequestId.id == first).delete()
        session.commit()

        assert repo.allocate_request_id(session) > first
