"""Repository functions for request tables.

Encapsulates all SQLAlchemy queries and returns domain entities
(not SQLAlchemy rows) to callers. Nothing here commits; transaction
boundaries belong to SqlRequestStore.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from mediadesk.db.schema import ClosedRequest, OpenRequest, RequestColumns, RequestId
from mediadesk.models.domain import CLOSED, OPEN, RequestEntity, RequestSet

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

_TABLES: dict[str, type[OpenRequest] | type[ClosedRequest]] = {
    OPEN: OpenRequest,
    CLOSED: ClosedRequest,
}


# SQLite INTEGER is a signed 64-bit value; larger ids cannot be stored.
MAX_REQUEST_ID = 2**63 - 1


def _storable(request_id: int) -> bool:
    return 0 <= request_id <= MAX_REQUEST_ID


def table_for(request_set: RequestSet) -> type[OpenRequest] | type[ClosedRequest]:
    """Map a request set to its table model."""
    try:
        return _TABLES[request_set]
    except KeyError:
        raise ValueError(f"Unknown request set: {request_set}") from None


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _row_to_entity(row: RequestColumns) -> RequestEntity:
    """Convert a request row from either table to a domain entity."""
    return RequestEntity(
        id=row.id,
        name=row.name,
        media=row.media,
        title=row.title,
        author=row.author,
        media_link=row.media_link,
        image=row.image,
        status=row.status,
        created_at=_as_utc(row.created_at),
        closed_at=_as_utc(row.closed_at),
    )


# ============================================================================
# Request Repository
# ============================================================================


def allocate_request_id(session: DbSession) -> int:
    """Reserve a fresh id from the shared sequence."""
    marker = RequestId()
    session.add(marker)
    session.flush()
    return marker.id


def reserve_request_id(session: DbSession, request_id: int) -> None:
    """Record an explicitly chosen id so the sequence never allocates it."""
    if session.get(RequestId, request_id) is None:
        session.add(RequestId(id=request_id))
        session.flush()


def create_request(
    session: DbSession, request_set: RequestSet, entity: RequestEntity
) -> RequestEntity:
    """Insert a request, allocating an id when the entity has none."""
    model = table_for(request_set)
    if entity.id is None:
        request_id = allocate_request_id(session)
    else:
        request_id = entity.id
        reserve_request_id(session, request_id)

    row = model(
        id=request_id,
        name=entity.name,
        media=entity.media,
        title=entity.title,
        author=entity.author,
        media_link=entity.media_link,
        image=entity.image,
        status=entity.status,
        created_at=entity.created_at,
        closed_at=entity.closed_at,
    )
    session.add(row)
    session.flush()
    return _row_to_entity(row)


def get_request(
    session: DbSession, request_set: RequestSet, request_id: int
) -> RequestEntity | None:
    """Get request by ID from one set."""
    if not _storable(request_id):
        return None
    row = session.get(table_for(request_set), request_id)
    return _row_to_entity(row) if row else None


def list_requests(session: DbSession, request_set: RequestSet) -> list[RequestEntity]:
    """Get all requests in a set, newest first by the set's timestamp."""
    model = table_for(request_set)
    order_column = model.closed_at if request_set == CLOSED else model.created_at
    rows = session.scalars(select(model).order_by(order_column.desc(), model.id.desc())).all()
    return [_row_to_entity(r) for r in rows]


def update_request_status(
    session: DbSession, request_set: RequestSet, request_id: int, status: str
) -> int:
    """Set status on one request. Returns rows affected."""
    if not _storable(request_id):
        return 0
    row = session.get(table_for(request_set), request_id)
    if row is None:
        return 0
    row.status = status
    session.flush()
    return 1


def delete_request(session: DbSession, request_set: RequestSet, request_id: int) -> int:
    """Delete one request. Returns rows affected."""
    if not _storable(request_id):
        return 0
    row = session.get(table_for(request_set), request_id)
    if row is None:
        return 0
    session.delete(row)
    session.flush()
    return 1


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()


def rollback(session: DbSession) -> None:
    """Roll back current transaction."""
    session.rollback()
