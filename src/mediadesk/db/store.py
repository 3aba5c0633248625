"""SQLAlchemy-backed RequestStore.

Wraps a Session and the repo functions. Every SQLAlchemy failure is
re-raised as StorageError so callers never see driver exceptions.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from mediadesk.core.errors import StorageError
from mediadesk.db import repo
from mediadesk.db.repo import DbSession
from mediadesk.lifecycle.store import RequestStore
from mediadesk.models.domain import RequestEntity, RequestSet


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc


class SqlRequestStore(RequestStore):
    """RequestStore over a SQLAlchemy session.

    transaction() commits on success and rolls back on any exception, so
    a move's insert and delete land together or not at all.
    """

    atomic = True

    def __init__(self, session: DbSession):
        self.session = session

    def create(self, request_set: RequestSet, entity: RequestEntity) -> RequestEntity:
        with _storage_errors(f"add {request_set} request"):
            return repo.create_request(self.session, request_set, entity)

    def get(self, request_set: RequestSet, request_id: int) -> RequestEntity | None:
        with _storage_errors(f"read {request_set} request"):
            return repo.get_request(self.session, request_set, request_id)

    def list(self, request_set: RequestSet) -> list[RequestEntity]:
        with _storage_errors(f"retrieve {request_set} requests"):
            return repo.list_requests(self.session, request_set)

    def update_status(self, request_set: RequestSet, request_id: int, status: str) -> int:
        with _storage_errors(f"update {request_set} request status"):
            return repo.update_request_status(self.session, request_set, request_id, status)

    def delete(self, request_set: RequestSet, request_id: int) -> int:
        with _storage_errors(f"delete {request_set} request"):
            return repo.delete_request(self.session, request_set, request_id)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            with _storage_errors("commit"):
                repo.commit(self.session)
        except Exception:
            repo.rollback(self.session)
            raise
