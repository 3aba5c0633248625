"""Storage capability used by the lifecycle manager.

The manager never talks to a database directly. It is handed a
RequestStore and relies only on the operations below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from mediadesk.models.domain import RequestEntity, RequestSet


class RequestStore(ABC):
    """Abstract base class for request storage.

    Implementations must raise StorageError for every persistence fault.
    """

    #: Whether transaction() rolls back all writes made inside it on failure.
    atomic: bool = True

    @abstractmethod
    def create(self, request_set: RequestSet, entity: RequestEntity) -> RequestEntity:
        """Insert a record into a set.

        Args:
            request_set: Target set.
            entity: Record to insert. When entity.id is None a fresh id is
                allocated; otherwise the given id is kept.

        Returns:
            The stored record, with its id.
        """

    @abstractmethod
    def get(self, request_set: RequestSet, request_id: int) -> RequestEntity | None:
        """Read one record, or None if the set does not hold it."""

    @abstractmethod
    def list(self, request_set: RequestSet) -> list[RequestEntity]:
        """Read a whole set.

        Open records come newest-created first, closed records
        newest-closed first. Ties break on id, highest first.
        """

    @abstractmethod
    def update_status(self, request_set: RequestSet, request_id: int, status: str) -> int:
        """Set the status label in place. Returns rows affected."""

    @abstractmethod
    def delete(self, request_set: RequestSet, request_id: int) -> int:
        """Remove a record. Returns rows affected."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Scope writes: commit on clean exit, roll back on exception."""
