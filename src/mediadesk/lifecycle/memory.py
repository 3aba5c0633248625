"""In-memory request store for tests and local experiments.

Keeps both sets in dictionaries. Transactions snapshot the state on entry
and restore it if the block raises. Passing atomic=False turns transactions
into no-ops, reproducing a store that commits every statement on its own.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from mediadesk.core.errors import StorageError
from mediadesk.lifecycle.store import RequestStore
from mediadesk.models.domain import CLOSED, OPEN, RequestEntity, RequestSet


class InMemoryRequestStore(RequestStore):
    """Dictionary-backed RequestStore.

    Ids come from a counter that only moves forward, so an id is never
    reused even after its record is deleted.
    """

    def __init__(self, atomic: bool = True):
        self.atomic = atomic
        self._sets: dict[str, dict[int, RequestEntity]] = {OPEN: {}, CLOSED: {}}
        self._last_id = 0

    def _rows(self, request_set: RequestSet) -> dict[int, RequestEntity]:
        try:
            return self._sets[request_set]
        except KeyError:
            raise StorageError(f"Unknown request set: {request_set}") from None

    def create(self, request_set: RequestSet, entity: RequestEntity) -> RequestEntity:
        rows = self._rows(request_set)
        if entity.id is None:
            self._last_id += 1
            entity = replace(entity, id=self._last_id)
        elif entity.id in rows:
            raise StorageError(f"Duplicate id {entity.id} in {request_set} set")
        else:
            self._last_id = max(self._last_id, entity.id)

        rows[entity.id] = replace(entity)
        return replace(entity)

    def get(self, request_set: RequestSet, request_id: int) -> RequestEntity | None:
        row = self._rows(request_set).get(request_id)
        return replace(row) if row else None

    def list(self, request_set: RequestSet) -> list[RequestEntity]:
        rows = self._rows(request_set).values()
        if request_set == CLOSED:
            ordered = sorted(rows, key=lambda r: (r.closed_at, r.id), reverse=True)
        else:
            ordered = sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)
        return [replace(r) for r in ordered]

    def update_status(self, request_set: RequestSet, request_id: int, status: str) -> int:
        rows = self._rows(request_set)
        if request_id not in rows:
            return 0
        rows[request_id] = replace(rows[request_id], status=status)
        return 1

    def delete(self, request_set: RequestSet, request_id: int) -> int:
        return 1 if self._rows(request_set).pop(request_id, None) else 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if not self.atomic:
            yield
            return

        snapshot = (copy.deepcopy(self._sets), self._last_id)
        try:
            yield
        except Exception:
            self._sets, self._last_id = snapshot
            raise
