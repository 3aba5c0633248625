"""Request lifecycle manager.

Owns the open and closed sets and the rules for moving records between them:

    submit -> [open] --close--> [closed] --reopen--> [open] ...
                                   |
                             delete_closed -> removed

Moves are copy-then-delete inside a single store transaction, so with an
atomic store a record is never in both sets and never in neither.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from mediadesk.core.errors import ConsistencyWarning, NotFoundError, StorageError, ValidationError
from mediadesk.lifecycle.store import RequestStore
from mediadesk.models.domain import (
    CLOSED,
    DEFAULT_STATUS,
    OPEN,
    RequestEntity,
    RequestInput,
    RequestSet,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "media", "title", "media_link")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: str | None) -> str | None:
    """Strip surrounding whitespace; empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class RequestLifecycleManager:
    """Create, list, transition and relabel media requests.

    Storage-agnostic: every read and write goes through the injected store.
    Updates and deletes on an unknown id are permissive no-ops that report
    False instead of raising.
    """

    def __init__(self, store: RequestStore, clock: Callable[[], datetime] = _utcnow):
        """Initialize manager.

        Args:
            store: Storage for both sets.
            clock: Source of created_at / closed_at timestamps.
        """
        self.store = store
        self.clock = clock

    # ------------------------------------------------------------------
    # Creation and listing
    # ------------------------------------------------------------------

    def submit(self, request_input: RequestInput) -> RequestEntity:
        """Create a new open request.

        Args:
            request_input: Caller fields; name, media, title and media_link
                are required.

        Returns:
            The stored record with its assigned id.

        Raises:
            ValidationError: If a required field is missing or blank.
            StorageError: If the insert fails.
        """
        fields = {
            "name": _clean(request_input.name),
            "media": _clean(request_input.media),
            "title": _clean(request_input.title),
            "media_link": _clean(request_input.media_link),
            "author": _clean(request_input.author),
            "image": _clean(request_input.image),
        }
        missing = [f for f in REQUIRED_FIELDS if fields[f] is None]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing)

        entity = RequestEntity(id=None, created_at=self.clock(), **fields)
        with self.store.transaction():
            created = self.store.create(OPEN, entity)

        logger.info("Request %s submitted: %s (%s)", created.id, created.title, created.media)
        return created

    def list_open(self) -> list[RequestEntity]:
        """All open requests, most recently created first."""
        return self.store.list(OPEN)

    def list_closed(self) -> list[RequestEntity]:
        """All closed requests, most recently closed first."""
        return self.store.list(CLOSED)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def close(self, request_id: int, status: str | None = None) -> RequestEntity:
        """Move an open request to the closed set.

        Args:
            request_id: Id of the open request.
            status: New status label; the current one is kept when omitted.

        Returns:
            The record as stored in the closed set.

        Raises:
            NotFoundError: If no open request has this id.
            StorageError: If the move fails; nothing changed.
            ConsistencyWarning: If the store is not atomic and the copy
                landed but the open row could not be removed.
        """
        record = self.store.get(OPEN, request_id)
        if record is None:
            raise NotFoundError(OPEN, request_id)

        moved = replace(
            record,
            closed_at=self.clock(),
            status=_clean(status) or record.status,
        )
        closed = self._move(moved, source=OPEN, target=CLOSED)
        logger.info("Request %s closed with status %s", request_id, closed.effective_status)
        return closed

    def reopen(self, request_id: int, status: str | None = None) -> RequestEntity:
        """Move a closed request back to the open set.

        Args:
            request_id: Id of the closed request.
            status: Status to reopen with; defaults to "Pending".

        Returns:
            The record as stored in the open set, same id and created_at.

        Raises:
            NotFoundError: If no closed request has this id.
            StorageError: If the move fails; nothing changed.
            ConsistencyWarning: If the store is not atomic and the copy
                landed but the closed row could not be removed.
        """
        record = self.store.get(CLOSED, request_id)
        if record is None:
            raise NotFoundError(CLOSED, request_id)

        moved = replace(record, closed_at=None, status=_clean(status) or DEFAULT_STATUS)
        reopened = self._move(moved, source=CLOSED, target=OPEN)
        logger.info("Request %s reopened with status %s", request_id, reopened.status)
        return reopened

    def _move(self, entity: RequestEntity, source: RequestSet, target: RequestSet) -> RequestEntity:
        # Insert before delete: a failure between the two must never lose the record.
        with self.store.transaction():
            created = self.store.create(target, entity)
            try:
                self.store.delete(source, entity.id)
            except StorageError as exc:
                if self.store.atomic:
                    raise
                logger.error(
                    "Request %s duplicated in %s and %s: delete failed after insert",
                    entity.id,
                    source,
                    target,
                )
                raise ConsistencyWarning(entity.id, source, target) from exc
        return created

    # ------------------------------------------------------------------
    # In-place changes
    # ------------------------------------------------------------------

    def update_status(self, request_id: int | None, status: str | None) -> bool:
        """Relabel an open request without moving it.

        Returns:
            True if a record was updated, False if the id is unknown.

        Raises:
            ValidationError: If id or status is missing.
        """
        return self._relabel(OPEN, request_id, status)

    def update_closed_status(self, request_id: int | None, status: str | None) -> bool:
        """Relabel a closed request without moving it."""
        return self._relabel(CLOSED, request_id, status)

    def _relabel(self, request_set: RequestSet, request_id: int | None, status: str | None) -> bool:
        status = _clean(status)
        if request_id is None or status is None:
            raise ValidationError("Missing request ID or status.")

        with self.store.transaction():
            updated = self.store.update_status(request_set, request_id, status)

        if updated:
            logger.info("Request %s (%s) status set to %s", request_id, request_set, status)
        else:
            logger.info("Status update for unknown %s request %s ignored", request_set, request_id)
        return bool(updated)

    def delete_closed(self, request_id: int) -> bool:
        """Permanently remove a closed request.

        Idempotent: deleting an unknown id succeeds and returns False.
        """
        with self.store.transaction():
            deleted = self.store.delete(CLOSED, request_id)

        if deleted:
            logger.info("Closed request %s deleted", request_id)
        else:
            logger.info("Delete of unknown closed request %s ignored", request_id)
        return bool(deleted)
