"""Error taxonomy for request lifecycle operations.

- ValidationError: caller input missing or empty; never retried
- NotFoundError: id not present in the expected set
- StorageError: persistence fault; caller may retry
- ConsistencyWarning: a move inserted the copy but failed to remove the
  source, so the record now sits in both sets
"""

from __future__ import annotations


class MediaDeskError(Exception):
    """Base class for all service errors."""


class ValidationError(MediaDeskError):
    """Required input missing or empty."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class NotFoundError(MediaDeskError):
    """Referenced request does not exist in the expected set."""

    def __init__(self, request_set: str, request_id: int):
        super().__init__(f"No {request_set} request with id {request_id}")
        self.request_set = request_set
        self.request_id = request_id


class StorageError(MediaDeskError):
    """Underlying persistence fault."""


class ConsistencyWarning(StorageError):
    """Partial move: the record was copied but the source row survived."""

    def __init__(self, request_id: int, source: str, target: str):
        super().__init__(
            f"Request {request_id} was copied to {target} but could not be removed "
            f"from {source}; it now exists in both sets"
        )
        self.request_id = request_id
        self.source = source
        self.target = target
