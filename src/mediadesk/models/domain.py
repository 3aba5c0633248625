"""Domain models for mediadesk.

Pure Python dataclasses, independent of SQLAlchemy and of the wire format.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

# ============================================================================
# Request Domain
# ============================================================================

RequestSet = Literal["open", "closed"]

OPEN: RequestSet = "open"
CLOSED: RequestSet = "closed"

# Status a record carries when none was ever set, and the one a reopen
# assigns when the caller gives none.
DEFAULT_STATUS = "Pending"


@dataclass
class RequestEntity:
    """Domain model for a media request.

    The same shape is used in both sets; membership is decided by which
    set holds the record, never by a field.
    """

    id: int | None
    name: str
    media: str
    title: str
    media_link: str
    created_at: datetime
    author: str | None = None
    image: str | None = None
    status: str | None = None
    closed_at: datetime | None = None

    @property
    def effective_status(self) -> str:
        """Status label with the implicit default applied."""
        return self.status or DEFAULT_STATUS


@dataclass
class RequestInput:
    """Caller-supplied fields for a new request, not yet validated."""

    name: str | None = None
    media: str | None = None
    title: str | None = None
    media_link: str | None = None
    author: str | None = None
    image: str | None = None
