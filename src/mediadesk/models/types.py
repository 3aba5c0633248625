"""Pydantic models for the mediadesk API.

Field aliases keep the wire names existing clients already send and read
(``mediaLink``, ``created_at``, ``closed_at``).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mediadesk.models.domain import RequestEntity, RequestInput


class RequestSubmission(BaseModel):
    """Body of POST /api/requests.

    Every field is optional here; required-field checks belong to the
    lifecycle manager so that a missing field is a 400, not a 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    media: str | None = None
    title: str | None = None
    author: str | None = None
    media_link: str | None = Field(default=None, alias="mediaLink")
    image: str | None = None

    def to_input(self) -> RequestInput:
        """Convert to the domain input type."""
        return RequestInput(
            name=self.name,
            media=self.media,
            title=self.title,
            media_link=self.media_link,
            author=self.author,
            image=self.image,
        )


class RequestDetail(BaseModel):
    """A request as returned by the API, from either set."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    media: str
    title: str
    author: str | None = None
    media_link: str = Field(alias="mediaLink")
    image: str | None = None
    status: str | None = None
    created_at: datetime
    closed_at: datetime | None = None

    @classmethod
    def from_entity(cls, entity: RequestEntity) -> RequestDetail:
        return cls(
            id=entity.id,
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


class StatusBody(BaseModel):
    """Optional status carried by close and reopen calls."""

    status: str | None = None


class StatusUpdate(BaseModel):
    """Body of the move-to-closed and update-status calls."""

    id: int | None = None
    status: str | None = None


class MessageResponse(BaseModel):
    """Confirmation returned by state-changing calls."""

    message: str
