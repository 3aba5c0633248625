"""Database schema for mediadesk.

Open and closed requests live in two tables with identical columns.
Ids come from request_ids, whose AUTOINCREMENT guarantees an id is never
handed out twice; both request tables reference it.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class RequestId(Base):
    """Id sequence shared by both request tables.

    Rows are only ever inserted, never deleted.
    """

    __tablename__ = "request_ids"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    allocated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )


class RequestColumns:
    """Columns shared by open and closed requests."""

    id: Mapped[int] = mapped_column(
        Integer, ForeignKey("request_ids.id"), primary_key=True, autoincrement=False
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    media: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    author: Mapped[str | None] = mapped_column(String(256), nullable=True)
    media_link: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


class OpenRequest(RequestColumns, Base):
    """Requests awaiting action."""

    __tablename__ = "requests"


class ClosedRequest(RequestColumns, Base):
    """Requests that have been fulfilled or rejected."""

    __tablename__ = "closed_requests"
