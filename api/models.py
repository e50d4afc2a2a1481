"""SQLAlchemy models for event compilations."""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from core.database import Base

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 50

# Range of the Integer id columns (32-bit on PostgreSQL)
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


compilation_events = Table(
    "compilation_events",
    Base.metadata,
    Column(
        "compilation_id",
        Integer,
        ForeignKey("compilations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "event_id",
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(TimestampMixin, Base):
    """Platform user. Referenced here only as an event initiator."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)


class Event(Base):
    """Event published on the platform.

    Owned by the events side of the service; compilations only read events
    and attach them.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    annotation: Mapped[str] = mapped_column(String(2000), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    participant_limit: Mapped[int] = mapped_column(Integer, default=0)
    request_moderation: Mapped[bool] = mapped_column(Boolean, default=True)
    confirmed_requests: Mapped[int] = mapped_column(Integer, default=0)
    views: Mapped[int] = mapped_column(Integer, default=0)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    published_on: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    initiator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # One-directional: merging a rebuilt Event must not touch the user's
    # other events.
    initiator: Mapped["User"] = relationship(lazy="selectin")


class Compilation(Base):
    """A named, optionally pinned, curated set of events."""

    __tablename__ = "compilations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    events: Mapped[set["Event"]] = relationship(
        secondary=compilation_events,
        collection_class=set,
        lazy="selectin",
    )
