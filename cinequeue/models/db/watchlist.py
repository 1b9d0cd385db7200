"""Watchlist entry model."""

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinequeue.models.db.base import Base

__all__ = ["MediaType", "WatchStatus", "WatchlistEntry"]


class MediaType(StrEnum):
    """Kinds of titles that can be saved to a watchlist."""

    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"


class WatchStatus(StrEnum):
    """Progress of a user through a saved title."""

    PENDING = "pending"
    WATCHING = "watching"
    COMPLETED = "completed"


class WatchlistEntry(Base):
    """A title saved by a user, unique per (owner, external id)."""

    __tablename__ = "watchlist_entry"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_user_id: Mapped[int] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), index=True
    )
    external_id: Mapped[str] = mapped_column(String, index=True)
    title: Mapped[str] = mapped_column(String)
    media_type: Mapped[MediaType] = mapped_column(
        Enum(
            MediaType,
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        )
    )
    status: Mapped[WatchStatus] = mapped_column(
        Enum(
            WatchStatus,
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=WatchStatus.PENDING,
        index=True,
    )
    poster: Mapped[str | None] = mapped_column(String, nullable=True)
    year: Mapped[str | None] = mapped_column(String, nullable=True)
    rating: Mapped[str | None] = mapped_column(String, nullable=True)
    genres: Mapped[list[str]] = mapped_column(JSON, default=list)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )

    owner: Mapped["User"] = relationship(back_populates="watchlist")  # noqa: F821

    __table_args__ = (
        Index(
            "ix_watchlist_entry_owner_external",
            "owner_user_id",
            "external_id",
            unique=True,
        ),
    )
