"""Service for managing a user's watchlist."""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cinequeue import log
from cinequeue.config.database import db
from cinequeue.exceptions import (
    DuplicateWatchlistEntryError,
    ValidationError,
    WatchlistEntryNotFoundError,
)
from cinequeue.models.db.watchlist import MediaType, WatchlistEntry, WatchStatus
from cinequeue.models.schemas.media import CamelModel

__all__ = [
    "AddWatchlistEntryRequest",
    "UpdateStatusRequest",
    "WatchlistEntryModel",
    "WatchlistService",
    "get_watchlist_service",
]


class WatchlistEntryModel(CamelModel):
    """Serialized representation of a watchlist row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    title: str
    media_type: MediaType
    owner_user_id: int
    status: WatchStatus
    poster: str | None = None
    year: str | None = None
    rating: str | None = None
    genres: list[str] = Field(default_factory=list)
    added_at: datetime


class AddWatchlistEntryRequest(CamelModel):
    """Item detail posted to add a title to the watchlist.

    Accepts the field names produced by search results and detail lookups as
    well as the older ``id``/``type``/``imdbRating`` spellings.
    """

    external_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("externalId", "external_id", "id", "api_id"),
    )
    title: str | None = None
    media_type: str | None = Field(
        default=None, validation_alias=AliasChoices("type", "mediaType", "media_type")
    )
    poster: str | None = Field(
        default=None, validation_alias=AliasChoices("poster", "posterUrl", "poster_url")
    )
    year: str | None = None
    rating: str | None = Field(
        default=None, validation_alias=AliasChoices("rating", "imdbRating")
    )
    genres: list[str] = Field(default_factory=list)

    @field_validator("external_id", "title", "year", "rating", "poster", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int | float):
            return str(value)
        return value

    @field_validator("genres", mode="before")
    @classmethod
    def _split_genres(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [genre.strip() for genre in value.split(",") if genre.strip()]
        return value


class UpdateStatusRequest(CamelModel):
    """Body of a status change request."""

    status: str | None = None


@dataclass
class WatchlistService:
    """Service encapsulating watchlist CRUD operations.

    Every operation is scoped to the owning user; entries belonging to other
    users behave as if they did not exist.
    """

    def list_entries(
        self, user_id: int, status: WatchStatus | None = None
    ) -> list[WatchlistEntryModel]:
        """Return a user's entries, most recently added first."""
        with db() as ctx:
            query = ctx.session.query(WatchlistEntry).filter(
                WatchlistEntry.owner_user_id == user_id
            )
            if status is not None:
                query = query.filter(WatchlistEntry.status == status)
            rows = query.order_by(
                WatchlistEntry.added_at.desc(), WatchlistEntry.id.desc()
            ).all()

        return [WatchlistEntryModel.model_validate(row) for row in rows]

    def add_entry(
        self, user_id: int, request: AddWatchlistEntryRequest
    ) -> WatchlistEntryModel:
        """Add a title to the watchlist with status ``pending``.

        Raises:
            ValidationError: If the id, title or type is missing or invalid.
            DuplicateWatchlistEntryError: If the title is already on the list.
        """
        external_id = (request.external_id or "").strip()
        title = (request.title or "").strip()
        if not external_id or not title or not request.media_type:
            raise ValidationError("External id, title and type are required")
        media_type = self._parse_media_type(request.media_type)

        with db() as ctx:
            entry = WatchlistEntry(
                owner_user_id=user_id,
                external_id=external_id,
                title=title,
                media_type=media_type,
                status=WatchStatus.PENDING,
                poster=request.poster,
                year=request.year,
                rating=request.rating,
                genres=list(request.genres),
            )
            ctx.session.add(entry)
            try:
                ctx.session.commit()
            except IntegrityError as e:
                raise DuplicateWatchlistEntryError(
                    "Item already in watchlist"
                ) from e
            ctx.session.refresh(entry)

        log.info(
            f"Added $$'{entry.title}'$$ to watchlist "
            f"$${{user_id: {user_id}, external_id: {entry.external_id}}}$$"
        )
        return WatchlistEntryModel.model_validate(entry)

    def update_status(
        self, user_id: int, entry_id: str, status: str | None
    ) -> WatchlistEntryModel:
        """Change the status of one of the user's entries.

        Raises:
            ValidationError: If ``status`` is not pending, watching or completed.
            WatchlistEntryNotFoundError: If the user has no such entry.
        """
        new_status = self._parse_status(status)

        with db() as ctx:
            entry = self._find(ctx.session, user_id, entry_id)
            entry.status = new_status
            ctx.session.commit()
            ctx.session.refresh(entry)

        log.debug(
            f"Watchlist entry $$'{entry.title}'$$ is now $$'{new_status}'$$ "
            f"$${{user_id: {user_id}}}$$"
        )
        return WatchlistEntryModel.model_validate(entry)

    def remove_entry(self, user_id: int, entry_id: str) -> None:
        """Delete one of the user's entries.

        Raises:
            WatchlistEntryNotFoundError: If the user has no such entry.
        """
        with db() as ctx:
            entry = self._find(ctx.session, user_id, entry_id)
            ctx.session.delete(entry)
            ctx.session.commit()

        log.info(
            f"Removed $$'{entry.title}'$$ from watchlist $${{user_id: {user_id}}}$$"
        )

    @staticmethod
    def _find(session: Session, user_id: int, entry_id: str) -> WatchlistEntry:
        """Resolve ``entry_id`` as a row id, falling back to the external id."""
        owned = session.query(WatchlistEntry).filter(
            WatchlistEntry.owner_user_id == user_id
        )
        entry = None
        if entry_id.isdigit():
            entry = owned.filter(WatchlistEntry.id == int(entry_id)).first()
        if entry is None:
            entry = owned.filter(WatchlistEntry.external_id == entry_id).first()
        if entry is None:
            raise WatchlistEntryNotFoundError("Watchlist item not found")
        return entry

    @staticmethod
    def _parse_status(value: str | None) -> WatchStatus:
        try:
            return WatchStatus((value or "").strip().lower())
        except ValueError as e:
            allowed = ", ".join(s.value for s in WatchStatus)
            raise ValidationError(
                f"Invalid status '{value}'. Must be one of: {allowed}"
            ) from e

    @staticmethod
    def _parse_media_type(value: str) -> MediaType:
        try:
            return MediaType(value.strip().lower())
        except ValueError as e:
            allowed = ", ".join(t.value for t in MediaType)
            raise ValidationError(
                f"Invalid type '{value}'. Must be one of: {allowed}"
            ) from e


@lru_cache(maxsize=1)
def get_watchlist_service() -> WatchlistService:
    """Get the singleton watchlist service instance.

    Returns:
        WatchlistService: The watchlist service instance.
    """
    return WatchlistService()
