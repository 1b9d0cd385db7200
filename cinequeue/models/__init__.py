"""Models Initialization Module."""

from cinequeue.models.db import (
    Base,
    MediaType,
    Recommendation,
    User,
    WatchlistEntry,
    WatchStatus,
)

__all__ = [
    "Base",
    "MediaType",
    "Recommendation",
    "User",
    "WatchStatus",
    "WatchlistEntry",
]
