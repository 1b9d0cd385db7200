"""Database models."""

from cinequeue.models.db.base import Base
from cinequeue.models.db.recommendation import Recommendation
from cinequeue.models.db.user import User
from cinequeue.models.db.watchlist import MediaType, WatchlistEntry, WatchStatus

__all__ = [
    "Base",
    "MediaType",
    "Recommendation",
    "User",
    "WatchStatus",
    "WatchlistEntry",
]
