"""Service for storing the latest recommendation batch per user."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache

from pydantic import ConfigDict

from cinequeue import log
from cinequeue.config.database import db
from cinequeue.models.db.recommendation import Recommendation
from cinequeue.models.schemas.media import CamelModel, MediaItem

__all__ = [
    "RecommendationService",
    "StoredRecommendationModel",
    "get_recommendation_service",
]

GENRE_SOURCE = "genre"


class StoredRecommendationModel(CamelModel):
    """Serialized representation of a stored recommendation."""

    model_config = ConfigDict(from_attributes=True)

    external_id: str
    title: str
    media_type: str
    year: str | None = None
    poster: str | None = None
    rating: str | None = None
    score: float
    source: str | None = None
    generated_at: datetime


@dataclass
class RecommendationService:
    """Service encapsulating stored recommendation batches."""

    source: str = GENRE_SOURCE

    def replace(
        self, user_id: int, items: Sequence[MediaItem]
    ) -> list[StoredRecommendationModel]:
        """Replace the user's stored batch with ``items``.

        Items are scored by rank: the first gets 1.0, the second 0.5 and so on.
        """
        now = datetime.now(UTC)
        with db() as ctx:
            ctx.session.query(Recommendation).filter(
                Recommendation.user_id == user_id
            ).delete(synchronize_session=False)

            rows = [
                Recommendation(
                    user_id=user_id,
                    external_id=item.external_id,
                    title=item.title,
                    media_type=item.media_type,
                    year=item.year,
                    poster=item.poster_url,
                    rating=item.rating,
                    score=1 / (rank + 1),
                    source=self.source,
                    generated_at=now,
                )
                for rank, item in enumerate(items)
            ]
            ctx.session.add_all(rows)
            ctx.session.commit()

        log.debug(
            f"Stored $${{count: {len(rows)}}}$$ recommendations "
            f"$${{user_id: {user_id}}}$$"
        )
        return [StoredRecommendationModel.model_validate(row) for row in rows]

    def list_saved(self, user_id: int) -> list[StoredRecommendationModel]:
        """Return the user's stored batch, best score first."""
        with db() as ctx:
            rows = (
                ctx.session.query(Recommendation)
                .filter(Recommendation.user_id == user_id)
                .order_by(Recommendation.score.desc(), Recommendation.id)
                .all()
            )

        return [StoredRecommendationModel.model_validate(row) for row in rows]


@lru_cache(maxsize=1)
def get_recommendation_service() -> RecommendationService:
    """Get the singleton recommendation service instance.

    Returns:
        RecommendationService: The recommendation service instance.
    """
    return RecommendationService()
