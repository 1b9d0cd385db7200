"""API routes for genre-based recommendations."""

from typing import Annotated

from fastapi.param_functions import Depends
from fastapi.routing import APIRouter
from pydantic import BaseModel

from cinequeue.core.recommendations import RecommendationGenerator
from cinequeue.models.schemas.media import MediaItem
from cinequeue.web.dependencies import (
    CurrentUser,
    get_recommendation_generator,
    persist_recommendations,
)
from cinequeue.web.services.recommendation_service import (
    StoredRecommendationModel,
    get_recommendation_service,
)
from cinequeue.web.services.watchlist_service import get_watchlist_service

__all__ = ["router"]

router = APIRouter()


class RecommendationsResponse(BaseModel):
    """Response model for freshly generated recommendations."""

    recommendations: list[MediaItem]


class SavedRecommendationsResponse(BaseModel):
    """Response model for the stored recommendation batch."""

    recommendations: list[StoredRecommendationModel]


@router.get("", response_model=RecommendationsResponse)
async def recommendations(
    user: CurrentUser,
    generator: Annotated[
        RecommendationGenerator, Depends(get_recommendation_generator)
    ],
    persist: Annotated[bool, Depends(persist_recommendations)],
) -> RecommendationsResponse:
    """Recommend movies from the genres of the user's completed titles.

    Args:
        user (UserProfileModel): Authenticated user.
        generator (RecommendationGenerator): Recommendation generator.
        persist (bool): Whether to store the generated batch.

    Returns:
        RecommendationsResponse: Up to 20 titles not on the watchlist.
    """
    watchlist = get_watchlist_service().list_entries(user.id)
    items = await generator.generate(watchlist)
    if persist:
        get_recommendation_service().replace(user.id, items)
    return RecommendationsResponse(recommendations=items)


@router.get("/saved", response_model=SavedRecommendationsResponse)
def saved_recommendations(user: CurrentUser) -> SavedRecommendationsResponse:
    """Return the most recently stored batch for the user."""
    return SavedRecommendationsResponse(
        recommendations=get_recommendation_service().list_saved(user.id)
    )
