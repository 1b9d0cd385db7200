"""API routes for searching and looking up titles."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi.param_functions import Depends, Path, Query
from fastapi.routing import APIRouter

from cinequeue.core.omdb import OmdbClient
from cinequeue.exceptions import ValidationError
from cinequeue.models.schemas.media import (
    EpisodeDetails,
    MediaDetails,
    SearchPage,
    SeasonDetails,
)
from cinequeue.web.dependencies import get_omdb_client

__all__ = ["router"]

router = APIRouter()

Client = Annotated[OmdbClient, Depends(get_omdb_client)]

SEARCH_TYPES = ("movie", "series", "episode")


@router.get("/search", response_model=SearchPage)
async def search(
    client: Client,
    query: str | None = Query(None, description="Title text to search for"),
    type: str = Query("movie", description="movie, series or episode"),
    page: int = Query(1, ge=1),
) -> SearchPage:
    """Search titles by name.

    Args:
        client (OmdbClient): Metadata client.
        query (str | None): Title text; required.
        type (str): Kind of title to search for.
        page (int): 1-based result page.

    Returns:
        SearchPage: Normalized results; empty when nothing matched.
    """
    text = (query or "").strip()
    if not text:
        raise ValidationError("Search query is required")
    media_type = type.strip().lower()
    if media_type not in SEARCH_TYPES:
        raise ValidationError(f"Invalid type '{type}'")
    return await client.search(text, media_type=media_type, page=page)


@router.get("/recent", response_model=SearchPage)
async def recent(
    client: Client,
    year: int | None = Query(None, ge=1870, le=9999),
    page: int = Query(1, ge=1),
    query: str | None = Query(None, description="Title text to search for"),
) -> SearchPage:
    """Search movie titles released in ``year`` (the current year by default).

    OMDb only filters title searches by year, so ``query`` is required.
    """
    text = (query or "").strip()
    if not text:
        raise ValidationError("Search query is required")
    return await client.search_year(
        year or datetime.now(UTC).year, page=page, query=text
    )


@router.get("/details/{external_id}", response_model=MediaDetails)
async def details(
    client: Client,
    external_id: str = Path(..., min_length=1),
    type: str | None = Query(None, description="Restrict the lookup to this type"),
) -> MediaDetails:
    """Fetch full details for a title; 404 when the provider does not know it."""
    return await client.details(external_id, media_type=type)


@router.get("/{external_id}/season/{season}", response_model=SeasonDetails)
async def season(
    client: Client,
    external_id: str = Path(..., min_length=1),
    season: int = Path(..., ge=1),
) -> SeasonDetails:
    """List the episodes of one season of a series."""
    return await client.season(external_id, season)


@router.get(
    "/{external_id}/season/{season}/episode/{episode}", response_model=EpisodeDetails
)
async def episode(
    client: Client,
    external_id: str = Path(..., min_length=1),
    season: int = Path(..., ge=1),
    episode: int = Path(..., ge=1),
) -> EpisodeDetails:
    """Fetch details for one episode of a series."""
    return await client.episode(external_id, season, episode)
