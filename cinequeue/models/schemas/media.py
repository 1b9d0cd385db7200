"""Normalized media schemas produced by the metadata client."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "CamelModel",
    "EpisodeDetails",
    "EpisodeSummary",
    "MediaDetails",
    "MediaItem",
    "RatingSource",
    "SearchPage",
    "SeasonDetails",
]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys and populated by either case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaItem(CamelModel):
    """Provider-agnostic summary of a movie, series or episode."""

    external_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    media_type: str = "movie"
    year: str | None = None
    poster_url: str | None = None
    rating: str | None = None
    genres: list[str] = Field(default_factory=list)


class RatingSource(CamelModel):
    """A third-party rating, e.g. Rotten Tomatoes or Metacritic."""

    source: str
    value: str


class MediaDetails(MediaItem):
    """Full details for a single title."""

    plot: str | None = None
    rated: str | None = None
    released: str | None = None
    runtime: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    ratings: list[RatingSource] = Field(default_factory=list)
    metascore: str | None = None
    votes: str | None = None
    box_office: str | None = None
    production: str | None = None
    website: str | None = None
    total_seasons: int | None = None


class EpisodeSummary(CamelModel):
    """An episode as listed inside a season."""

    external_id: str
    title: str
    episode: int | None = None
    released: str | None = None
    rating: str | None = None


class SeasonDetails(CamelModel):
    """Episode listing for one season of a series."""

    title: str
    season: int
    total_seasons: int | None = None
    episodes: list[EpisodeSummary] = Field(default_factory=list)


class EpisodeDetails(MediaDetails):
    """Full details for a single episode."""

    season: int | None = None
    episode: int | None = None
    series_id: str | None = None


class SearchPage(BaseModel):
    """One page of search results."""

    page: int = 1
    total_results: int = 0
    results: list[MediaItem] = Field(default_factory=list)
