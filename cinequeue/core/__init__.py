"""Core functionality for CineQueue."""

from cinequeue.core.omdb import OmdbClient
from cinequeue.core.recommendations import RecommendationGenerator

__all__ = ["OmdbClient", "RecommendationGenerator"]
