"""FastAPI dependencies shared by the API routes."""

from typing import Annotated

from fastapi.param_functions import Depends, Header

from cinequeue import config
from cinequeue.core.omdb import OmdbClient
from cinequeue.core.recommendations import RecommendationGenerator
from cinequeue.exceptions import MissingTokenError
from cinequeue.web.services.auth_service import UserProfileModel, get_auth_service
from cinequeue.web.state import get_app_state

__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_omdb_client",
    "get_recommendation_generator",
    "parse_bearer",
    "persist_recommendations",
]


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        MissingTokenError: If the header is absent or not a bearer credential.
    """
    if not authorization or not authorization.strip():
        raise MissingTokenError("Access denied. No token provided.")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise MissingTokenError("Access denied. Token format invalid.")
    return parts[1]


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserProfileModel:
    """Resolve the authenticated user from the bearer token."""
    token = parse_bearer(authorization)
    return get_auth_service().authenticate(token)


def get_omdb_client() -> OmdbClient:
    """Return the shared OMDb client."""
    return get_app_state().ensure_omdb()


def get_recommendation_generator(
    client: Annotated[OmdbClient, Depends(get_omdb_client)],
) -> RecommendationGenerator:
    """Return a recommendation generator backed by the shared OMDb client."""
    return RecommendationGenerator(client)


CurrentUser = Annotated[UserProfileModel, Depends(get_current_user)]


def persist_recommendations() -> bool:
    """Whether generated recommendation batches are stored."""
    return config.recommendations.persist
