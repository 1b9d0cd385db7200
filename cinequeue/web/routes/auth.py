"""Account registration and login routes."""

from fastapi.routing import APIRouter

from cinequeue.web.dependencies import CurrentUser
from cinequeue.web.services.auth_service import (
    AuthResponse,
    Credentials,
    UserProfileModel,
    get_auth_service,
)

__all__ = ["router"]

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(credentials: Credentials) -> AuthResponse:
    """Create an account and return a bearer token for it.

    Args:
        credentials (Credentials): Desired username and password.

    Returns:
        AuthResponse: Confirmation, token and the new user.
    """
    return get_auth_service().register(credentials.username, credentials.password)


@router.post("/login", response_model=AuthResponse)
def login(credentials: Credentials) -> AuthResponse:
    """Exchange a username and password for a bearer token."""
    return get_auth_service().login(credentials.username, credentials.password)


@router.get("/me", response_model=UserProfileModel)
def me(user: CurrentUser) -> UserProfileModel:
    """Return the authenticated user."""
    return user
