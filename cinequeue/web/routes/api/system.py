"""API system endpoints."""

from datetime import UTC, datetime

from fastapi.routing import APIRouter
from pydantic import BaseModel

from cinequeue import __git_hash__, __version__
from cinequeue.web.state import get_app_state

__all__ = ["HealthResponse", "router"]


class HealthResponse(BaseModel):
    """Liveness information about the running service."""

    status: str
    version: str
    git_hash: str
    uptime_seconds: float


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Report that the service is up, with its version and uptime."""
    started_at = get_app_state().started_at
    return HealthResponse(
        status="ok",
        version=__version__,
        git_hash=__git_hash__,
        uptime_seconds=(datetime.now(UTC) - started_at).total_seconds(),
    )
