"""API routes for managing the authenticated user's watchlist."""

from fastapi.param_functions import Path, Query
from fastapi.routing import APIRouter
from pydantic import BaseModel

from cinequeue.exceptions import ValidationError
from cinequeue.models.db.watchlist import WatchStatus
from cinequeue.web.dependencies import CurrentUser
from cinequeue.web.services.watchlist_service import (
    AddWatchlistEntryRequest,
    UpdateStatusRequest,
    WatchlistEntryModel,
    get_watchlist_service,
)

__all__ = ["router"]

router = APIRouter()


class MessageResponse(BaseModel):
    """Response model for operations that only report success."""

    message: str


@router.get("", response_model=list[WatchlistEntryModel])
def list_watchlist(
    user: CurrentUser,
    status: str | None = Query(None, description="Only return entries in this status"),
) -> list[WatchlistEntryModel]:
    """List the user's watchlist, most recently added first.

    Args:
        user (UserProfileModel): Authenticated user.
        status (str | None): Optional status filter.

    Returns:
        list[WatchlistEntryModel]: The user's entries.
    """
    status_filter = None
    if status:
        try:
            status_filter = WatchStatus(status.strip().lower())
        except ValueError as e:
            raise ValidationError(f"Invalid status '{status}'") from e
    return get_watchlist_service().list_entries(user.id, status=status_filter)


@router.post("", response_model=WatchlistEntryModel, status_code=201)
def add_to_watchlist(
    request: AddWatchlistEntryRequest, user: CurrentUser
) -> WatchlistEntryModel:
    """Add a title to the user's watchlist with status ``pending``."""
    return get_watchlist_service().add_entry(user.id, request)


@router.delete("/{entry_id}", response_model=MessageResponse)
def remove_from_watchlist(
    user: CurrentUser, entry_id: str = Path(..., min_length=1)
) -> MessageResponse:
    """Remove an entry, addressed by its id or its external id."""
    get_watchlist_service().remove_entry(user.id, entry_id)
    return MessageResponse(message="Item removed from watchlist")


@router.patch("/{entry_id}/status", response_model=WatchlistEntryModel)
def update_status(
    request: UpdateStatusRequest,
    user: CurrentUser,
    entry_id: str = Path(..., min_length=1),
) -> WatchlistEntryModel:
    """Change an entry's status to pending, watching or completed."""
    return get_watchlist_service().update_status(user.id, entry_id, request.status)
