"""API routes."""

from fastapi.routing import APIRouter

from cinequeue.web.routes.api.movies import router as movies_router
from cinequeue.web.routes.api.recommendations import router as recommendations_router
from cinequeue.web.routes.api.system import router as system_router
from cinequeue.web.routes.api.watchlist import router as watchlist_router

__all__ = ["router"]

router = APIRouter()


router.include_router(movies_router, prefix="/movies", tags=["movies"])
router.include_router(watchlist_router, prefix="/watchlist", tags=["watchlist"])
router.include_router(
    recommendations_router, prefix="/recommendations", tags=["recommendations"]
)
router.include_router(system_router, tags=["system"])
