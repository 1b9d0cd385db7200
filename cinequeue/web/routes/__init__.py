"""Route aggregators for the web application."""

from fastapi.routing import APIRouter

from cinequeue.web.routes.api import router as api_router
from cinequeue.web.routes.auth import router as auth_router

__all__ = ["router"]

router = APIRouter()

router.include_router(api_router, prefix="/api", tags=[])
router.include_router(auth_router, prefix="/auth", tags=["auth"])
