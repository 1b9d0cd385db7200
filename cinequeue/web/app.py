"""FastAPI application factory and setup."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import DEBUG
from pathlib import Path

from fastapi.applications import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.requests import Request

from cinequeue import __version__, config, log
from cinequeue.exceptions import CineQueueError, InternalError, UpstreamError
from cinequeue.web.middlewares.request_logging import RequestLoggingMiddleware
from cinequeue.web.routes import router
from cinequeue.web.state import get_app_state

__all__ = ["create_app"]

FRONTEND_BUILD_DIR = Path(__file__).parent.parent.parent / "frontend" / "build"

GENERIC_MESSAGES: dict[type[CineQueueError], str] = {
    UpstreamError: "The metadata service is unavailable, please try again later",
    CineQueueError: "Internal server error",
}


def _public_message(exc: CineQueueError) -> str:
    """Return the text clients may see for ``exc``."""
    if exc.expose_message or config.is_development:
        return str(exc) or exc.__class__.__doc__ or ""
    for cls, message in GENERIC_MESSAGES.items():
        if isinstance(exc, cls):
            return message
    return GENERIC_MESSAGES[CineQueueError]


def _error_response(
    request: Request, status_code: int, error: str, message: str
) -> JSONResponse:
    payload = {"error": error, "message": message, "path": request.url.path}
    return JSONResponse(status_code=status_code, content=payload)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan context manager.

    Args:
        app (FastAPI): The FastAPI application instance.

    Returns:
        AsyncGenerator: The application lifespan context manager.
    """
    try:
        get_app_state().ensure_omdb()
    except CineQueueError:
        log.warning("Web: OMDb client unavailable, metadata routes will fail")
    try:
        yield
    finally:
        await get_app_state().shutdown()


def create_app() -> FastAPI:
    """Create the FastAPI application.

    Returns:
        FastAPI: The created FastAPI application.
    """
    app = FastAPI(title="CineQueue", lifespan=lifespan, version=__version__)

    # Add request logging middleware if in debug mode
    if log.level <= DEBUG:
        app.add_middleware(RequestLoggingMiddleware)
        log.debug("Web: Request logging enabled (debug mode)")

    origins = config.web.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CineQueueError)
    async def domain_exception_handler(
        request: Request, exc: CineQueueError
    ) -> JSONResponse:
        """Handle CineQueue errors with structured JSON responses.

        Args:
            request (Request): The incoming HTTP request.
            exc (CineQueueError): The exception instance.

        Returns:
            JSONResponse: Structured JSON response with error details.
        """
        cls = exc.__class__
        if cls.status_code >= 500:
            log.error(
                f"Web: {request.method} {request.url.path} failed: "
                f"{cls.__name__}: {exc}"
            )
        return _error_response(
            request, cls.status_code, cls.__name__, _public_message(exc)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed requests as 400s in the common error shape."""
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            problems.append(f"{location}: {error.get('msg', 'invalid')}")
        return _error_response(
            request, 400, "ValidationError", "; ".join(problems) or "Invalid request"
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Log unexpected failures and answer with a generic 500."""
        log.error(
            f"Web: Unhandled error on {request.method} {request.url.path}",
            exc_info=exc,
        )
        message = repr(exc) if config.is_development else "Internal server error"
        return _error_response(request, 500, InternalError.__name__, message)

    app.include_router(router)

    if not FRONTEND_BUILD_DIR.exists():
        log.debug("Web: No frontend build found, serving the API only")
        return app

    app.mount("/", StaticFiles(directory=FRONTEND_BUILD_DIR, html=True), name="spa")
    return app
