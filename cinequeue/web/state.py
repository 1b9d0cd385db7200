"""Global web application state utilities.

Holds references to long-lived singletons (metadata cache, OMDb client) needed by
route handlers.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

from cinequeue import config, log
from cinequeue.core.omdb import OmdbClient
from cinequeue.exceptions import MissingSecretError
from cinequeue.utils.cache import TTLCache
from cinequeue.utils.retry import RetryPolicy

__all__ = ["AppState", "get_app_state"]


class AppState:
    """Container for global web application state."""

    def __init__(self) -> None:
        """Initialize empty state containers and record process start time."""
        self.cache: TTLCache[dict[str, Any]] | None = (
            TTLCache(default_ttl=config.cache.ttl, maxsize=config.cache.maxsize)
            if config.cache.enabled
            else None
        )
        self.omdb: OmdbClient | None = None
        self.on_shutdown_callbacks: list[Callable[[], Any]] = []
        self.started_at: datetime = datetime.now(UTC)

    def add_shutdown_callback(self, cb: Callable[[], Any]) -> None:
        """Register a shutdown callback executed during app shutdown.

        Args:
            cb (Callable[[], Any]): The callback function to register.
        """
        self.on_shutdown_callbacks.append(cb)

    def ensure_omdb(self) -> OmdbClient:
        """Get or create the shared OMDb client.

        Returns:
            OmdbClient: A client configured from the ``omdb`` settings.

        Raises:
            MissingSecretError: If no OMDb API key is configured.
        """
        if self.omdb is None:
            settings = config.omdb
            if settings.api_key is None or not settings.api_key.get_secret_value():
                raise MissingSecretError("omdb.api_key must be configured")
            self.omdb = OmdbClient(
                api_key=settings.api_key.get_secret_value(),
                base_url=settings.base_url,
                timeout=settings.timeout,
                retry_policy=RetryPolicy(
                    max_retries=settings.retry_attempts, delay=settings.retry_delay
                ),
                cache=self.cache,
            )
            self.add_shutdown_callback(self._close_omdb)
        return self.omdb

    async def _close_omdb(self) -> None:
        client, self.omdb = self.omdb, None
        if client is not None:
            await client.close()

    async def shutdown(self) -> None:
        """Run and clear the registered shutdown callbacks."""
        callbacks, self.on_shutdown_callbacks = self.on_shutdown_callbacks, []
        for cb in callbacks:
            try:
                res = cb()
                if hasattr(res, "__await__"):
                    await res
            except Exception:
                log.error("Web: Shutdown callback failed", exc_info=True)


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    """Get the singleton application state instance.

    Returns:
        AppState: The application state instance.
    """
    return AppState()
