"""Cache Utilities Module."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import cachetools

__all__ = ["CacheEntry", "TTLCache"]

T = TypeVar("T")

DEFAULT_TTL = 5 * 60  # seconds


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    """A cached value and the clock reading after which it is stale."""

    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """Key/value store with per-entry expiry and lazy eviction.

    Expired entries are only removed when they are read, so ``size()`` may
    include entries that are already stale. There is no background sweep; the
    backing ``cachetools.LRUCache`` bounds how much stale data can accumulate by
    dropping the least recently used entries once ``maxsize`` is reached.

    The clock is injectable so tests can move time forward deterministically.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        maxsize: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create an empty cache.

        Args:
            default_ttl (float): Lifetime in seconds used when ``set`` gets no ttl.
            maxsize (int): Maximum number of stored entries.
            clock (Callable[[], float]): Monotonic time source in seconds.
        """
        self.default_ttl = default_ttl
        self.clock = clock
        self._entries: cachetools.LRUCache[str, CacheEntry[T]] = cachetools.LRUCache(
            maxsize=maxsize
        )

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry.

        Empty keys are ignored.

        Args:
            key (str): Cache key.
            value (T): Value to store.
            ttl (float | None): Lifetime in seconds; defaults to ``default_ttl``.
        """
        if not key:
            return
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self.clock() + lifetime)

    def get(self, key: str, default: Any = None) -> T | Any:
        """Return the live value for ``key``, evicting it if it has expired.

        Args:
            key (str): Cache key.
            default (Any): Returned on a miss.

        Returns:
            T | Any: The cached value, or ``default`` when absent or expired.
        """
        if not key:
            return default

        entry = self._entries.get(key)
        if entry is None:
            return default

        if self.clock() > entry.expires_at:
            del self._entries[key]
            return default

        return entry.value

    def invalidate(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def size(self) -> int:
        """Return the number of stored entries, including unread stale ones."""
        return len(self._entries)

    def __len__(self) -> int:
        return self.size()
