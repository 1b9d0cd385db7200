"""Retry policy shared by outbound HTTP clients."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from cinequeue.exceptions import ExhaustedRetriesError, RateLimitedError, TransportError

__all__ = ["RetryPolicy", "default_backoff", "is_transient"]

T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    """Return whether ``exc`` is worth retrying.

    Only transport failures (including rate limiting) are transient; provider
    errors and client errors are definitive.
    """
    return isinstance(exc, TransportError)


def default_backoff(delay: float, exc: BaseException) -> float:
    """Wait ``delay`` seconds, doubled when the provider rate limited us."""
    if isinstance(exc, RateLimitedError):
        return delay * 2
    return delay


@dataclass
class RetryPolicy:
    """Bounded retry with a pluggable backoff and retryable-error predicate.

    A call is attempted once and then retried up to ``max_retries`` more times.
    Attempts are strictly sequential: the next attempt only starts after the
    previous one failed and the backoff wait has elapsed.

    Attributes:
        max_retries (int): Additional attempts after the first one.
        delay (float): Base wait between attempts, in seconds.
        backoff (Callable): Maps ``(delay, error)`` to the wait before retrying.
        retryable (Callable): Decides whether an error should be retried.
        sleep (Callable): Awaitable sleep, replaceable in tests.
    """

    max_retries: int = 3
    delay: float = 1.0
    backoff: Callable[[float, BaseException], float] = default_backoff
    retryable: Callable[[BaseException], bool] = is_transient
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    @property
    def max_attempts(self) -> int:
        """Total number of attempts a call may make."""
        return self.max_retries + 1

    async def call(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        on_retry: Callable[[int, BaseException, float], None] | None = None,
        **kwargs,
    ) -> T:
        """Await ``func(*args, **kwargs)`` under this policy.

        Args:
            func (Callable[..., Awaitable[T]]): Coroutine function to call.
            *args: Positional arguments for ``func``.
            on_retry (Callable | None): Called with ``(attempt, error, wait)``
                before each wait, typically for logging.
            **kwargs: Keyword arguments for ``func``.

        Returns:
            T: The first successful result.

        Raises:
            ExhaustedRetriesError: When every attempt failed with a retryable error.
            Exception: Any non-retryable error, unchanged, on the attempt it occurs.
        """
        attempt = 1
        while True:
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                if not self.retryable(exc):
                    raise
                if attempt >= self.max_attempts:
                    raise ExhaustedRetriesError(self.max_attempts, exc) from exc
                wait = self.backoff(self.delay, exc)
                if on_retry is not None:
                    on_retry(attempt, exc, wait)

            await self.sleep(wait)
            attempt += 1
