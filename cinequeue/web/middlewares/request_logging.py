"""Request logging middleware for debug mode."""

import io
import json
import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cinequeue import log

__all__ = ["RequestLoggingMiddleware"]

MAX_BODY_LENGTH = 1000
MASK = "********"
SENSITIVE_KEYS = frozenset({"password", "token", "jwt_secret", "apikey", "api_key"})
TEXT_CONTENT_TYPES = (
    "application/json",
    "application/x-www-form-urlencoded",
    "text/",
)
_FORM_PASSWORD_PATTERN = re.compile(r"(password=)[^&]*", re.IGNORECASE)


def _mask(value: Any) -> Any:
    """Recursively replace values of sensitive keys in decoded JSON."""
    if isinstance(value, dict):
        return {
            key: MASK if str(key).lower() in SENSITIVE_KEYS else _mask(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_mask(item) for item in value]
    return value


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its outcome and a preview of its body.

    The body is read once and stored in ``request.scope["body"]`` so the
    downstream handler can still consume it. Passwords are masked, long text is
    truncated and binary payloads are summarized by type and size.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Log the request, pass it on and log the response status."""
        start = time.perf_counter()
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        body_preview = await self._read_body(request)

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            log.debug(
                f"{request.method} {target} - Failed after {elapsed:.2f}ms: {e!r}"
                + (f" - Body: {body_preview}" if body_preview else "")
            )
            raise

        elapsed = (time.perf_counter() - start) * 1000
        log.debug(
            f"{request.method} {target} - Response: {response.status_code} "
            f"({elapsed:.2f}ms)"
            + (f" - Body: {body_preview}" if body_preview else "")
        )
        return response

    async def _read_body(self, request: Request) -> str | None:
        """Return a loggable preview of the request body, or None if empty."""
        try:
            body = await request.body()
        except Exception as e:
            return f"<error reading body: {e}>"

        request.scope["body"] = io.BytesIO(body)
        if not body:
            return None

        content_type = request.headers.get("content-type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if not media_type.startswith(TEXT_CONTENT_TYPES):
            return f"<{media_type or 'unknown'}, {len(body)} bytes>"

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data, {len(body)} bytes>"

        text = self._redact(media_type, text)
        if len(text) > MAX_BODY_LENGTH:
            text = text[:MAX_BODY_LENGTH] + "..."
        return text

    @staticmethod
    def _redact(media_type: str, text: str) -> str:
        if media_type == "application/json":
            try:
                decoded = json.loads(text)
            except ValueError:
                return text
            if isinstance(decoded, dict | list):
                return json.dumps(_mask(decoded), separators=(",", ":"))
            return text
        if media_type == "application/x-www-form-urlencoded":
            return _FORM_PASSWORD_PATTERN.sub(rf"\g<1>{MASK}", text)
        return text
