"""
Per-session rate limiting with sliding window.
"""

import re
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from socrate.shared.config import settings
from socrate.shared.logging import get_logger

logger = get_logger(__name__)

_SESSION_PATH = re.compile(r"^/sessions/([0-9a-f]{32})")


class SlidingWindowRateLimiter:
    """In-memory sliding window rate limiter per client key."""

    def __init__(self, requests_per_minute: int = 30, window_seconds: int = 60):
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        # key -> request timestamps in window; keys with none are evicted
        self._requests: dict[str, list[float]] = {}
        self._last_sweep = time.time()

    def _prune(self, key: str) -> list[float]:
        """Drop timestamps older than the window and return what is left."""
        cutoff = time.time() - self.window_seconds
        recent = [t for t in self._requests.get(key, ()) if t > cutoff]
        if recent:
            self._requests[key] = recent
        else:
            self._requests.pop(key, None)
        return recent

    def is_allowed(self, key: str) -> bool:
        return len(self._prune(key)) < self.requests_per_minute

    def record(self, key: str):
        now = time.time()
        if now - self._last_sweep >= self.window_seconds:
            self.sweep()
        self._requests.setdefault(key, []).append(now)

    def sweep(self):
        """Evict every key whose window has emptied."""
        for key in list(self._requests):
            self._prune(key)
        self._last_sweep = time.time()

    def retry_after_seconds(self, key: str) -> int:
        """Seconds until next request allowed (oldest in window expires)."""
        recent = self._prune(key)
        if len(recent) < self.requests_per_minute:
            return 0
        oldest = min(recent)
        return max(1, int(self.window_seconds - (time.time() - oldest)))

    def tracked_keys(self) -> int:
        return len(self._requests)


def get_client_key(request: Request) -> Optional[str]:
    """Session id from the path or header, else the client address."""
    match = _SESSION_PATH.match(request.url.path)
    if match:
        return f"session:{match.group(1)}"
    session_header = request.headers.get("X-Session-Id")
    if session_header:
        return f"session:{session_header[:64]}"
    client = request.client
    if client:
        return f"ip:{client.host}"
    rate_key = request.headers.get("X-Rate-Limit-Key")
    if rate_key:
        return f"key:{rate_key[:64]}"
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-session rate limiting middleware."""

    def __init__(
        self,
        app,
        requests_per_minute: Optional[int] = None,
        skip_paths: Optional[list[str]] = None,
    ):
        super().__init__(app)
        self.limiter = SlidingWindowRateLimiter(
            requests_per_minute or settings.api.rate_limit_requests_per_minute
        )
        self.skip_paths = set(skip_paths or ["/health", "/docs", "/openapi.json", "/redoc"])

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in self.skip_paths or path.startswith("/docs") or path.startswith("/redoc"):
            return await call_next(request)

        key = get_client_key(request)
        if not key:
            return await call_next(request)

        if not self.limiter.is_allowed(key):
            retry_after = self.limiter.retry_after_seconds(key)
            logger.warning(
                "Rate limit exceeded",
                extra={"client_key": key[:16], "retry_after": retry_after},
            )
            return Response(
                content='{"detail":"Rate limit exceeded. Try again later."}',
                status_code=429,
                headers={"Retry-After": str(retry_after), "Content-Type": "application/json"},
            )

        self.limiter.record(key)
        return await call_next(request)
