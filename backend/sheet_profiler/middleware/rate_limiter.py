"""
In-memory rate limiting middleware for the profiler API.

Sliding-window counter per client IP. Limits come from settings and are
generous by default: this guards the profiling endpoints against a runaway
client re-submitting large payloads, not against normal dashboard use.

Pure ASGI middleware (not BaseHTTPMiddleware).
"""

import logging
import time
from collections import defaultdict
from typing import Dict, Iterable, List

from starlette.types import ASGIApp, Receive, Scope, Send

from .error_handler import error_body, send_json_error

logger = logging.getLogger("sheet_profiler.middleware.rate_limiter")

DEFAULT_RATE_LIMIT = 10_000
DEFAULT_WINDOW_SECONDS = 60
EXEMPT_PATHS = ("/health", "/docs", "/openapi.json")


class RateLimiterMiddleware:
    """Sliding-window rate limiter keyed by client IP."""

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int = DEFAULT_RATE_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        exempt_paths: Iterable[str] = EXEMPT_PATHS,
    ):
        self.app = app
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.exempt_paths = frozenset(exempt_paths)
        # ip -> request timestamps inside the current window
        self._requests: Dict[str, List[float]] = defaultdict(list)

    def _get_client_ip(self, scope: Scope) -> str:
        """Client IP, preferring the first X-Forwarded-For hop behind a proxy."""
        headers = dict(scope.get("headers", []))
        forwarded = headers.get(b"x-forwarded-for")
        if forwarded:
            return forwarded.decode().split(",")[0].strip()
        client = scope.get("client")
        return client[0] if client else "unknown"

    def _prune(self, ip: str, now: float) -> int:
        """Drop timestamps older than the window and return what is left."""
        cutoff = now - self.window_seconds
        recent = [t for t in self._requests.get(ip, []) if t > cutoff]
        if recent:
            self._requests[ip] = recent
        else:
            self._requests.pop(ip, None)
        return len(recent)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or scope.get("path", "") in self.exempt_paths:
            await self.app(scope, receive, send)
            return

        client_ip = self._get_client_ip(scope)
        now = time.time()
        request_count = self._prune(client_ip, now)

        if request_count >= self.max_requests:
            logger.warning(
                "Rate limit exceeded for %s: %d/%d requests in %ds window",
                client_ip,
                request_count,
                self.max_requests,
                self.window_seconds,
            )
            body = error_body(
                "rate_limit_exceeded",
                "Too many requests. Please try again later.",
                retry_after_seconds=self.window_seconds,
            )
            await send_json_error(
                send, 429, body,
                headers=[[b"retry-after", str(self.window_seconds).encode()]],
            )
            return

        self._requests[client_ip].append(now)
        await self.app(scope, receive, send)
