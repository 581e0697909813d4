"""
Request logging middleware.

One log line per request (method, path, status, duration) plus an
``x-response-time-ms`` header so slow profiling calls are easy to spot
from the browser's network tab.
"""

import logging
import time

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("sheet_profiler.middleware.request_logger")


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


class RequestLoggerMiddleware:
    """Logs method, path, status code and duration of every HTTP request."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                headers.append([b"x-response-time-ms", str(_elapsed_ms(start_time)).encode()])
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                logger.info(
                    "%s %s -> %s (%.2fms)",
                    scope.get("method", "?"),
                    scope.get("path", "?"),
                    status_code,
                    _elapsed_ms(start_time),
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)
