"""
Error handling middleware for the profiler API.

Turns any exception that escapes a route into a JSON 500 body, so the
dashboard always gets something it can parse instead of a bare
"Internal Server Error" text response.

Pure ASGI middleware (not BaseHTTPMiddleware), so it can be stacked with
the other middlewares without buffering response bodies.
"""

import json
import logging
import traceback

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("sheet_profiler.middleware.error_handler")


def error_body(error: str, message: str, **extra) -> bytes:
    """Encode the JSON error envelope shared by the middlewares."""
    return json.dumps({"error": error, "message": message, **extra}).encode("utf-8")


async def send_json_error(send: Send, status: int, body: bytes, headers=None) -> None:
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [
            [b"content-type", b"application/json"],
            [b"content-length", str(len(body)).encode()],
            *(headers or []),
        ],
    })
    await send({"type": "http.response.body", "body": body})


class ErrorHandlerMiddleware:
    """Catches unhandled exceptions and returns structured JSON error responses."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            path = scope.get("path", "unknown")
            method = scope.get("method", "unknown")
            logger.error("Unhandled exception on %s %s: %s", method, path, exc)
            logger.debug(traceback.format_exc())

            if response_started:
                # Headers are already on the wire; nothing sane left to send
                raise

            body = error_body(
                "internal_server_error",
                "An unexpected error occurred while processing the request.",
                path=path,
            )
            await send_json_error(send, 500, body)
