"""
Middleware for request correlation ID tracking.

Written as a plain ASGI middleware rather than BaseHTTPMiddleware so that
open-ended event streams pass through unbuffered and still observe the
client disconnect.
"""

import uuid
from contextvars import ContextVar

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Correlation IDs are truncated to this length
CORRELATION_ID_LENGTH = 8

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware:
    """
    Attach a correlation ID to every HTTP request.

    This middleware:
    - Takes the ID from the X-Correlation-ID header or generates a new one
    - Stores it in scope["state"]["request_id"] and in a context variable
    - Adds it to the response headers
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        cid = Headers(scope=scope).get(
            CORRELATION_ID_HEADER, uuid.uuid4().hex
        )[:CORRELATION_ID_LENGTH]

        scope.setdefault("state", {})["request_id"] = cid
        token = correlation_id.set(cid)

        async def send_with_correlation_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers[CORRELATION_ID_HEADER] = cid
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            correlation_id.reset(token)


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current request context.

    Returns:
        The correlation ID string, or empty string outside a request.
    """
    return correlation_id.get()
