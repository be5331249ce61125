"""
Middleware for injecting request fields into structured logs.
"""

from starlette.types import ASGIApp, Receive, Scope, Send

from sse_relay.logging import clear_log_context, set_log_context


class LoggingContextMiddleware:
    """
    Put the request method and path into the log context.

    The context is cleared when the request finishes, which for an event
    stream is when the client disconnects.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        set_log_context(method=scope["method"], path=scope["path"])
        try:
            await self.app(scope, receive, send)
        finally:
            clear_log_context()
