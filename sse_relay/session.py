"""
Lifecycle of one client's event stream.

The stream moves through Opening -> Attached -> Closed. It is attached to the
registry for exactly as long as the transport stays open: there is no
heartbeat, no idle timeout and no maximum duration.
"""

from starlette import status
from starlette.responses import PlainTextResponse, Response
from starlette.types import Receive, Scope, Send

from sse_relay.constants import (
    EVENT_STREAM_HEADERS,
    EVENT_STREAM_MEDIA_TYPE,
    WELCOME_TEMPLATE,
)
from sse_relay.exceptions import StreamClosedError
from sse_relay.logging import logger, set_log_context
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.streams import ASGIStreamSink, supports_streaming
from sse_relay.utils.metrics import sse_connections_total


async def wait_for_disconnect(receive: Receive) -> None:
    """Block until the server reports that the client went away."""
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            return


class EventStreamResponse(Response):
    """
    Open-ended `text/event-stream` response bound to a client id.

    Unlike StreamingResponse, the body is not produced by an iterator: the
    session registers its sink and other requests write into it through the
    registry.
    """

    media_type = EVENT_STREAM_MEDIA_TYPE

    def __init__(
        self,
        client_id: str,
        registry: ConnectionRegistry,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.client_id = client_id
        self.registry = registry
        self.status_code = status.HTTP_200_OK
        self.background = None
        self.init_headers({**EVENT_STREAM_HEADERS, **(headers or {})})

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not supports_streaming(scope):
            sse_connections_total.labels(status="rejected").inc()
            logger.error(
                f"Streaming unsupported for client {self.client_id} "
                f"(HTTP/{scope.get('http_version')})"
            )
            response = PlainTextResponse(
                "Streaming unsupported",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
            await response(scope, receive, send)
            return

        sink = ASGIStreamSink(send)
        self.registry.register(self.client_id, sink)
        sse_connections_total.labels(status="accepted").inc()
        set_log_context(client_id=self.client_id)
        logger.info(f"Stream joined by {self.client_id}")

        try:
            await sink.start(self.status_code, self.raw_headers)
            await sink.write(
                WELCOME_TEMPLATE.format(client_id=self.client_id).encode()
            )
            await sink.flush()
            await wait_for_disconnect(receive)
        except StreamClosedError as ex:
            logger.info(f"Stream for {self.client_id} lost: {ex}")
        finally:
            sink.close()
            self.registry.unregister(self.client_id, sink)
            logger.info(f"Stream closed for {self.client_id}")
