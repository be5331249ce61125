"""
Writable, flushable stream handles for open event-stream connections.

The registry and the dispatcher only depend on the `StreamSink` protocol;
`ASGIStreamSink` is the implementation backed by an ASGI `send` callable.
"""

import asyncio
from typing import Protocol, runtime_checkable

from starlette.types import Scope, Send

from sse_relay.constants import STREAMING_HTTP_VERSIONS
from sse_relay.exceptions import StreamClosedError


@runtime_checkable
class StreamSink(Protocol):
    """Minimal capability of a live stream: buffer bytes, push them out."""

    async def write(self, data: bytes) -> None: ...

    async def flush(self) -> None: ...


def supports_streaming(scope: Scope) -> bool:
    """
    Check whether the transport can deliver an open-ended response in chunks.

    Args:
        scope: ASGI connection scope.

    Returns:
        True for HTTP/1.1 and later, False otherwise (HTTP/1.0 has no chunked
        transfer encoding and non-HTTP scopes have no response body).
    """
    return (
        scope.get("type") == "http"
        and scope.get("http_version", "1.1") in STREAMING_HTTP_VERSIONS
    )


class ASGIStreamSink:
    """
    Stream sink writing `http.response.body` chunks through ASGI `send`.

    `write` only buffers; `flush` sends everything buffered so far as one
    chunk with `more_body=True`. Until `start` has sent the response head,
    flushed bytes stay buffered and go out with the first flush afterwards.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self._buffer = bytearray()
        self._lock = asyncio.Lock()
        self._started = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(
        self, status_code: int, raw_headers: list[tuple[bytes, bytes]]
    ) -> None:
        """
        Send the response head.

        Args:
            status_code: HTTP status of the stream response.
            raw_headers: Encoded header pairs, as built by Starlette responses.
        """
        async with self._lock:
            await self._transmit(
                {
                    "type": "http.response.start",
                    "status": status_code,
                    "headers": raw_headers,
                }
            )
            self._started = True

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise StreamClosedError("Stream is closed")
        self._buffer.extend(data)

    async def flush(self) -> None:
        async with self._lock:
            if self._closed:
                raise StreamClosedError("Stream is closed")
            if not self._started or not self._buffer:
                return

            chunk = bytes(self._buffer)
            self._buffer.clear()
            await self._transmit(
                {"type": "http.response.body", "body": chunk, "more_body": True}
            )

    def close(self) -> None:
        """Mark the sink dead; later writes and flushes raise."""
        self._closed = True
        self._buffer.clear()

    async def _transmit(self, message: dict) -> None:
        try:
            await self._send(message)
        except (OSError, RuntimeError) as ex:
            self._closed = True
            raise StreamClosedError(f"Transport failed: {ex}") from ex
