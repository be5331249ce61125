"""Tests for dispatch body parsing and delivery."""

import pytest

from sse_relay.dispatch import deliver, parse_dispatch_request
from sse_relay.exceptions import (
    DeliveryError,
    InvalidMessageError,
    TargetNotFoundError,
)
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.schemas import DispatchRequest
from tests.mocks.stream_mocks import ClosedSink, RecordingSink


def test_parse_valid_body():
    request = parse_dispatch_request(b'{"message": "hi", "to": "A"}')

    assert request == DispatchRequest(message="hi", to="A")


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"",
        b'{"message": "hi"',
        b'{"message": "hi"}',
        b'{"to": "A"}',
        b'["hi", "A"]',
        b'{"message": 1, "to": "A"}',
    ],
)
def test_parse_invalid_body(body):
    with pytest.raises(InvalidMessageError):
        parse_dispatch_request(body)


@pytest.mark.asyncio
async def test_deliver_writes_line_and_flushes():
    registry = ConnectionRegistry()
    sink = RecordingSink()
    registry.register("A", sink)

    await deliver(registry, DispatchRequest(message="hi", to="A"))

    assert sink.received == b"hi\n"
    assert sink.flush_count == 1


@pytest.mark.asyncio
async def test_deliver_does_not_escape_payload():
    registry = ConnectionRegistry()
    sink = RecordingSink()
    registry.register("A", sink)

    await deliver(registry, DispatchRequest(message="data: <b>ü</b>", to="A"))

    assert sink.received == "data: <b>ü</b>\n".encode()


@pytest.mark.asyncio
async def test_deliver_unknown_target():
    registry = ConnectionRegistry()
    other = RecordingSink()
    registry.register("A", other)

    with pytest.raises(TargetNotFoundError) as exc_info:
        await deliver(registry, DispatchRequest(message="hi", to="ghost"))

    assert exc_info.value.client_id == "ghost"
    assert other.received == b""


@pytest.mark.asyncio
async def test_deliver_to_closed_stream():
    registry = ConnectionRegistry()
    registry.register("A", ClosedSink())

    with pytest.raises(DeliveryError):
        await deliver(registry, DispatchRequest(message="hi", to="A"))
