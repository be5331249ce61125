"""Tests for POST /events dispatch and method handling."""

from unittest.mock import MagicMock

import pytest

from sse_relay.dependencies import get_registry
from sse_relay.managers.connection_registry import ConnectionRegistry
from tests.mocks.stream_mocks import ClosedSink, RecordingSink


def test_post_delivers_to_registered_client(client, registry):
    sink = RecordingSink()
    registry.register("A", sink)

    response = client.post("/events", json={"message": "hi", "to": "A"})

    assert response.status_code == 200
    assert sink.received == b"hi\n"


def test_post_unknown_target(client, registry):
    sink = RecordingSink()
    registry.register("A", sink)

    response = client.post("/events", json={"message": "hi", "to": "ghost"})

    assert response.status_code == 400
    assert response.json() == {"detail": "To client not found"}
    assert sink.received == b""
    assert sink.flush_count == 0


@pytest.mark.parametrize(
    "body",
    ["not json", '{"message": "hi"', '{"message": "hi"}', ""],
)
def test_post_malformed_body_skips_registry(app, client, body):
    fake_registry = MagicMock(spec=ConnectionRegistry)
    app.dependency_overrides[get_registry] = lambda: fake_registry

    response = client.post(
        "/events",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid JSON"}
    fake_registry.lookup.assert_not_called()


def test_post_uses_injected_registry(app, client, registry):
    injected = ConnectionRegistry()
    sink = RecordingSink()
    injected.register("A", sink)
    app.dependency_overrides[get_registry] = lambda: injected

    response = client.post("/events", json={"message": "hi", "to": "A"})

    assert response.status_code == 200
    assert sink.received == b"hi\n"
    assert len(registry) == 0


def test_post_to_disconnected_stream(client, registry):
    registry.register("A", ClosedSink())

    response = client.post("/events", json={"message": "hi", "to": "A"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Delivery failed"}


def test_sender_cookie_is_irrelevant(client, registry):
    sink = RecordingSink()
    registry.register("A", sink)
    client.cookies.set("sse_client_id", "someone-else")

    response = client.post("/events", json={"message": "hi", "to": "A"})

    assert response.status_code == 200
    assert sink.received == b"hi\n"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
def test_other_methods_not_allowed(client, method):
    response = client.request(method, "/events")

    assert response.status_code == 405
