"""Tests for client identity resolution and persistence."""

import uuid

from starlette.requests import Request
from starlette.responses import Response

from sse_relay.identity import persist_client_id, resolve_client_id


def make_request(cookie: str | None = None) -> Request:
    headers = []
    if cookie is not None:
        headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "headers": headers})


def test_resolve_returns_presented_cookie():
    client_id, minted = resolve_client_id(
        make_request("sse_client_id=existing-id")
    )

    assert client_id == "existing-id"
    assert minted is False


def test_resolve_ignores_unrelated_cookies():
    client_id, minted = resolve_client_id(make_request("session=abc"))

    assert minted is True
    assert client_id != "abc"


def test_resolve_mints_uuid_without_cookie():
    client_id, minted = resolve_client_id(make_request())

    assert minted is True
    assert str(uuid.UUID(client_id)) == client_id


def test_resolve_treats_empty_cookie_as_missing():
    client_id, minted = resolve_client_id(make_request("sse_client_id="))

    assert minted is True
    assert client_id


def test_minted_ids_are_unique():
    ids = {resolve_client_id(make_request())[0] for _ in range(1000)}

    assert len(ids) == 1000


def test_persist_sets_identity_cookie():
    response = Response()

    persist_client_id(response, "client-1")

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("sse_client_id=client-1;")
    assert "Path=/" in cookie
    assert "Max-Age=86400" in cookie
    assert "expires=" in cookie
    assert "HttpOnly" in cookie
    assert "Secure" not in cookie
