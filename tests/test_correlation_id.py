"""
Tests for correlation ID middleware.

This module tests correlation ID generation, header handling and context
variable access.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sse_relay.middlewares.correlation_id import (
    CorrelationIDMiddleware,
    get_correlation_id,
)


@pytest.fixture
def echo_client():
    """App that returns the correlation ID seen inside the handler."""
    app = FastAPI()
    app.add_middleware(CorrelationIDMiddleware)

    @app.get("/echo")
    async def echo():
        return {"cid": get_correlation_id()}

    return TestClient(app)


def test_generates_correlation_id(echo_client):
    response = echo_client.get("/echo")

    cid = response.headers["X-Correlation-ID"]
    assert len(cid) == 8
    assert response.json() == {"cid": cid}


def test_uses_provided_correlation_id(echo_client):
    response = echo_client.get("/echo", headers={"X-Correlation-ID": "test-cor"})

    assert response.headers["X-Correlation-ID"] == "test-cor"
    assert response.json() == {"cid": "test-cor"}


def test_truncates_long_correlation_id(echo_client):
    response = echo_client.get(
        "/echo", headers={"X-Correlation-ID": "0123456789abcdef"}
    )

    assert response.headers["X-Correlation-ID"] == "01234567"


def test_context_is_reset_after_request(echo_client):
    echo_client.get("/echo", headers={"X-Correlation-ID": "ctx-test"})

    assert get_correlation_id() == ""


def test_relay_app_adds_header(client):
    response = client.get("/health")

    assert len(response.headers["X-Correlation-ID"]) == 8
