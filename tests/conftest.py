"""
Pytest configuration and fixtures for testing.

This module provides a fresh application and registry per test plus a
synchronous test client for the request/response endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from sse_relay import application
from sse_relay.managers.connection_registry import ConnectionRegistry


@pytest.fixture
def app():
    """
    Create a new FastAPI application with its own empty registry.

    Returns:
        FastAPI: FastAPI application instance.
    """
    return application()


@pytest.fixture
def registry(app) -> ConnectionRegistry:
    """Registry owned by the `app` fixture."""
    return app.state.registry


@pytest.fixture
def client(app):
    """
    Create a test client for the FastAPI application.

    Returns:
        TestClient: FastAPI test client instance.
    """
    return TestClient(app)
