from starlette.requests import HTTPConnection

from sse_relay.managers.connection_registry import ConnectionRegistry


def get_registry(request: HTTPConnection) -> ConnectionRegistry:
    """
    Return the connection registry owned by the running application.

    Override this dependency to inject a fresh or fake registry in tests.
    """
    return request.app.state.registry
