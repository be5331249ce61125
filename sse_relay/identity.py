"""Client identity derivation and persistence."""

import uuid

from starlette.requests import HTTPConnection
from starlette.responses import Response

from sse_relay.constants import (
    CLIENT_ID_COOKIE_MAX_AGE_SECONDS,
    CLIENT_ID_COOKIE_NAME,
    CLIENT_ID_COOKIE_PATH,
)


def resolve_client_id(request: HTTPConnection) -> tuple[str, bool]:
    """
    Return the client id carried by the request, or mint a new one.

    Args:
        request: Incoming request.

    Returns:
        Tuple of the client id and whether it was newly generated.
    """
    client_id = request.cookies.get(CLIENT_ID_COOKIE_NAME)
    if client_id:
        return client_id, False

    return str(uuid.uuid4()), True


def persist_client_id(response: Response, client_id: str) -> None:
    """Instruct the client to present `client_id` on later requests."""
    response.set_cookie(
        key=CLIENT_ID_COOKIE_NAME,
        value=client_id,
        max_age=CLIENT_ID_COOKIE_MAX_AGE_SECONDS,
        expires=CLIENT_ID_COOKIE_MAX_AGE_SECONDS,
        path=CLIENT_ID_COOKIE_PATH,
        httponly=True,
        secure=False,
    )
