"""Event stream endpoint: attach a stream (GET) or send to one (POST)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from sse_relay.dependencies import get_registry
from sse_relay.dispatch import deliver, parse_dispatch_request
from sse_relay.exceptions import (
    DeliveryError,
    InvalidMessageError,
    TargetNotFoundError,
)
from sse_relay.identity import persist_client_id, resolve_client_id
from sse_relay.logging import logger
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.session import EventStreamResponse
from sse_relay.utils.metrics import sse_messages_dispatched_total

router = APIRouter()

RegistryDep = Annotated[ConnectionRegistry, Depends(get_registry)]


@router.get(
    "/events",
    response_class=EventStreamResponse,
    summary="Open an event stream",
    tags=["events"],
)
async def open_stream(
    request: Request, registry: RegistryDep
) -> EventStreamResponse:
    """
    Attach the caller to a long-lived event stream.

    The caller's id comes from the `sse_client_id` cookie, or is generated
    and set as that cookie. The first line of the stream is a welcome line
    carrying the id; every later line is a message dispatched to it.
    """
    client_id, minted = resolve_client_id(request)
    if minted:
        logger.debug(f"Issued new client id {client_id}")

    response = EventStreamResponse(client_id, registry)
    persist_client_id(response, client_id)
    return response


@router.post(
    "/events",
    response_class=Response,
    summary="Send a message to a connected client",
    tags=["events"],
)
async def dispatch_message(request: Request, registry: RegistryDep) -> Response:
    """
    Write `message` as one line into the stream of client `to`.

    Returns 400 for a malformed body or an unknown target and 500 when the
    target disconnected while the message was being written.
    """
    body = await request.body()
    try:
        message = parse_dispatch_request(body)
    except InvalidMessageError:
        sse_messages_dispatched_total.labels(outcome="invalid").inc()
        logger.debug(f"Received invalid dispatch body: {body[:200]!r}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON"
        )

    try:
        await deliver(registry, message)
    except TargetNotFoundError:
        sse_messages_dispatched_total.labels(outcome="unknown_target").inc()
        logger.info(f"Dispatch to unknown client {message.to}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="To client not found",
        )
    except DeliveryError:
        sse_messages_dispatched_total.labels(outcome="failed").inc()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Delivery failed",
        )

    sse_messages_dispatched_total.labels(outcome="delivered").inc()
    return Response(status_code=status.HTTP_200_OK)
