"""
Point-to-point delivery of one message into a registered stream.
"""

from pydantic import ValidationError

from sse_relay.constants import LINE_SEPARATOR
from sse_relay.exceptions import (
    DeliveryError,
    InvalidMessageError,
    StreamClosedError,
    TargetNotFoundError,
)
from sse_relay.logging import logger
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.schemas import DispatchRequest


def parse_dispatch_request(body: bytes) -> DispatchRequest:
    """
    Parse a raw POST body into a dispatch request.

    Raises:
        InvalidMessageError: If the body is not JSON or misses `message`/`to`.
    """
    try:
        return DispatchRequest.model_validate_json(body)
    except ValidationError as ex:
        raise InvalidMessageError(str(ex)) from ex


async def deliver(registry: ConnectionRegistry, request: DispatchRequest) -> None:
    """
    Write the message as one line into the target's stream and flush it.

    Delivery is attempted once. The write happens outside the registry lock,
    so the target may disconnect in between; that surfaces as DeliveryError.

    Args:
        registry: Registry holding the open streams.
        request: Parsed dispatch request.

    Raises:
        TargetNotFoundError: If no stream is registered for `request.to`.
        DeliveryError: If the stream closed before the line was flushed.
    """
    sink = registry.lookup(request.to)
    if sink is None:
        raise TargetNotFoundError(request.to)

    try:
        await sink.write(f"{request.message}{LINE_SEPARATOR}".encode())
        await sink.flush()
    except StreamClosedError as ex:
        logger.warning(f"Delivery to {request.to} failed: {ex}")
        raise DeliveryError(request.to) from ex

    logger.debug(f"Delivered {len(request.message)} chars to {request.to}")
