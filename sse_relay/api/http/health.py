"""Health check endpoint for monitoring service status."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from sse_relay.dependencies import get_registry
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.schemas import HealthResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(
    registry: Annotated[ConnectionRegistry, Depends(get_registry)],
) -> HealthResponse:
    """
    Liveness probe.

    Returns:
        HealthResponse: Always healthy while the process serves requests,
        with the number of currently registered streams.
    """
    return HealthResponse(status="healthy", connections=len(registry))
