from pydantic import BaseModel


class DispatchRequest(BaseModel):
    """Body of a POST /events request."""

    message: str
    to: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    connections: int
