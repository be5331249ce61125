# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sse_relay.logging import logger
from sse_relay.managers.connection_registry import ConnectionRegistry
from sse_relay.middlewares.correlation_id import CorrelationIDMiddleware
from sse_relay.middlewares.logging_context import LoggingContextMiddleware
from sse_relay.routing import collect_subrouters
from sse_relay.settings import app_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Open streams are not closed explicitly on shutdown; the server cancels
    their sessions, and each session unregisters itself on the way out.
    """
    logger.info(f"SSE server started on port {app_settings.PORT}")

    yield

    remaining = len(app.state.registry)
    if remaining:
        logger.info(f"Shutting down with {remaining} open streams")
    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Creates a fresh ConnectionRegistry on `app.state.registry`, includes the
    routers collected from `sse_relay/api/http` and adds the middlewares:
    - `LoggingContextMiddleware`: request method and path in log context.
    - `CorrelationIDMiddleware`: request correlation IDs.

    Both are plain ASGI middlewares so event streams are never buffered.
    """
    app = FastAPI(
        title="SSE relay",
        description="Point-to-point message relay over server-sent events",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.registry = ConnectionRegistry()

    app.include_router(collect_subrouters())

    # Middlewares execute in REVERSE order of registration
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
