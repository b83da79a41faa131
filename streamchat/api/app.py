"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamchat import __version__
from streamchat.api.chat import router as chat_router
from streamchat.models.schemas import HealthResponse
from streamchat.relay.config import get_cors_origins

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting StreamChat relay...")
    yield
    logger.info("Shutting down StreamChat relay...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="StreamChat Relay",
        description=(
            "Relays token-streamed chat completions from the model provider "
            "to browser clients without buffering. The provider credential "
            "stays on the server."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Report relay liveness for deployment checks."""
        return HealthResponse()

    return application


app = create_app()
