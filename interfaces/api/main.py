"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient

from infrastructure.config import settings
from infrastructure.logging import setup_logging
from interfaces.api.routes.aggregation_routes import router as aggregation_router
from interfaces.api.routes.blob_routes import router as blob_router
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info("app_starting", env=settings.app_env, mongo_db=settings.mongo_db)
    logger.info("app_ready")

    yield

    logger.info("app_shutting_down")
    # Only close the client if the container was built during this process
    if get_container.cache_info().currsize:
        get_container()[AsyncIOMotorClient].close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="GridFS blob storage and parameterized aggregation API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(blob_router)
    app.include_router(aggregation_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create app instance
app = create_app()
