"""
FastAPI application with assembled routers.

Builds the component container on startup, starts the enrichment worker,
and tears both down on shutdown.

Dependencies: fastapi, uvicorn, linkdrop.api.routers, linkdrop.api.deps
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkdrop import __version__
from linkdrop.api.deps.dependencies import AppContainer, build_container
from linkdrop.boundary.db.connection import create_tables
from linkdrop.configs import Settings, get_settings
from linkdrop.observability import configure_logging
from linkdrop.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import health_router, links_router

logger = logging.getLogger(__name__)


async def start_container(container: AppContainer) -> None:
    """Create tables and start background workers."""
    await create_tables(container.engine)
    container.worker.start()


async def stop_container(container: AppContainer) -> None:
    """Stop background workers and release database connections."""
    await container.worker.stop()
    await container.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Settings override, defaults to get_settings()

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Handles startup and shutdown events.
        """
        configure_logging(settings.log_level)

        # Startup
        container = build_container(settings)
        await start_container(container)
        app.state.container = container
        logger.info("Application started", extra={"environment": settings.environment})

        yield

        # Shutdown
        await stop_container(container)
        logger.info("Application stopped")

    app = FastAPI(
        title="Linkdrop API",
        description="Link catalogue with short codes and background metadata enrichment",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(links_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "linkdrop.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
