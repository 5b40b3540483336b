"""FastAPI Application.

REST API for quantity takeoffs, embodied carbon and design viewability.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carbon_takeoff import __version__
from carbon_takeoff.infrastructure.di.container import Container
from carbon_takeoff.presentation.api import routes
from carbon_takeoff.shared.config import get_settings
from carbon_takeoff.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan.

    Creates the container on startup unless one was injected, closes the
    HTTP client on shutdown.
    """
    setup_logging()
    created = getattr(app.state, "container", None) is None
    if created:
        app.state.container = Container()
    logger.info("api_started", version=__version__)

    yield

    if created:
        await app.state.container.aclose()


def create_app(container: Container | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        container: Optional pre-built container (tests inject fakes here)

    Returns:
        Configured FastAPI app
    """
    settings = container.settings if container is not None else get_settings()
    app = FastAPI(
        title="Carbon Takeoff API",
        description="Quantity takeoff and embodied carbon for BIM designs",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Dashboard dev server
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes.takeoffs.router, prefix="/api/v1", tags=["v1-takeoffs"])
    app.include_router(routes.carbon.router, prefix="/api/v1", tags=["v1-carbon"])
    app.include_router(routes.designs.router, prefix="/api/v1", tags=["v1-designs"])

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "service": "carbon-takeoff-api", "version": __version__}

    return app
