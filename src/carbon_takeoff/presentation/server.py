"""Carbon Takeoff API server.

Serves the FastAPI application with uvicorn.
"""
from __future__ import annotations

import uvicorn

from carbon_takeoff.presentation.api.app import create_app
from carbon_takeoff.shared.config import get_settings
from carbon_takeoff.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    """Entry point for the API server."""
    settings = get_settings()
    setup_logging()
    logger.info(
        "Starting Carbon Takeoff API",
        version=settings.app_version,
        environment=settings.environment,
        host=settings.api_host,
        port=settings.api_port,
    )
    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
