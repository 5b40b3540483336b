"""Structured logging.

Every module logs through ``get_logger(__name__)`` with key/value events
(``logger.info("takeoff_completed", elements=42)``). Standard-library
records from httpx and uvicorn go through the same renderer.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")

_configured = False


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]


def configure_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
) -> None:
    """Route structlog and stdlib logging through one renderer.

    Idempotent: only the first call configures handlers.

    Args:
        level: Root log level name
        log_format: "json" for machine-readable lines, "console" for development
        log_file: Also write to this file when given
    """
    global _configured
    if _configured:
        return

    pre_chain = _pre_chain()
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=pre_chain
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def setup_logging() -> None:
    """Configure logging from the application settings."""
    from carbon_takeoff.shared.config import get_settings

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.log_file)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
