"""Structured logging setup."""

import logging
from typing import Any, Dict, Optional

import structlog


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """
    Configure structlog.

    Args:
        level: Minimum log level name (DEBUG, INFO, ...)
        log_format: "console" for human-readable output, "json" for parsing
    """
    if log_format == "json":
        # JSON output for parsing and storage
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console output for human readability
        renderer = structlog.dev.ConsoleRenderer()

    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            [structlog.processors.CallsiteParameter.FILENAME]
        ),
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging_from_config(config: Optional[Dict[str, Any]]) -> None:
    """Configure logging from the ``logging`` section of loaded settings."""
    section = (config or {}).get("logging") or {}
    configure_logging(
        level=section.get("level", "INFO"),
        log_format=section.get("format", "console"),
    )
