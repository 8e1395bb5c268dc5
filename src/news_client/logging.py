"""Logging configuration for news-client."""

import logging
from typing import Any

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for the application.

    Call once at application startup. Debug events are dropped unless
    ``verbose`` is set.

    Args:
        verbose: Whether to emit debug-level events.
    """
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(**context: Any) -> Any:
    """Get a configured logger, optionally bound to initial context."""
    log = structlog.get_logger()
    if context:
        return log.bind(**context)
    return log
