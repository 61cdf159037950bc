"""Structured logging configuration.

This module initializes structlog loggers with a stable JSON format.
Verbosity is chosen once by the entry point instead of module globals.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_PROCESSORS = [
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.add_log_level,
    structlog.processors.JSONRenderer(),
]


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog output and minimum level.

    Args:
        verbose: Emit debug-level events when true.
    """
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Library callers that never run ``configure_logging`` get the default
    INFO-level JSON output on stderr.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
