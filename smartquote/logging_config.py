"""structlog setup for SmartQuote entry points."""

import logging
import sys

import structlog


def _stderr_logger_factory(*args):
    # sys.stderr is looked up per logger, not once at configure time
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with ISO timestamps and the console renderer.

    Output goes to stderr so stdout stays clean for the quote itself.
    Events below ``level`` are dropped.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
