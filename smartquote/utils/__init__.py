"""Utility modules for SmartQuote."""

from smartquote.utils.quote_logger import (
    log_request_start,
    log_quote_failed,
    log_export_complete,
)

__all__ = [
    "log_request_start",
    "log_quote_failed",
    "log_export_complete",
]
