"""SmartQuote configuration.

This package contains:
- settings: Environment variables and configuration
- errors: Custom exceptions and error codes
"""

from smartquote.config.settings import settings, Settings
from smartquote.config.errors import QuoteError, ErrorCode

__all__ = [
    "settings",
    "Settings",
    "QuoteError",
    "ErrorCode",
]
