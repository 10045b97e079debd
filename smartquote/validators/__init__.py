"""Validation of generator responses."""

from smartquote.validators.quote_validator import (
    ValidationResult,
    validate_quote_response,
    parse_quote_response,
)

__all__ = [
    "ValidationResult",
    "validate_quote_response",
    "parse_quote_response",
]
