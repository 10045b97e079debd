"""Pydantic models for SmartQuote."""

from smartquote.models.project_input import ProjectInput, ProjectType
from smartquote.models.uploaded_file import UploadedFile
from smartquote.models.quote import (
    QuoteBreakdownItem,
    MarketComparison,
    QuoteResponse,
    response_schema,
)

__all__ = [
    "ProjectInput",
    "ProjectType",
    "UploadedFile",
    "QuoteBreakdownItem",
    "MarketComparison",
    "QuoteResponse",
    "response_schema",
]
