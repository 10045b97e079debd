"""SmartQuote error handling.

Custom exceptions and error codes for quote requests.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Form validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"

    # File ingestion
    FILE_DECODE_ERROR = "FILE_DECODE_ERROR"

    # Generator (LLM) errors
    LLM_ERROR = "LLM_ERROR"
    LLM_AUTH_ERROR = "LLM_AUTH_ERROR"
    LLM_RATE_LIMIT = "LLM_RATE_LIMIT"
    LLM_CONTEXT_TOO_LONG = "LLM_CONTEXT_TOO_LONG"
    LLM_EMPTY_RESPONSE = "LLM_EMPTY_RESPONSE"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Environment
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Document export
    EXPORT_UNAVAILABLE = "EXPORT_UNAVAILABLE"
    EXPORT_FAILED = "EXPORT_FAILED"

    # Session
    SESSION_BUSY = "SESSION_BUSY"


class QuoteError(Exception):
    """Base exception for SmartQuote errors.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for display or JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(QuoteError):
    """Input rejected at the form boundary."""

    def __init__(
        self,
        message: str,
        fields: Optional[list] = None,
        code: str = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "fields": fields} if fields else details
        )
        self.fields = fields or []


class FileDecodeError(QuoteError):
    """An uploaded file's content could not be decoded."""

    def __init__(self, message: str, file_name: str, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.FILE_DECODE_ERROR,
            message=message,
            details={**(details or {}), "file_name": file_name}
        )
        self.file_name = file_name


class GeneratorError(QuoteError):
    """The external quote generator call failed."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.LLM_ERROR,
        details: Optional[Dict] = None
    ):
        super().__init__(code=code, message=message, details=details)


class InvalidResponseError(GeneratorError):
    """The generator answered, but not with the declared quote shape."""

    def __init__(self, message: str, errors: Optional[list] = None, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_RESPONSE,
            details={**(details or {}), "errors": errors or []}
        )
        self.errors = errors or []


class ConfigurationError(QuoteError):
    """A required setting (the generator credential) is missing."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            details={"setting": setting} if setting else None
        )


class ExportError(QuoteError):
    """Document export is unavailable or failed."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.EXPORT_FAILED,
        details: Optional[Dict] = None
    ):
        super().__init__(code=code, message=message, details=details)


class SessionBusyError(QuoteError):
    """A submission is already in flight."""

    def __init__(self, message: str = "A quote request is already in progress"):
        super().__init__(code=ErrorCode.SESSION_BUSY, message=message)
