"""QuoteResponse parsing and validation.

The generator is asked to follow a declared JSON shape, but its output is
checked here before anything downstream uses it. Non-conforming responses
are rejected.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
import structlog

from smartquote.config.errors import InvalidResponseError
from smartquote.models.quote import QuoteResponse

logger = structlog.get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of QuoteResponse validation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    parsed: Optional[QuoteResponse] = None
    breakdown_mismatch: Optional[float] = None


def _format_errors(error: PydanticValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


def validate_quote_response(data: Any, tolerance: float = 1.0) -> ValidationResult:
    """Validate raw generator output against the QuoteResponse schema.

    Args:
        data: Parsed JSON from the generator
        tolerance: Allowed difference between breakdown sum and total

    Returns:
        ValidationResult with is_valid, errors, parsed object and any
        breakdown/total mismatch
    """
    if not isinstance(data, dict):
        return ValidationResult(
            is_valid=False,
            errors=[f"quote response must be an object, got {type(data).__name__}"],
        )

    try:
        parsed = QuoteResponse.model_validate(data)
    except PydanticValidationError as e:
        return ValidationResult(is_valid=False, errors=_format_errors(e))

    return ValidationResult(
        is_valid=True,
        parsed=parsed,
        breakdown_mismatch=parsed.breakdown_mismatch(tolerance),
    )


def parse_quote_response(
    data: Any,
    tolerance: float = 1.0,
    strict_breakdown: bool = False,
) -> QuoteResponse:
    """Parse generator output into a typed QuoteResponse.

    A breakdown that does not add up to the total is logged; with
    ``strict_breakdown`` it is rejected instead.

    Raises:
        InvalidResponseError: If the response does not conform.
    """
    result = validate_quote_response(data, tolerance)

    if not result.is_valid:
        logger.warning(
            "quote_response_rejected",
            errors=result.errors[:10],
            keys=list(data.keys()) if isinstance(data, dict) else None,
        )
        raise InvalidResponseError(
            "Generator response does not match the quote schema",
            errors=result.errors,
        )

    if result.breakdown_mismatch is not None:
        logger.warning(
            "breakdown_total_mismatch",
            total=result.parsed.total_estimated_cost,
            breakdown_total=result.parsed.breakdown_total(),
            difference=result.breakdown_mismatch,
        )
        if strict_breakdown:
            raise InvalidResponseError(
                "Breakdown items do not add up to the total cost",
                errors=[f"breakdown differs from total by {result.breakdown_mismatch:,.2f}"],
            )

    return result.parsed
