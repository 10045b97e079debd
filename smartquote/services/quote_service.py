"""Quote generation service.

One submission: validate the input, build the request, call the generator
and check the response at the boundary.
"""

import time
from typing import Optional, Sequence

import structlog

from smartquote.config.settings import settings, Settings
from smartquote.models.project_input import ProjectInput
from smartquote.models.quote import QuoteResponse, response_schema
from smartquote.models.uploaded_file import UploadedFile
from smartquote.services.llm_service import LLMService
from smartquote.services.prompt_builder import build_messages
from smartquote.validators.quote_validator import parse_quote_response

logger = structlog.get_logger(__name__)


async def generate_quote(
    project: ProjectInput,
    files: Sequence[UploadedFile] = (),
    llm: Optional[LLMService] = None,
    config: Optional[Settings] = None,
) -> QuoteResponse:
    """Request a quote for ``project`` from the external generator.

    Args:
        project: Form input (numeric fields may still be text).
        files: Attached reference files.
        llm: Generator client; a default LLMService is created when omitted.
        config: Settings override.

    Returns:
        The validated QuoteResponse.

    Raises:
        ValidationError: If the form input is incomplete or out of range.
        ConfigurationError: If no generator credential is configured.
        GeneratorError: If the call fails or the response does not conform.
    """
    config = config or settings
    coerced = project.coerced()

    if llm is None:
        config.validate()
        llm = LLMService(
            model=config.llm_model,
            temperature=config.llm_temperature,
            api_key=config.openai_api_key,
        )
    elif not llm.api_key:
        config.validate()

    messages = build_messages(
        coerced,
        files,
        company_name=config.company_name,
        language=config.quote_language,
    )

    start_time = time.perf_counter()
    logger.info(
        "quote_requested",
        project_name=coerced.project_name,
        project_type=coerced.project_type,
        files=len(files),
        has_target_cost=coerced.has_target_cost,
    )

    result = await llm.generate_json(
        messages,
        schema=response_schema(),
        schema_name="quote_response",
    )

    quote = parse_quote_response(
        result["content"],
        tolerance=config.breakdown_tolerance,
        strict_breakdown=config.strict_breakdown,
    )

    if coerced.has_target_cost and quote.total_estimated_cost != coerced.target_cost_value:
        logger.warning(
            "target_cost_not_honored",
            target_cost=coerced.target_cost_value,
            total=quote.total_estimated_cost,
        )

    logger.info(
        "quote_generated",
        project_title=quote.project_title,
        total=quote.total_estimated_cost,
        items=len(quote.breakdown),
        tokens_used=result["tokens_used"],
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return quote
