"""LLM service for SmartQuote.

Provides the LangChain/OpenAI client used as the external quote generator.
"""

import json
from typing import Dict, Any, Optional, List
import structlog
from langchain_openai import ChatOpenAI
from langchain_core.messages import BaseMessage

from smartquote.config.settings import settings
from smartquote.config.errors import GeneratorError, ErrorCode

logger = structlog.get_logger(__name__)


def _strip_code_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _content_text(content: Any) -> str:
    """Flatten message content (string or list of blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return ""


class LLMService:
    """Service for LLM operations using LangChain.

    Provides a wrapper around ChatOpenAI with token tracking
    and error handling.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None
    ):
        """Initialize LLMService.

        Args:
            model: Model name (default from settings).
            temperature: Temperature (default from settings).
            api_key: OpenAI API key (default from settings).
        """
        self.model = model or settings.llm_model
        self.temperature = temperature if temperature is not None else settings.llm_temperature
        self.api_key = api_key or settings.openai_api_key

        self._client: Optional[ChatOpenAI] = None
        self._total_tokens_used = 0

    @property
    def client(self) -> ChatOpenAI:
        """Get LangChain ChatOpenAI client (lazy initialization)."""
        if self._client is None:
            self._client = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                api_key=self.api_key
            )
        return self._client

    @property
    def total_tokens_used(self) -> int:
        """Get total tokens used across all calls."""
        return self._total_tokens_used

    async def generate(
        self,
        messages: List[BaseMessage],
        **kwargs: Any
    ) -> Dict[str, Any]:
        """Generate a response from the LLM.

        Args:
            messages: List of LangChain messages.
            **kwargs: Extra request parameters (e.g. response_format).

        Returns:
            Dict with content and token usage.

        Raises:
            GeneratorError: If the LLM call fails.
        """
        try:
            response = await self.client.ainvoke(messages, **kwargs)
        except Exception as e:
            error_msg = str(e)
            lowered = error_msg.lower()

            logger.error("llm_call_failed", model=self.model, error=error_msg[:500])

            if "rate_limit" in lowered or "rate limit" in lowered:
                raise GeneratorError(
                    "OpenAI rate limit exceeded",
                    code=ErrorCode.LLM_RATE_LIMIT,
                    details={"original_error": error_msg}
                ) from e
            if "context_length" in lowered or "maximum context" in lowered:
                raise GeneratorError(
                    "Input too long for model context",
                    code=ErrorCode.LLM_CONTEXT_TOO_LONG,
                    details={"original_error": error_msg}
                ) from e
            if "api key" in lowered or "authentication" in lowered or "401" in lowered:
                raise GeneratorError(
                    "OpenAI rejected the API key",
                    code=ErrorCode.LLM_AUTH_ERROR,
                    details={"original_error": error_msg}
                ) from e
            raise GeneratorError(
                f"LLM generation failed: {error_msg}",
                details={"original_error": error_msg}
            ) from e

        tokens_used = 0
        metadata = getattr(response, "response_metadata", None) or {}
        usage = metadata.get("token_usage") or {}
        tokens_used = usage.get("total_tokens", 0) or 0
        self._total_tokens_used += tokens_used

        content = _content_text(response.content)

        logger.info(
            "llm_generated",
            model=self.model,
            tokens_used=tokens_used,
            content_length=len(content)
        )

        return {
            "content": content,
            "tokens_used": tokens_used
        }

    async def generate_json(
        self,
        messages: List[BaseMessage],
        schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response"
    ) -> Dict[str, Any]:
        """Generate a JSON response.

        When a schema is given it is declared to the model as the response
        format; otherwise plain JSON mode is requested.

        Args:
            messages: List of LangChain messages.
            schema: Optional JSON schema for the response.
            schema_name: Name to declare the schema under.

        Returns:
            Dict with parsed JSON content and token usage.

        Raises:
            GeneratorError: If the response is empty or not valid JSON.
        """
        if schema is not None:
            response_format = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            }
        else:
            response_format = {"type": "json_object"}

        result = await self.generate(messages, response_format=response_format)

        content = _strip_code_fences(result["content"])
        if not content:
            raise GeneratorError(
                "No response generated",
                code=ErrorCode.LLM_EMPTY_RESPONSE
            )

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise GeneratorError(
                "LLM did not return valid JSON",
                details={
                    "parse_error": str(e),
                    "raw_content": result["content"][:500]
                }
            ) from e

        return {
            "content": parsed,
            "tokens_used": result["tokens_used"]
        }
