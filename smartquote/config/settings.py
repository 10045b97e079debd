"""SmartQuote configuration settings.

Loads configuration from environment variables with sensible defaults.
The generator credential comes from OPENAI_API_KEY (environment or .env).
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

from smartquote.config.errors import ConfigurationError

# Load .env file for local configuration (API key, model, company branding)
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # LLM Configuration
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"))
    llm_temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.4")))

    # Quote branding
    company_name: str = field(default_factory=lambda: os.getenv("COMPANY_NAME", "Smart Bytes"))
    quote_language: str = field(default_factory=lambda: os.getenv("QUOTE_LANGUAGE", "Spanish"))

    # Response checks
    breakdown_tolerance: float = field(default_factory=lambda: float(os.getenv("BREAKDOWN_TOLERANCE", "1.0")))
    strict_breakdown: bool = field(default_factory=lambda: _env_bool("STRICT_BREAKDOWN"))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    openai_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY") or None,
        repr=False,
    )

    def validate(self) -> None:
        """Validate required settings are present.

        Raises:
            ConfigurationError: If the generator credential is missing.
        """
        if not self.openai_api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is required to request a quote",
                setting="OPENAI_API_KEY",
            )


# Singleton settings instance
settings = Settings()
