"""Pytest configuration and shared fixtures for SmartQuote tests."""

import base64
import json
import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from typing import Dict, Any


# ============================================================================
# Ensure the repository root is importable without an install
# ============================================================================
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture
def test_settings():
    """Settings with a fake credential and default branding."""
    from smartquote.config.settings import Settings

    return Settings(
        llm_model="gpt-4o",
        llm_temperature=0.4,
        company_name="Smart Bytes",
        quote_language="Spanish",
        breakdown_tolerance=1.0,
        strict_breakdown=False,
        log_level="INFO",
        openai_api_key="test-api-key",
    )


@pytest.fixture
def mock_settings(test_settings):
    """Patch the settings singleton used by the services."""
    with patch("smartquote.services.llm_service.settings", test_settings), \
         patch("smartquote.services.quote_service.settings", test_settings), \
         patch("smartquote.services.prompt_builder.settings", test_settings), \
         patch("smartquote.services.presentation.settings", test_settings), \
         patch("smartquote.cli.settings", test_settings):
        yield test_settings


# ============================================================================
# Input Fixtures
# ============================================================================

@pytest.fixture
def sample_project_input():
    """Form input with the form's default numbers, as text."""
    from smartquote.models.project_input import ProjectInput

    return ProjectInput(
        project_name="Shoe Store",
        project_type="E-commerce / Tienda",
        description="Catalog, cart and card checkout for a shoe retailer",
        team_size="2",
        hourly_rate="35",
        hours_per_day="6",
        estimated_weeks="8",
        server_cost="50",
        target_cost="",
    )


@pytest.fixture
def flow_json_content() -> Dict[str, Any]:
    """A small flow diagram exported as JSON."""
    return {
        "nodes": [
            {"id": "login", "label": "Login"},
            {"id": "cart", "label": "Cart"},
            {"id": "checkout", "label": "Checkout"},
        ],
        "edges": [["login", "cart"], ["cart", "checkout"]],
    }


@pytest.fixture
def png_file():
    """An uploaded PNG (1x1 pixel)."""
    from smartquote.models.uploaded_file import UploadedFile

    pixel = base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )
    return UploadedFile.from_bytes("wireframe.png", pixel, "image/png")


@pytest.fixture
def json_file(flow_json_content):
    """An uploaded JSON flow file."""
    from smartquote.models.uploaded_file import UploadedFile

    content = json.dumps(flow_json_content).encode("utf-8")
    return UploadedFile.from_bytes("flow.json", content, "application/json")


# ============================================================================
# Quote Fixtures
# ============================================================================

@pytest.fixture
def sample_quote_data() -> Dict[str, Any]:
    """A conforming generator response (wire names)."""
    return {
        "projectTitle": "Shoe Store E-commerce Platform",
        "executiveSummary": "Online store with catalog, cart and checkout.",
        "totalEstimatedCost": 18480,
        "mvpCost": 11000,
        "infrastructureCriticalCost": 150,
        "breakdown": [
            {"category": "Backend Development", "cost": 7000, "description": "API, orders, payments"},
            {"category": "Frontend", "cost": 6000, "description": "Catalog and checkout UI"},
            {"category": "UX/UI", "cost": 2480, "description": "Wireframes and visual design"},
            {"category": "DevOps", "cost": 3000, "description": "CI/CD and hosting setup"},
        ],
        "marketComparison": {
            "lowEstimate": 6000,
            "highEstimate": 15000,
            "averageDays": 63,
            "marketTrend": "Fixed-price e-commerce builds are trending toward headless stacks.",
        },
        "technicalRecommendations": [
            "Use a managed payment provider",
            "Serve images from a CDN",
        ],
        "clientEmailDraft": "Dear client,\n\nPlease find attached our quote.\n\nBest regards,\nSmart Bytes",
    }


@pytest.fixture
def sample_quote(sample_quote_data):
    """Parsed QuoteResponse."""
    from smartquote.models.quote import QuoteResponse

    return QuoteResponse.model_validate(sample_quote_data)


@pytest.fixture
def stub_generator(sample_quote):
    """Generator coroutine returning a fixed quote."""
    return AsyncMock(return_value=sample_quote)


@pytest.fixture
def failing_generator():
    """Generator coroutine simulating a network failure."""
    from smartquote.config.errors import GeneratorError

    return AsyncMock(side_effect=GeneratorError("LLM generation failed: Connection error."))


# ============================================================================
# LLM Mocks
# ============================================================================

@pytest.fixture
def mock_chat_openai(sample_quote_data):
    """Mock ChatOpenAI client answering with a conforming quote."""
    mock = MagicMock()
    mock.ainvoke = AsyncMock(return_value=MagicMock(
        content=json.dumps(sample_quote_data),
        response_metadata={"token_usage": {"total_tokens": 1200}}
    ))
    return mock


@pytest.fixture
def mock_llm_service(mock_chat_openai):
    """LLMService wired to the mocked client."""
    from smartquote.services.llm_service import LLMService

    with patch("smartquote.services.llm_service.ChatOpenAI", return_value=mock_chat_openai):
        service = LLMService(model="gpt-4o", temperature=0.4, api_key="test-api-key")
        service._client = mock_chat_openai
        return service
