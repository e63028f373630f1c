"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests:
settings, documents, credentials and a scanner factory over scripted clients
(see tests/helpers.py).
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from juristcu.config import Settings
from juristcu.llm.prompt_builder import PromptBuilder
from juristcu.models.domain import Document
from juristcu.routing.provider_router import ProviderCredentials
from juristcu.scanning.scanner import CorpusScanner
from juristcu.validation.pipeline import EvaluationParser
from tests.helpers import SMALL_TAXONOMY, make_document


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.QUALIFYING_THRESHOLD = 80.0
    """
    return Settings(
        # === Application ===
        APP_NAME="JurisTCU API",
        APP_VERSION="1.0.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Authentication ===
        API_KEY="tcu_test_key_123",

        # === Providers ===
        GEMINI_KEYS="gemini-key-1,gemini-key-2",
        ANTHROPIC_API_KEY="claude-key",
        OPENAI_API_KEY="openai-key",

        # === Document store ===
        SUPABASE_URL=None,
        SUPABASE_KEY=None,
        DOCUMENTS_FILE=None,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_rows(fixtures_dir: Path) -> list[dict]:
    """Raw acordaos rows (mixed processable / unprocessable)."""
    with open(fixtures_dir / "acordaos.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def documents() -> list[Document]:
    """Three processable documents, newest first."""
    return [make_document(i) for i in (1, 2, 3)]


@pytest.fixture
def call_log() -> list:
    return []


@pytest.fixture
def full_credentials() -> ProviderCredentials:
    return ProviderCredentials(
        gemini_keys=("gemini-key-1", "gemini-key-2"),
        claude_key="claude-key",
        openai_key="openai-key",
    )


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    return PromptBuilder()


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Awaitable no-op standing in for asyncio.sleep."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_scanner(prompt_builder, no_sleep):
    """Factory building a CorpusScanner over fake clients with no real delays."""

    def _make(
        clients: dict,
        credentials: ProviderCredentials,
        taxonomy=SMALL_TAXONOMY,
        **kwargs: Any,
    ) -> CorpusScanner:
        return CorpusScanner(
            clients=clients,
            credentials=credentials,
            prompt_builder=prompt_builder,
            parser=EvaluationParser(200),
            taxonomy=taxonomy,
            sleep=no_sleep,
            clock=lambda: 0.0,
            **kwargs,
        )

    return _make
