"""
FastAPI dependency injection for the JurisTCU API.

Provides singleton instances of expensive resources (provider clients,
prompt builder, scanner, document repository) and the API key check.
"""

import secrets
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from fastapi import Depends, Header

from juristcu.api.exceptions import AuthenticationError
from juristcu.config import Settings, settings
from juristcu.llm.base_client import BaseProviderClient
from juristcu.llm.claude_client import ClaudeClient
from juristcu.llm.gemini_client import GeminiClient
from juristcu.llm.openai_client import OpenAIClient
from juristcu.llm.prompt_builder import PromptBuilder
from juristcu.models.enums import ProviderId
from juristcu.persistence.repository import (
    DocumentRepository,
    InMemoryDocumentRepository,
    SupabaseDocumentRepository,
)
from juristcu.scanning.scanner import CorpusScanner

logger = structlog.get_logger(__name__)


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates once and reuses them across requests.
    """
    config = get_settings()
    return PromptBuilder(
        templates_dir=Path(config.PROMPT_TEMPLATES_DIR) if config.PROMPT_TEMPLATES_DIR else None,
        body_prefix_limit=config.BODY_PREFIX_LIMIT,
        justification_max_length=config.JUSTIFICATION_MAX_LENGTH,
    )


@lru_cache()
def get_provider_clients() -> dict[ProviderId, BaseProviderClient]:
    """
    Get one client per provider, sharing connection pools across requests.

    Clients are built even for unconfigured providers; the router never
    selects a provider without credentials.
    """
    config = get_settings()
    system_prompt = get_prompt_builder().build_system_prompt()
    return {
        ProviderId.GEMINI: GeminiClient(
            base_url=config.GEMINI_BASE_URL,
            model=config.GEMINI_MODEL,
            timeout=config.PROVIDER_TIMEOUT,
            system_prompt=system_prompt,
        ),
        ProviderId.CLAUDE: ClaudeClient(
            base_url=config.ANTHROPIC_BASE_URL,
            model_version=config.CLAUDE_MODEL_VERSION,
            timeout=config.PROVIDER_TIMEOUT,
            system_prompt=system_prompt,
        ),
        ProviderId.OPENAI: OpenAIClient(
            base_url=config.OPENAI_BASE_URL,
            model_version=config.OPENAI_MODEL_VERSION,
            timeout=config.PROVIDER_TIMEOUT,
            system_prompt=system_prompt,
        ),
    }


@lru_cache()
def get_scanner() -> CorpusScanner:
    """Get singleton scanner; each scan still builds its own provider router."""
    return CorpusScanner.from_settings(
        get_settings(),
        clients=get_provider_clients(),
        prompt_builder=get_prompt_builder(),
    )


@lru_cache()
def get_repository() -> DocumentRepository:
    """
    Get the document repository.

    Supabase when SUPABASE_URL/SUPABASE_KEY are set, otherwise the local
    DOCUMENTS_FILE, otherwise an empty in-memory corpus.
    """
    config = get_settings()
    if config.SUPABASE_URL and config.SUPABASE_KEY:
        return SupabaseDocumentRepository(
            url=config.SUPABASE_URL,
            key=config.SUPABASE_KEY,
            table=config.DOCUMENTS_TABLE,
            page_size=config.DOCUMENTS_PAGE_SIZE,
        )
    if config.DOCUMENTS_FILE:
        return InMemoryDocumentRepository.from_json_file(config.DOCUMENTS_FILE)

    logger.warning("No document store configured, serving an empty corpus")
    return InMemoryDocumentRepository()


def require_api_key(
    x_api_key: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Check the caller's API key (X-API-Key header or Authorization: Bearer).

    Raises:
        AuthenticationError: 401 when absent, 403 when wrong
    """
    api_key = x_api_key
    if not api_key and authorization:
        api_key = authorization.removeprefix("Bearer ").strip()

    if not api_key:
        raise AuthenticationError.missing()

    if not settings.API_KEY or not secrets.compare_digest(api_key.encode(), settings.API_KEY.encode()):
        logger.warning("Invalid API key attempt", api_key=api_key)
        raise AuthenticationError.invalid()

    return api_key
