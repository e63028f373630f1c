"""
LLM client abstraction and implementations.

Components:
- BaseProviderClient: Abstract base class for provider clients
- GeminiClient, ClaudeClient, OpenAIClient: REST implementations over httpx
- PromptBuilder: Renders criterion prompts from Jinja2 templates
- text_utils: Text clipping helpers
- exceptions: Provider call errors and classified provider errors
"""

from juristcu.llm.base_client import BaseProviderClient
from juristcu.llm.claude_client import ClaudeClient
from juristcu.llm.exceptions import (
    LLMClientError,
    ProviderCallError,
    ProviderError,
    ProviderInvalidCredential,
    ProviderPermissionDenied,
    ProviderQuotaExhausted,
    ProviderRateLimited,
    ProviderTransientError,
    provider_error_for,
)
from juristcu.llm.gemini_client import GeminiClient
from juristcu.llm.openai_client import OpenAIClient
from juristcu.llm.prompt_builder import PromptBuilder

__all__ = [
    "BaseProviderClient",
    "GeminiClient",
    "ClaudeClient",
    "OpenAIClient",
    "PromptBuilder",
    "LLMClientError",
    "ProviderCallError",
    "ProviderError",
    "ProviderRateLimited",
    "ProviderQuotaExhausted",
    "ProviderInvalidCredential",
    "ProviderPermissionDenied",
    "ProviderTransientError",
    "provider_error_for",
]
