"""
Enumerations for the JurisTCU data models.

All enums are closed sets - no values outside these are permitted.
"""

from enum import Enum


class ProviderId(str, Enum):
    """
    LLM providers, declared in fallback chain order.

    Gemini is the multi-key provider; Claude is credit-based; OpenAI is the
    last resort.
    """

    GEMINI = "gemini"
    CLAUDE = "claude"
    OPENAI = "openai"

    @classmethod
    def chain(cls) -> tuple["ProviderId", ...]:
        """Fixed fallback order: Gemini -> Claude -> OpenAI."""
        return (cls.GEMINI, cls.CLAUDE, cls.OPENAI)


class ErrorKind(str, Enum):
    """Classification of a provider-side failure."""

    RATE_LIMITED = "rate_limited"
    QUOTA_EXHAUSTED = "quota_exhausted"
    INVALID_CREDENTIAL = "invalid_credential"
    PERMISSION_DENIED = "permission_denied"
    TRANSIENT_ERROR = "transient_error"


class HaltReason(str, Enum):
    """Why a scan stopped before covering the whole corpus."""

    QUOTA_EXHAUSTED_ALL_PROVIDERS = "quota_exhausted_all_providers"
    NO_PROVIDERS_CONFIGURED = "no_providers_configured"


class ProviderStatus(str, Enum):
    """Per-provider state reported in scan statistics."""

    NOT_CONFIGURED = "not_configured"
    AVAILABLE = "available"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
