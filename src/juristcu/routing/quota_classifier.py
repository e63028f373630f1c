"""
Quota classifier: maps a failed provider call to an ErrorKind.

Pure function of (provider, status code, message). Resolution order:

1. Status 401 / 403 (credential and permission errors)
2. Provider credential markers in the message (Gemini reports bad keys as 400)
3. Quota markers (billing, credit, exhausted resource; Claude's 402)
4. Rate markers (429, "rate limit")
5. Everything else is transient

Quota is checked before rate because providers often send quota exhaustion
with a 429 status.
"""

from typing import Optional

from juristcu.llm.exceptions import ProviderError, provider_error_for
from juristcu.models.enums import ErrorKind, ProviderId


_CREDENTIAL_MARKERS: dict[ProviderId, tuple[str, ...]] = {
    ProviderId.GEMINI: ("api_key_invalid", "api key not valid", "api key expired"),
    ProviderId.CLAUDE: ("authentication_error", "invalid x-api-key"),
    ProviderId.OPENAI: ("invalid_api_key", "incorrect api key"),
}

_PERMISSION_MARKERS: tuple[str, ...] = ("permission_denied", "permission_error")

_QUOTA_MARKERS: dict[ProviderId, tuple[str, ...]] = {
    ProviderId.GEMINI: ("resource_exhausted", "quota", "billing"),
    ProviderId.CLAUDE: ("credit", "billing", "quota"),
    ProviderId.OPENAI: ("insufficient_quota", "quota", "billing"),
}

_QUOTA_STATUS: dict[ProviderId, frozenset[int]] = {
    ProviderId.GEMINI: frozenset(),
    ProviderId.CLAUDE: frozenset({402}),
    ProviderId.OPENAI: frozenset(),
}

_RATE_MARKERS: tuple[str, ...] = ("rate_limit", "rate limit", "429")


def classify(provider: ProviderId, status_code: Optional[int], message: Optional[str]) -> ErrorKind:
    """
    Classify a provider failure.

    Args:
        provider: Provider that produced the failure
        status_code: HTTP status, None for timeouts/network errors
        message: Provider error text (matched case-insensitively)

    Returns:
        The ErrorKind for the failure
    """
    text = (message or "").lower()

    if status_code == 401:
        return ErrorKind.INVALID_CREDENTIAL
    if status_code == 403:
        return ErrorKind.PERMISSION_DENIED

    if _contains_any(text, _CREDENTIAL_MARKERS[provider]):
        return ErrorKind.INVALID_CREDENTIAL
    if _contains_any(text, _PERMISSION_MARKERS):
        return ErrorKind.PERMISSION_DENIED

    if status_code in _QUOTA_STATUS[provider] or _contains_any(text, _QUOTA_MARKERS[provider]):
        return ErrorKind.QUOTA_EXHAUSTED

    if status_code == 429 or _contains_any(text, _RATE_MARKERS):
        return ErrorKind.RATE_LIMITED

    return ErrorKind.TRANSIENT_ERROR


def classify_error(provider: ProviderId, status_code: Optional[int], message: Optional[str]) -> ProviderError:
    """Classify and wrap the failure in its typed ProviderError."""
    kind = classify(provider, status_code, message)
    return provider_error_for(kind, provider, message or "", status_code)


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)
