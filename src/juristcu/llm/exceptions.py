"""
Custom exceptions for the LLM provider layer.

Transport clients raise `ProviderCallError` for every failed completion,
carrying the HTTP status code (when there is one) and the provider's error
message. The evaluator feeds both to the quota classifier and then wraps
the outcome in one of the typed `ProviderError` subclasses for logging and
metrics before the router decides to rotate or escalate.
"""

from typing import Optional

from juristcu.models.enums import ErrorKind, ProviderId


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProviderCallError(LLMClientError):
    """
    Raised by a transport client when a single completion call fails.

    Covers HTTP errors (status_code set), timeouts and network errors
    (status_code None) and unusable response envelopes.
    """
    def __init__(
        self,
        provider: ProviderId,
        message: str,
        status_code: Optional[int] = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        status = self.status_code if self.status_code is not None else "n/a"
        return f"{self.provider.value} call failed (status {status}): {self.message}"


class ProviderError(LLMClientError):
    """
    A provider failure after classification.

    Subclasses mirror `ErrorKind`; build them with `provider_error_for`.
    """
    kind: ErrorKind = ErrorKind.TRANSIENT_ERROR

    def __init__(self, provider: ProviderId, message: str, status_code: Optional[int] = None):
        super().__init__(message, {"provider": provider.value, "status_code": status_code})
        self.provider = provider
        self.status_code = status_code


class ProviderRateLimited(ProviderError):
    """Provider throttled the request (too many requests per window)."""
    kind = ErrorKind.RATE_LIMITED


class ProviderQuotaExhausted(ProviderError):
    """Billing quota or prepaid credit is used up."""
    kind = ErrorKind.QUOTA_EXHAUSTED


class ProviderInvalidCredential(ProviderError):
    """API key rejected."""
    kind = ErrorKind.INVALID_CREDENTIAL


class ProviderPermissionDenied(ProviderError):
    """Key is valid but not allowed to use the model or endpoint."""
    kind = ErrorKind.PERMISSION_DENIED


class ProviderTransientError(ProviderError):
    """Anything the classifier could not pin down (5xx, network, overload)."""
    kind = ErrorKind.TRANSIENT_ERROR


_ERRORS_BY_KIND: dict[ErrorKind, type[ProviderError]] = {
    ErrorKind.RATE_LIMITED: ProviderRateLimited,
    ErrorKind.QUOTA_EXHAUSTED: ProviderQuotaExhausted,
    ErrorKind.INVALID_CREDENTIAL: ProviderInvalidCredential,
    ErrorKind.PERMISSION_DENIED: ProviderPermissionDenied,
    ErrorKind.TRANSIENT_ERROR: ProviderTransientError,
}


def provider_error_for(
    kind: ErrorKind,
    provider: ProviderId,
    message: str,
    status_code: Optional[int] = None,
) -> ProviderError:
    """Build the typed exception matching a classification."""
    return _ERRORS_BY_KIND[kind](provider, message, status_code)
