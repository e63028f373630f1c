"""
Provider router: finite state machine over the fallback chain.

States:
    GeminiActive(key_index) -> ClaudeActive -> OpenAIActive -> AllExhausted

Transitions only move forward. Gemini failures rotate to the next key; once
the last key fails Gemini is exhausted. Claude and OpenAI have a single key
and are exhausted by their first failure, whatever its kind. A provider
without credentials is skipped. The router lives for exactly one scan.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from juristcu.models.enums import ErrorKind, HaltReason, ProviderId, ProviderStatus
from juristcu.monitoring.metrics import provider_failovers_total
from juristcu.routing.exceptions import AllProvidersExhausted


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys available for one scan."""

    gemini_keys: tuple[str, ...] = ()
    claude_key: Optional[str] = None
    openai_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "ProviderCredentials":
        return cls(
            gemini_keys=tuple(settings.gemini_keys),
            claude_key=settings.ANTHROPIC_API_KEY or None,
            openai_key=settings.OPENAI_API_KEY or None,
        )

    def is_configured(self, provider: ProviderId) -> bool:
        if provider is ProviderId.GEMINI:
            return bool(self.gemini_keys)
        if provider is ProviderId.CLAUDE:
            return bool(self.claude_key)
        return bool(self.openai_key)

    @property
    def any_configured(self) -> bool:
        return any(self.is_configured(p) for p in ProviderId.chain())


@dataclass
class ProviderState:
    """Mutable routing state; scan-scoped, never persisted."""

    active: Optional[ProviderId] = None
    gemini_key_index: int = 0
    exhausted: set[ProviderId] = field(default_factory=set)
    used: set[ProviderId] = field(default_factory=set)


class ProviderRouter:
    """
    Chooses which provider (and which key) serves the next call.

    Usage:
        router = ProviderRouter(credentials)
        provider = router.current()          # raises AllProvidersExhausted
        key = router.credential()
        ...
        router.report_failure(provider, kind)  # on failure
        router.record_success(provider)        # on success
    """

    def __init__(self, credentials: ProviderCredentials):
        self.credentials = credentials
        self.state = ProviderState(active=self._first_configured(ProviderId.chain()))

        logger.info(
            "Provider router initialized",
            active=self.state.active.value if self.state.active else None,
            gemini_keys=len(credentials.gemini_keys),
            claude=credentials.is_configured(ProviderId.CLAUDE),
            openai=credentials.is_configured(ProviderId.OPENAI),
        )

    def current(self) -> ProviderId:
        """
        Active provider.

        Raises:
            AllProvidersExhausted: no provider is left (or none was configured)
        """
        if self.state.active is None:
            reason = (
                HaltReason.QUOTA_EXHAUSTED_ALL_PROVIDERS
                if self.credentials.any_configured
                else HaltReason.NO_PROVIDERS_CONFIGURED
            )
            raise AllProvidersExhausted(reason)
        return self.state.active

    def credential(self) -> str:
        """API key for the active provider (Gemini: the current key index)."""
        provider = self.current()
        if provider is ProviderId.GEMINI:
            return self.credentials.gemini_keys[self.state.gemini_key_index]
        if provider is ProviderId.CLAUDE:
            return self.credentials.claude_key
        return self.credentials.openai_key

    @property
    def exhausted(self) -> bool:
        return self.state.active is None

    def report_failure(self, provider: ProviderId, kind: ErrorKind) -> None:
        """
        Advance the state machine after a failed call.

        A report for a provider other than the active one is stale and ignored.
        """
        if provider is not self.state.active:
            logger.warning(
                "Ignoring failure report for inactive provider",
                provider=provider.value,
                active=self.state.active.value if self.state.active else None,
                error_kind=kind.value,
            )
            return

        if provider is ProviderId.GEMINI:
            next_index = self.state.gemini_key_index + 1
            if next_index < len(self.credentials.gemini_keys):
                self.state.gemini_key_index = next_index
                provider_failovers_total.labels(
                    from_provider=provider.value, to_provider=provider.value
                ).inc()
                logger.warning(
                    "Gemini key failed, rotating to next key",
                    error_kind=kind.value,
                    key_index=next_index,
                    key_count=len(self.credentials.gemini_keys),
                )
                return

        self._exhaust(provider, kind)

    def record_success(self, provider: ProviderId) -> None:
        self.state.used.add(provider)

    def status(self) -> dict[str, ProviderStatus]:
        """Per-provider status snapshot."""
        snapshot = {}
        for provider in ProviderId.chain():
            if not self.credentials.is_configured(provider):
                snapshot[provider.value] = ProviderStatus.NOT_CONFIGURED
            elif provider in self.state.exhausted:
                snapshot[provider.value] = ProviderStatus.EXHAUSTED
            elif provider is self.state.active:
                snapshot[provider.value] = ProviderStatus.ACTIVE
            else:
                snapshot[provider.value] = ProviderStatus.AVAILABLE
        return snapshot

    def details(self) -> dict:
        """Status snapshot plus Gemini key position, for halt reports."""
        return {
            "provedores": {name: status.value for name, status in self.status().items()},
            "gemini_chave_atual": self.state.gemini_key_index + 1 if self.credentials.gemini_keys else 0,
            "gemini_total_chaves": len(self.credentials.gemini_keys),
            "provedores_utilizados": self.used_providers(),
        }

    def used_providers(self) -> list[str]:
        """Providers that answered at least once, in chain order."""
        return [p.value for p in ProviderId.chain() if p in self.state.used]

    def _exhaust(self, provider: ProviderId, kind: ErrorKind) -> None:
        self.state.exhausted.add(provider)
        chain = ProviderId.chain()
        following = chain[chain.index(provider) + 1:]
        self.state.active = self._first_configured(following)

        to_provider = self.state.active.value if self.state.active else "none"
        provider_failovers_total.labels(from_provider=provider.value, to_provider=to_provider).inc()
        logger.warning(
            "Provider exhausted, failing over",
            provider=provider.value,
            error_kind=kind.value,
            next_provider=to_provider,
        )

    def _first_configured(self, candidates) -> Optional[ProviderId]:
        for provider in candidates:
            if self.credentials.is_configured(provider):
                return provider
        return None
