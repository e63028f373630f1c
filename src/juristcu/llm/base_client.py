"""
Abstract base client for LLM providers.

Defines the single-completion interface every provider (Gemini, Claude,
OpenAI) implements, plus the shared httpx plumbing: pooled AsyncClient,
error translation into ProviderCallError, latency metrics. Provider
selection, failover and retries are NOT handled here - that is the
router's and evaluator's job. A client performs exactly one call per
`complete()` (one extra call only for the model-not-found fallback).
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from juristcu.llm.exceptions import ProviderCallError
from juristcu.models.enums import ProviderId
from juristcu.monitoring.metrics import llm_latency_seconds


logger = structlog.get_logger(__name__)

class BaseProviderClient(ABC):
    """
    Abstract base class for LLM provider clients.

    Responsibilities:
    - Send one completion request with the caller's credential
    - Extract the reply text from the provider envelope
    - Translate every failure into ProviderCallError (status code + message)

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Reply decoding (that's EvaluationParser's job)
    - Failover between providers (that's ProviderRouter's job)
    """

    provider: ProviderId

    def __init__(
        self,
        base_url: str,
        model: str,
        fallback_model: Optional[str] = None,
        timeout: int = 60,
        system_prompt: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base client.

        Args:
            base_url: Provider API root (e.g., https://api.openai.com)
            model: Model identifier sent with each request
            fallback_model: Model retried once when `model` is not available (404)
            timeout: Request timeout in seconds
            system_prompt: Instruction sent as system message (omitted when None)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.fallback_model = fallback_model
        self.timeout = timeout
        self.system_prompt = system_prompt
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized provider client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            model=model,
            timeout=timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                follow_redirects=True,
            )
            logger.debug("Created new httpx AsyncClient", provider=self.provider.value)
        return self._client

    @abstractmethod
    def _build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        credential: str,
    ) -> tuple[str, Dict[str, str], Dict[str, Any]]:
        """Return (path, headers, json payload) for one completion call."""

    @abstractmethod
    def _extract_text(self, data: Dict[str, Any]) -> str:
        """
        Pull the reply text out of the provider's response envelope.

        Returns "" for a well-formed reply that carries no text. A missing
        envelope key raises KeyError, IndexError or TypeError.
        """

    async def complete(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        credential: str,
    ) -> str:
        """
        Run one completion and return the stripped reply text.

        Raises:
            ProviderCallError: HTTP error, timeout, network error or a
                response envelope without text
        """
        try:
            return await self._complete_with(self.model, prompt, temperature, max_tokens, credential)
        except ProviderCallError as e:
            if e.status_code != 404 or not self.fallback_model or self.fallback_model == self.model:
                raise
            logger.warning(
                "Model not available, falling back",
                provider=self.provider.value,
                model=self.model,
                fallback_model=self.fallback_model,
            )
            return await self._complete_with(
                self.fallback_model, prompt, temperature, max_tokens, credential
            )

    async def _complete_with(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        credential: str,
    ) -> str:
        path, headers, payload = self._build_request(model, prompt, temperature, max_tokens, credential)
        start_time = time.time()

        logger.debug(
            "Sending completion request",
            provider=self.provider.value,
            model=model,
            prompt_length=len(prompt),
            temperature=temperature,
            max_tokens=max_tokens,
        )

        try:
            client = await self._get_client()
            response = await client.post(path, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            self._observe(start_time, success=False)
            raise ProviderCallError(
                self.provider,
                f"Request timeout after {self.timeout}s",
                details={"error_type": type(e).__name__},
            ) from e
        except httpx.HTTPStatusError as e:
            self._observe(start_time, success=False)
            status_code = e.response.status_code
            message = _error_message(e.response)
            logger.warning(
                "Provider HTTP error",
                provider=self.provider.value,
                model=model,
                status_code=status_code,
                error=message[:200],
            )
            raise ProviderCallError(self.provider, message, status_code=status_code) from e
        except httpx.HTTPError as e:
            self._observe(start_time, success=False)
            raise ProviderCallError(
                self.provider,
                f"Network error: {str(e)}",
                details={"error_type": type(e).__name__},
            ) from e
        except ValueError as e:
            # Body was not JSON
            self._observe(start_time, success=False)
            raise ProviderCallError(
                self.provider,
                "Invalid JSON response envelope",
                status_code=response.status_code,
                details={"parse_error": str(e)},
            ) from e

        try:
            text = self._extract_text(data)
        except (KeyError, IndexError, TypeError) as e:
            self._observe(start_time, success=False)
            raise ProviderCallError(
                self.provider,
                f"Unexpected response envelope: {type(e).__name__}",
                status_code=response.status_code,
            ) from e

        latency_ms = self._observe(start_time, success=True)
        logger.info(
            "Provider completion successful",
            provider=self.provider.value,
            model=model,
            latency_ms=latency_ms,
            reply_length=len(text),
        )
        return text.strip()

    def _observe(self, start_time: float, success: bool) -> int:
        latency = time.time() - start_time
        llm_latency_seconds.labels(
            provider=self.provider.value, success=str(success).lower()
        ).observe(latency)
        return int(latency * 1000)

    def health_check(self) -> Dict[str, Any]:
        """
        Describe the client configuration.

        Reports configuration only, no network probing.
        """
        return {
            "provider": self.provider.value,
            "model": self.model,
            "fallback_model": self.fallback_model,
            "base_url": self.base_url,
        }

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed provider client connection", provider=self.provider.value)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )


def _error_message(response: httpx.Response) -> str:
    """
    Best human-readable error text from an error response.

    All three providers wrap errors as {"error": {"message": ..., "type"/"status"/"code": ...}};
    type/status/code are appended because the quota classifier keys on them
    (e.g. "insufficient_quota", "RESOURCE_EXHAUSTED").
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        parts = [str(error.get("message", ""))]
        for key in ("type", "status", "code"):
            if error.get(key):
                parts.append(str(error[key]))
        for detail in error.get("details") or []:
            if isinstance(detail, dict) and detail.get("reason"):
                parts.append(str(detail["reason"]))
        return " | ".join(p for p in parts if p)
    if isinstance(error, str):
        return error
    return response.text
