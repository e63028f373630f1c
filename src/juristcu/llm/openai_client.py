"""
OpenAI client (Chat Completions API).

POST /v1/chat/completions with Bearer auth. Model is chosen from a short
version alias (e.g. "4.1") through OPENAI_MODEL_MAP.
"""

from typing import Any, Dict, Optional

import httpx

from juristcu.llm.base_client import BaseProviderClient
from juristcu.models.enums import ProviderId


OPENAI_MODEL_MAP = {
    "3": "gpt-3.5-turbo",
    "3.5": "gpt-3.5-turbo",
    "4": "gpt-4o",
    "4o": "gpt-4o",
    "4.1": "gpt-4-turbo",
    "4.1-mini": "gpt-4-turbo",
    "5": "gpt-4o",
    "5-mini": "gpt-4o-mini",
}
DEFAULT_OPENAI_VERSION = "4.1"
DEFAULT_OPENAI_MODEL = "gpt-4o"


def resolve_openai_model(version: str) -> str:
    """Map a version alias to a model id; unknown aliases get gpt-4o."""
    return OPENAI_MODEL_MAP.get(version, DEFAULT_OPENAI_MODEL)


class OpenAIClient(BaseProviderClient):
    """
    Response:
    {
        "choices": [{"index": 0, "message": {"role": "assistant", "content": "..."}}],
        "usage": {"prompt_tokens": 512, "completion_tokens": 64}
    }
    """

    provider = ProviderId.OPENAI

    def __init__(
        self,
        base_url: str = "https://api.openai.com",
        model_version: str = DEFAULT_OPENAI_VERSION,
        timeout: int = 60,
        system_prompt: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            model=resolve_openai_model(model_version),
            fallback_model=DEFAULT_OPENAI_MODEL,
            timeout=timeout,
            system_prompt=system_prompt,
            transport=transport,
        )

    def _build_request(self, model, prompt, temperature, max_tokens, credential):
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }
        return "/v1/chat/completions", headers, payload

    def _extract_text(self, data: Dict[str, Any]) -> str:
        # Null content (content_filter, refusal) is an empty reply, not a failure
        choices = data["choices"]
        if not choices:
            return ""
        return choices[0]["message"].get("content") or ""
