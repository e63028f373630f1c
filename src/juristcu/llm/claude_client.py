"""
Claude client (Anthropic Messages API).

POST /v1/messages with x-api-key and anthropic-version headers. Model is
chosen from a short version alias (e.g. "sonnet-4.5") through CLAUDE_MODEL_MAP.
"""

from typing import Any, Dict, Optional

import httpx

from juristcu.llm.base_client import BaseProviderClient
from juristcu.models.enums import ProviderId


ANTHROPIC_VERSION = "2023-06-01"

CLAUDE_MODEL_MAP = {
    "opus-4": "claude-opus-4-20250514",
    "opus-4.1": "claude-opus-4.1-20250514",
    "sonnet-4": "claude-sonnet-4-20250514",
    "sonnet-4.5": "claude-sonnet-4-5-20250929",
}
DEFAULT_CLAUDE_VERSION = "sonnet-4.5"


def resolve_claude_model(version: str) -> str:
    """Map a version alias to a model id; full model ids pass through."""
    if version in CLAUDE_MODEL_MAP:
        return CLAUDE_MODEL_MAP[version]
    if version.startswith("claude-"):
        return version
    return CLAUDE_MODEL_MAP[DEFAULT_CLAUDE_VERSION]


class ClaudeClient(BaseProviderClient):
    """
    Response:
    {
        "content": [{"type": "text", "text": "..."}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 512, "output_tokens": 64}
    }
    """

    provider = ProviderId.CLAUDE

    def __init__(
        self,
        base_url: str = "https://api.anthropic.com",
        model_version: str = DEFAULT_CLAUDE_VERSION,
        timeout: int = 60,
        system_prompt: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            model=resolve_claude_model(model_version),
            fallback_model=CLAUDE_MODEL_MAP[DEFAULT_CLAUDE_VERSION],
            timeout=timeout,
            system_prompt=system_prompt,
            transport=transport,
        )

    def _build_request(self, model, prompt, temperature, max_tokens, credential):
        payload: Dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            # Messages API rejects temperature > 1
            "temperature": min(temperature, 1.0),
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.system_prompt:
            payload["system"] = self.system_prompt

        headers = {
            "x-api-key": credential,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        return "/v1/messages", headers, payload

    def _extract_text(self, data: Dict[str, Any]) -> str:
        # No text block (refusal, empty turn) is an empty reply, not a failure
        blocks = [block for block in data["content"] if block.get("type") == "text"]
        return (blocks[0].get("text") or "") if blocks else ""
