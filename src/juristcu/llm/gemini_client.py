"""
Gemini client (Google Generative Language REST API).

POST /v1beta/models/{model}:generateContent, key in the x-goog-api-key header.
Gemini is the multi-key provider: the router hands a different key per call
after a failure, so the key travels with each request instead of living on
the client.
"""

from typing import Any, Dict, Optional

import httpx

from juristcu.llm.base_client import BaseProviderClient
from juristcu.models.enums import ProviderId


DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"


class GeminiClient(BaseProviderClient):
    """
    Response:
    {
        "candidates": [
            {"content": {"parts": [{"text": "..."}], "role": "model"}, "finishReason": "STOP"}
        ],
        "usageMetadata": {...}
    }
    """

    provider = ProviderId.GEMINI

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com",
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: int = 60,
        system_prompt: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            model=model,
            fallback_model=DEFAULT_GEMINI_MODEL,
            timeout=timeout,
            system_prompt=system_prompt,
            transport=transport,
        )

    def _build_request(self, model, prompt, temperature, max_tokens, credential):
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if self.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": self.system_prompt}]}

        headers = {"x-goog-api-key": credential, "Content-Type": "application/json"}
        return f"/v1beta/models/{model}:generateContent", headers, payload

    def _extract_text(self, data: Dict[str, Any]) -> str:
        # A blocked candidate (finishReason SAFETY) has no content
        parts = data["candidates"][0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts)
