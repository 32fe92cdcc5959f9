"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Gemini text generation through LiteLLM.
"""

from __future__ import annotations

from typing import Any

import litellm

from ..errors import UpstreamError
from ..types import GenerationConfig
from .contracts import TextGenerator


def _retry_after_ms(error: Exception) -> int | None:
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(float(value) * 1000)
    except (TypeError, ValueError):
        return None


class LiteLLMTextGenerator(TextGenerator):
    """Concrete generator using `litellm.acompletion` with a single user turn."""

    provider_id = "litellm"

    def __init__(
        self,
        *,
        model: str,
        api_key: str | None = None,
        defaults: GenerationConfig | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._defaults = defaults or GenerationConfig()
        self._timeout_s = timeout_s

    def build_payload(self, prompt: str, config: GenerationConfig) -> dict[str, Any]:
        """Merge request config over defaults without mutating either."""
        merged = config.merged_over(self._defaults)
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if merged.temperature is not None:
            payload["temperature"] = merged.temperature
        if merged.top_p is not None:
            payload["top_p"] = merged.top_p
        if merged.top_k is not None:
            payload["top_k"] = merged.top_k
        if merged.max_output_tokens is not None:
            payload["max_tokens"] = merged.max_output_tokens
        if self._api_key:
            payload["api_key"] = self._api_key
        if self._timeout_s is not None:
            payload["timeout"] = self._timeout_s
        return payload

    async def generate_content(self, prompt: str, config: GenerationConfig) -> str:
        payload = self.build_payload(prompt, config)
        try:
            response = await litellm.acompletion(**payload)
        except Exception as exc:
            raise UpstreamError(
                str(exc),
                status_code=getattr(exc, "status_code", None),
                retry_after_ms=_retry_after_ms(exc),
                metadata={"provider": getattr(exc, "llm_provider", None)},
            ) from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""
