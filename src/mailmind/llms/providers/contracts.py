"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/contracts.py.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..types import GenerationConfig


@runtime_checkable
class TextGenerator(Protocol):
    """Upstream text-generation collaborator.

    Implementations raise `UpstreamError` carrying an HTTP-like status code
    (429 for rate limiting) and return the generated text on success.
    """

    provider_id: str

    async def generate_content(self, prompt: str, config: GenerationConfig) -> str: ...
