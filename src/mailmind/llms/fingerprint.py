"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic cache keys and payload validators.
"""

from __future__ import annotations

import hashlib
import json

from .types import GenerationConfig, GenerationRequest


def fingerprint(content: str, variant: str, config: GenerationConfig) -> str:
    """Build a stable SHA-256 key from the semantic request inputs."""
    payload = {
        "content": content,
        "variant": variant,
        "config": config.as_dict(),
    }
    normalized = json.dumps(payload, ensure_ascii=True, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def fingerprint_request(request: GenerationRequest) -> str:
    return fingerprint(request.prompt, request.variant, request.config)


def make_validator(payload: str) -> str:
    """Opaque validator for one payload; equal payloads share a validator."""
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]
