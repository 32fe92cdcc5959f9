"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Tagged records passed between the fingerprinter, cache, limiter and governor.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Literal, TypeAlias

from .errors import RateLimitedError, UpstreamFailureError


class ErrorKind(str, Enum):
    """Failure categories returned by `CallGovernor.generate`."""

    RATE_LIMITED = "rate_limited"
    UPSTREAM_FAILURE = "upstream_failure"


class Freshness(str, Enum):
    """How a result was served, surfaced as the `X-Cache` header."""

    HIT = "HIT"
    STALE = "STALE"
    MISS = "MISS"


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Sampling parameters forwarded to the upstream model.

    `None` means "use the provider default".
    """

    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None
    max_output_tokens: int | None = None

    def merged_over(self, defaults: GenerationConfig) -> GenerationConfig:
        """Return a copy where unset fields fall back to `defaults`."""
        return replace(
            defaults,
            **{
                name: value
                for name, value in self.as_dict().items()
                if value is not None
            },
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "top_k": self.top_k,
            "top_p": self.top_p,
            "max_output_tokens": self.max_output_tokens,
        }


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """One cacheable text-generation request."""

    prompt: str
    variant: str = "text"
    config: GenerationConfig = field(default_factory=GenerationConfig)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Successful outcome of `CallGovernor.generate`."""

    text: str
    fingerprint: str
    validator: str
    freshness: Freshness = Freshness.MISS
    age_ms: int = 0


@dataclass(frozen=True, slots=True)
class GenerationFailure:
    """Classified failure; raw upstream exceptions never escape the governor."""

    kind: ErrorKind
    message: str
    retry_after_ms: int | None = None
    status_code: int | None = None

    def to_exception(self) -> RateLimitedError | UpstreamFailureError:
        """Convert into the matching exception for callers that prefer raising."""
        if self.kind is ErrorKind.RATE_LIMITED:
            return RateLimitedError(self.message, retry_after_ms=self.retry_after_ms or 0)
        return UpstreamFailureError(self.message, status_code=self.status_code)


GenerationOutcome: TypeAlias = GenerationResult | GenerationFailure

DenialReason = Literal["ok", "window", "circuit", "half_open"]


@dataclass(frozen=True, slots=True)
class AdmissionDecision:
    """Result of one admission check."""

    allowed: bool
    retry_after_ms: int = 0
    reason: DenialReason = "ok"


@dataclass(frozen=True, slots=True)
class CachedPayload:
    """Cache lookup result for a live (fresh or stale) entry."""

    payload: str
    is_stale: bool
    validator: str
    age_ms: int = 0
