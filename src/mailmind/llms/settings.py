"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Governor settings and explicit config loading.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from .errors import ConfigurationError
from .runtime.contracts import (
    CachePolicy,
    CircuitBreakerPolicy,
    CoalescingPolicy,
    PacingPolicy,
    RateWindowPolicy,
)
from .types import GenerationConfig

T = TypeVar("T")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _read(env: Mapping[str, str], name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} has an invalid value: {raw!r}") from exc


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(raw)


@dataclass(frozen=True, slots=True)
class GovernorSettings:
    """Explicit settings for the upstream model and its governor."""

    api_key: str | None = None
    model: str = "gemini/gemini-1.5-pro"
    request_timeout_s: float | None = None

    window_ms: int = 60_000
    max_requests: int = 10
    failure_threshold: int = 3
    reset_timeout_ms: int = 30_000
    backoff_multiplier: float = 1.5

    fresh_ms: int = 3_600_000
    stale_ms: int = 86_400_000

    pacing_min_interval_ms: int = 250
    pacing_max_interval_ms: int = 10_000
    pacing_backoff_multiplier: float = 2.0
    pacing_decay: float = 0.5

    coalesce_in_flight: bool = True

    temperature: float = 0.5
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2048

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "GovernorSettings":
        """Load settings from environment variables.

        Raises `ConfigurationError` when the credential is missing or any
        value does not parse, so the process never starts half-configured.
        """
        env = os.environ if env is None else env
        api_key = (env.get("GEMINI_API_KEY") or "").strip()
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set")

        timeout = _read(env, "MAILMIND_REQUEST_TIMEOUT_S", None, float)
        settings = GovernorSettings(
            api_key=api_key,
            model=_read(env, "MAILMIND_MODEL", "gemini/gemini-1.5-pro", str),
            request_timeout_s=timeout,
            window_ms=_read(env, "MAILMIND_RATE_WINDOW_MS", 60_000, int),
            max_requests=_read(env, "MAILMIND_RATE_MAX_REQUESTS", 10, int),
            failure_threshold=_read(env, "MAILMIND_BREAKER_FAILURE_THRESHOLD", 3, int),
            reset_timeout_ms=_read(env, "MAILMIND_BREAKER_RESET_TIMEOUT_MS", 30_000, int),
            backoff_multiplier=_read(env, "MAILMIND_BACKOFF_MULTIPLIER", 1.5, float),
            fresh_ms=_read(env, "MAILMIND_CACHE_FRESH_MS", 3_600_000, int),
            stale_ms=_read(env, "MAILMIND_CACHE_STALE_MS", 86_400_000, int),
            pacing_min_interval_ms=_read(env, "MAILMIND_PACING_MIN_INTERVAL_MS", 250, int),
            pacing_max_interval_ms=_read(env, "MAILMIND_PACING_MAX_INTERVAL_MS", 10_000, int),
            pacing_backoff_multiplier=_read(env, "MAILMIND_PACING_BACKOFF_MULTIPLIER", 2.0, float),
            pacing_decay=_read(env, "MAILMIND_PACING_DECAY", 0.5, float),
            coalesce_in_flight=_read(env, "MAILMIND_COALESCE_IN_FLIGHT", True, _parse_bool),
            temperature=_read(env, "MAILMIND_TEMPERATURE", 0.5, float),
            top_k=_read(env, "MAILMIND_TOP_K", 40, int),
            top_p=_read(env, "MAILMIND_TOP_P", 0.95, float),
            max_output_tokens=_read(env, "MAILMIND_MAX_OUTPUT_TOKENS", 2048, int),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.window_ms <= 0 or self.max_requests <= 0:
            raise ConfigurationError("Rate window and max requests must be positive")
        if self.failure_threshold <= 0:
            raise ConfigurationError("Breaker failure threshold must be positive")
        if self.stale_ms < self.fresh_ms:
            raise ConfigurationError(
                "MAILMIND_CACHE_STALE_MS must be >= MAILMIND_CACHE_FRESH_MS"
            )
        if self.pacing_max_interval_ms < self.pacing_min_interval_ms:
            raise ConfigurationError("Pacing max interval must be >= min interval")

    def rate_window_policy(self) -> RateWindowPolicy:
        return RateWindowPolicy(
            window_ms=self.window_ms,
            max_requests=self.max_requests,
            backoff_multiplier=self.backoff_multiplier,
        )

    def circuit_breaker_policy(self) -> CircuitBreakerPolicy:
        return CircuitBreakerPolicy(
            failure_threshold=self.failure_threshold,
            reset_timeout_ms=self.reset_timeout_ms,
        )

    def cache_policy(self) -> CachePolicy:
        return CachePolicy(fresh_ms=self.fresh_ms, stale_ms=self.stale_ms)

    def pacing_policy(self) -> PacingPolicy:
        return PacingPolicy(
            min_interval_ms=self.pacing_min_interval_ms,
            max_interval_ms=self.pacing_max_interval_ms,
            backoff_multiplier=self.pacing_backoff_multiplier,
            decay=self.pacing_decay,
        )

    def coalescing_policy(self) -> CoalescingPolicy:
        return CoalescingPolicy(enabled=self.coalesce_in_flight)

    def generation_defaults(self) -> GenerationConfig:
        return GenerationConfig(
            temperature=self.temperature,
            top_k=self.top_k,
            top_p=self.top_p,
            max_output_tokens=self.max_output_tokens,
        )
