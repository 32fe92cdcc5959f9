"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: factory.py.
"""

from __future__ import annotations

from ..utils import Clock, now_ms
from .cache.inmemory import InMemoryResponseCache
from .metrics import GovernorMetrics
from .providers.contracts import TextGenerator
from .providers.litellm import LiteLLMTextGenerator
from .runtime.circuit_breaker import CircuitBreaker
from .runtime.governor import CallGovernor
from .runtime.rate_limit import SlidingWindowLimiter
from .settings import GovernorSettings


def create_text_generator(settings: GovernorSettings) -> TextGenerator:
    """Build the default LiteLLM-backed generator from settings."""
    return LiteLLMTextGenerator(
        model=settings.model,
        api_key=settings.api_key,
        defaults=settings.generation_defaults(),
        timeout_s=settings.request_timeout_s,
    )


def create_governor(
    settings: GovernorSettings,
    *,
    generator: TextGenerator | None = None,
    metrics: GovernorMetrics | None = None,
    clock: Clock | None = None,
) -> CallGovernor:
    """Wire one governor with its own breaker, window and cache instances."""
    clock = clock or now_ms
    generator = generator or create_text_generator(settings)
    target = getattr(generator, "provider_id", "default")
    breaker = CircuitBreaker(
        settings.circuit_breaker_policy(),
        clock=clock,
        target=target,
    )
    limiter = SlidingWindowLimiter(
        settings.rate_window_policy(),
        breaker=breaker,
        clock=clock,
        target=target,
    )
    return CallGovernor(
        generator=generator,
        limiter=limiter,
        cache=InMemoryResponseCache(settings.cache_policy(), clock=clock),
        coalescing_policy=settings.coalescing_policy(),
        metrics=metrics,
        clock=clock,
    )
