"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for governed text generation.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..cache.base import CachePolicy


@dataclass(frozen=True, slots=True)
class RateWindowPolicy:
    """Sliding-window admission policy for one upstream target."""

    window_ms: int = 60_000
    max_requests: int = 10
    backoff_multiplier: float = 1.5


@dataclass(frozen=True, slots=True)
class CircuitBreakerPolicy:
    """Consecutive failure policy with a single half-open probe."""

    failure_threshold: int = 3
    reset_timeout_ms: int = 30_000
    half_open_max_calls: int = 1
    half_open_retry_ms: int = 1_000


@dataclass(frozen=True, slots=True)
class CoalescingPolicy:
    """In-flight request deduplication controls."""

    enabled: bool = True


@dataclass(frozen=True, slots=True)
class PacingPolicy:
    """Endpoint-wide minimum interval with multiplicative backoff."""

    min_interval_ms: int = 250
    max_interval_ms: int = 10_000
    backoff_multiplier: float = 2.0
    decay: float = 0.5


__all__ = [
    "CachePolicy",
    "CircuitBreakerPolicy",
    "CoalescingPolicy",
    "PacingPolicy",
    "RateWindowPolicy",
]
