"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .circuit_breaker import CircuitBreaker, CircuitPhase, CircuitState, evaluate_circuit
from .classify import classify_upstream_error
from .coalescing import RequestCoalescer
from .contracts import (
    CachePolicy,
    CircuitBreakerPolicy,
    CoalescingPolicy,
    PacingPolicy,
    RateWindowPolicy,
)
from .governor import CallGovernor
from .pacing import EndpointPacer
from .rate_limit import SlidingWindowLimiter

__all__ = [
    "CallGovernor",
    "CircuitBreaker",
    "CircuitPhase",
    "CircuitState",
    "evaluate_circuit",
    "classify_upstream_error",
    "RequestCoalescer",
    "EndpointPacer",
    "SlidingWindowLimiter",
    "RateWindowPolicy",
    "CircuitBreakerPolicy",
    "CachePolicy",
    "CoalescingPolicy",
    "PacingPolicy",
]
