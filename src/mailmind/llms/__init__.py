"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .cache import CacheStats, InMemoryResponseCache, ResponseCacheBackend
from .errors import (
    ConfigurationError,
    LLMError,
    MailmindError,
    RateLimitedError,
    RequestValidationError,
    UpstreamError,
    UpstreamFailureError,
)
from .factory import create_governor, create_text_generator
from .fingerprint import fingerprint, fingerprint_request, make_validator
from .metrics import GovernorMetrics, NoOpGovernorMetrics, PrometheusGovernorMetrics
from .providers import LiteLLMTextGenerator, TextGenerator
from .runtime import (
    CachePolicy,
    CallGovernor,
    CircuitBreaker,
    CircuitBreakerPolicy,
    CoalescingPolicy,
    EndpointPacer,
    PacingPolicy,
    RateWindowPolicy,
    SlidingWindowLimiter,
)
from .settings import GovernorSettings
from .types import (
    AdmissionDecision,
    CachedPayload,
    ErrorKind,
    Freshness,
    GenerationConfig,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
)

__all__ = [
    "AdmissionDecision",
    "CachePolicy",
    "CacheStats",
    "CachedPayload",
    "CallGovernor",
    "CircuitBreaker",
    "CircuitBreakerPolicy",
    "CoalescingPolicy",
    "ConfigurationError",
    "EndpointPacer",
    "ErrorKind",
    "Freshness",
    "GenerationConfig",
    "GenerationFailure",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationResult",
    "GovernorMetrics",
    "GovernorSettings",
    "InMemoryResponseCache",
    "LLMError",
    "LiteLLMTextGenerator",
    "MailmindError",
    "NoOpGovernorMetrics",
    "PacingPolicy",
    "PrometheusGovernorMetrics",
    "RateLimitedError",
    "RateWindowPolicy",
    "RequestValidationError",
    "ResponseCacheBackend",
    "SlidingWindowLimiter",
    "TextGenerator",
    "UpstreamError",
    "UpstreamFailureError",
    "create_governor",
    "create_text_generator",
    "fingerprint",
    "fingerprint_request",
    "make_validator",
]
