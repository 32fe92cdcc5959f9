"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/classify.py.
"""

from __future__ import annotations

from ..errors import RateLimitedError, UpstreamError, UpstreamFailureError
from ..types import ErrorKind, GenerationFailure

# Used when neither the window nor the upstream gives a usable hint.
DEFAULT_UPSTREAM_RETRY_MS = 60_000

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment before trying again."
INVALID_CREDENTIAL_MESSAGE = "Invalid API key. Please check your configuration."
GENERIC_FAILURE_MESSAGE = "Failed to generate text. Please try again later."
EMPTY_RESPONSE_MESSAGE = "The model returned an empty response."


def is_upstream_rate_limit(error: BaseException) -> bool:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    return status == 429 or isinstance(error, RateLimitedError)


def classify_upstream_error(
    error: Exception,
    *,
    window_retry_ms: int = 0,
) -> GenerationFailure:
    """Translate any exception from a generation call into a failure record.

    `window_retry_ms` is the limiter's failure-aware delay estimate taken
    before the failure was recorded.
    """
    status = getattr(error, "status_code", None)

    if is_upstream_rate_limit(error):
        hint = window_retry_ms
        if isinstance(error, (UpstreamError, RateLimitedError)) and error.retry_after_ms:
            hint = max(hint, error.retry_after_ms)
        return GenerationFailure(
            kind=ErrorKind.RATE_LIMITED,
            message=RATE_LIMITED_MESSAGE,
            retry_after_ms=hint or DEFAULT_UPSTREAM_RETRY_MS,
            status_code=429,
        )

    if "api key" in str(error).lower():
        return GenerationFailure(
            kind=ErrorKind.UPSTREAM_FAILURE,
            message=INVALID_CREDENTIAL_MESSAGE,
            status_code=status,
        )

    if isinstance(error, UpstreamFailureError) and str(error):
        return GenerationFailure(
            kind=ErrorKind.UPSTREAM_FAILURE,
            message=str(error),
            status_code=error.status_code,
        )

    return GenerationFailure(
        kind=ErrorKind.UPSTREAM_FAILURE,
        message=GENERIC_FAILURE_MESSAGE,
        status_code=status,
    )
