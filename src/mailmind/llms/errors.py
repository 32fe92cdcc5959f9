"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy shared by the governor, the endpoint policy and the server.
"""

from __future__ import annotations

from typing import Any


class MailmindError(Exception):
    """Base exception for all mailmind errors."""


class ConfigurationError(MailmindError):
    """Raised at startup when a required credential or setting is invalid."""


class RequestValidationError(MailmindError):
    """Raised when a request body is malformed at the endpoint boundary."""


class LLMError(MailmindError):
    """Base class for text-generation failures surfaced to callers."""


class RateLimitedError(LLMError):
    """Admission denied or breaker open; safe to retry after the hint."""

    def __init__(self, message: str, *, retry_after_ms: int) -> None:
        self.retry_after_ms = retry_after_ms
        super().__init__(message)


class UpstreamFailureError(LLMError):
    """The generation call failed for a reason other than rate limiting."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class UpstreamError(Exception):
    """Raw failure raised by a text-generation provider.

    Providers translate their SDK exceptions into this type; it never
    crosses the governor boundary.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retry_after_ms: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.retry_after_ms = retry_after_ms
        self.metadata = dict(metadata or {})
        super().__init__(message)
