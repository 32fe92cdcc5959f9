"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Summarization endpoint policy on top of the call governor.

Adds three things the governor does not do on its own: an endpoint-wide
pacing guard, ETag-style validator exchange, and freshness metadata so
external callers can poll for a refreshed value after a STALE response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..llms.errors import RequestValidationError
from ..llms.metrics import GovernorMetrics, NoOpGovernorMetrics
from ..llms.runtime.governor import CallGovernor
from ..llms.runtime.pacing import EndpointPacer
from ..llms.types import ErrorKind, Freshness, GenerationFailure
from .prompts import SUMMARY_TYPES, build_summary_request

logger = logging.getLogger("mailmind.summarize")

PACING_MESSAGE = "Rate limit exceeded"


class SummaryStatus(str, Enum):
    OK = "ok"
    NOT_MODIFIED = "not_modified"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SummarizeInput:
    """Validated summarization request."""

    content: str
    type: str
    subject: str = ""
    email_id: str | None = None

    @staticmethod
    def parse(payload: Any) -> "SummarizeInput":
        """Validate a decoded JSON body; raises `RequestValidationError`."""
        if not isinstance(payload, dict):
            raise RequestValidationError("Request body must be a JSON object")
        content = payload.get("content")
        if not isinstance(content, str) or not content.strip():
            raise RequestValidationError("Missing required field: content")
        summary_type = payload.get("type")
        if summary_type not in SUMMARY_TYPES:
            raise RequestValidationError(
                f"Field 'type' must be one of {', '.join(SUMMARY_TYPES)}"
            )
        subject = payload.get("subject", "")
        if subject is None:
            subject = ""
        if not isinstance(subject, str):
            raise RequestValidationError("Field 'subject' must be a string")
        email_id = payload.get("emailId")
        if email_id is not None and not isinstance(email_id, str):
            raise RequestValidationError("Field 'emailId' must be a string")
        return SummarizeInput(
            content=content,
            type=summary_type,
            subject=subject,
            email_id=email_id,
        )


@dataclass(frozen=True, slots=True)
class SummaryOutcome:
    """Transport-agnostic endpoint result."""

    status: SummaryStatus
    type: str | None = None
    summary: str | None = None
    freshness: Freshness | None = None
    validator: str | None = None
    age_ms: int = 0
    retry_after_ms: int | None = None
    message: str | None = None


def parse_validators(header: str | None) -> set[str]:
    """Parse an `If-None-Match` style header into bare validator tokens."""
    if not header:
        return set()
    tokens: set[str] = set()
    for raw in header.split(","):
        token = raw.strip()
        if token.startswith("W/"):
            token = token[2:]
        token = token.strip('"')
        if token:
            tokens.add(token)
    return tokens


class SummarizationEndpoint:
    """Policy wrapper that turns summarize requests into `SummaryOutcome`s."""

    def __init__(
        self,
        governor: CallGovernor,
        *,
        pacer: EndpointPacer | None = None,
        metrics: GovernorMetrics | None = None,
    ) -> None:
        self.governor = governor
        self.pacer = pacer or EndpointPacer()
        self._metrics: GovernorMetrics = metrics or NoOpGovernorMetrics()

    async def summarize(
        self,
        request: SummarizeInput,
        *,
        if_none_match: str | None = None,
    ) -> SummaryOutcome:
        pacing = self.pacer.try_acquire()
        if not pacing.allowed:
            self._metrics.incr("endpoint_pacing_rejected_total")
            return SummaryOutcome(
                status=SummaryStatus.RATE_LIMITED,
                type=request.type,
                retry_after_ms=pacing.retry_after_ms,
                message=PACING_MESSAGE,
            )

        outcome = await self.governor.generate(
            build_summary_request(request.type, request.content, request.subject)
        )
        if isinstance(outcome, GenerationFailure):
            return self._failure(request, outcome)

        self.pacer.record_success()
        if outcome.validator in parse_validators(if_none_match):
            return SummaryOutcome(
                status=SummaryStatus.NOT_MODIFIED,
                type=request.type,
                freshness=outcome.freshness,
                validator=outcome.validator,
                age_ms=outcome.age_ms,
            )
        return SummaryOutcome(
            status=SummaryStatus.OK,
            type=request.type,
            summary=outcome.text,
            freshness=outcome.freshness,
            validator=outcome.validator,
            age_ms=outcome.age_ms,
        )

    def _failure(self, request: SummarizeInput, failure: GenerationFailure) -> SummaryOutcome:
        if failure.kind is ErrorKind.RATE_LIMITED:
            logger.warning(
                "Summary rate limited (type=%s, retry_after_ms=%s)",
                request.type,
                failure.retry_after_ms,
            )
            return SummaryOutcome(
                status=SummaryStatus.RATE_LIMITED,
                type=request.type,
                retry_after_ms=failure.retry_after_ms,
                message=failure.message,
            )
        logger.error(
            "Error generating summary (type=%s, email_id=%s): %s",
            request.type,
            request.email_id,
            failure.message,
        )
        return SummaryOutcome(
            status=SummaryStatus.FAILED,
            type=request.type,
            message=failure.message,
        )
