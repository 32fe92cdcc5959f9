"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI host exposing the governed summarization and drafting endpoints.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from starlette.requests import Request

from ..assist.drafting import ASSIST_ACTIONS, DraftingAssistant
from ..llms.errors import RequestValidationError
from ..llms.factory import create_governor
from ..llms.metrics import GovernorMetrics
from ..llms.providers.contracts import TextGenerator
from ..llms.runtime.governor import CallGovernor
from ..llms.runtime.pacing import EndpointPacer
from ..llms.settings import GovernorSettings
from ..llms.types import ErrorKind, GenerationFailure, GenerationOutcome
from ..summarize.service import (
    SummarizationEndpoint,
    SummarizeInput,
    SummaryOutcome,
    SummaryStatus,
)
from ..utils import Clock, ms_to_retry_after_s, now_ms

logger = logging.getLogger("mailmind.server")


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body:
        raise RequestValidationError("Request body is required")
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RequestValidationError("Request body must be valid JSON") from exc


def _bad_request(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


def _rate_limited(message: str, retry_after_ms: int | None) -> JSONResponse:
    retry_after_ms = retry_after_ms or 0
    retry_after_s = ms_to_retry_after_s(retry_after_ms)
    return JSONResponse(
        status_code=429,
        content={
            "error": message,
            "retryAfter": retry_after_s,
            "retryAfterMs": retry_after_ms,
        },
        headers={"Retry-After": str(retry_after_s)},
    )


class MailmindServiceHost:
    """Build one governor and expose it through FastAPI endpoints."""

    def __init__(
        self,
        *,
        settings: GovernorSettings,
        governor: CallGovernor | None = None,
        generator: TextGenerator | None = None,
        pacer: EndpointPacer | None = None,
        metrics: GovernorMetrics | None = None,
        clock: Clock | None = None,
        service_name: str = "mailmind",
    ) -> None:
        clock = clock or now_ms
        self.settings = settings
        self.governor = governor or create_governor(
            settings,
            generator=generator,
            metrics=metrics,
            clock=clock,
        )
        self.endpoint = SummarizationEndpoint(
            self.governor,
            pacer=pacer or EndpointPacer(settings.pacing_policy(), clock=clock),
            metrics=metrics,
        )
        self.assistant = DraftingAssistant(self.governor)
        self.service_name = service_name

    def _cache_headers(self, outcome: SummaryOutcome) -> dict[str, str]:
        headers: dict[str, str] = {}
        if outcome.validator:
            headers["ETag"] = f'"{outcome.validator}"'
        if outcome.freshness is not None:
            headers["X-Cache"] = outcome.freshness.value
        fresh_left_ms = max(0, self.settings.fresh_ms - outcome.age_ms)
        swr_ms = max(0, self.settings.stale_ms - self.settings.fresh_ms)
        headers["Cache-Control"] = (
            f"private, max-age={fresh_left_ms // 1000}, "
            f"stale-while-revalidate={swr_ms // 1000}"
        )
        return headers

    def summary_response(self, outcome: SummaryOutcome) -> Response:
        """Map an endpoint outcome onto an HTTP response."""
        if outcome.status is SummaryStatus.OK:
            return JSONResponse(
                status_code=200,
                content={"summary": outcome.summary, "type": outcome.type},
                headers=self._cache_headers(outcome),
            )
        if outcome.status is SummaryStatus.NOT_MODIFIED:
            return Response(status_code=304, headers=self._cache_headers(outcome))
        if outcome.status is SummaryStatus.RATE_LIMITED:
            return _rate_limited(outcome.message or "Rate limit exceeded", outcome.retry_after_ms)
        return JSONResponse(
            status_code=500,
            content={"error": outcome.message or "Failed to generate summary"},
        )

    @staticmethod
    def generation_response(outcome: GenerationOutcome) -> Response:
        if isinstance(outcome, GenerationFailure):
            if outcome.kind is ErrorKind.RATE_LIMITED:
                return _rate_limited(outcome.message, outcome.retry_after_ms)
            return JSONResponse(status_code=500, content={"error": outcome.message})
        return JSONResponse(
            status_code=200,
            content={"text": outcome.text},
            headers={"X-Cache": outcome.freshness.value},
        )

    def create_app(self) -> FastAPI:
        """Create and return FastAPI app exposing the AI endpoints."""
        app = FastAPI(title=self.service_name)

        @app.post("/api/ai/summarize")
        async def summarize(request: Request) -> Response:
            try:
                body = SummarizeInput.parse(await _read_json(request))
            except RequestValidationError as exc:
                return _bad_request(exc)
            outcome = await self.endpoint.summarize(
                body,
                if_none_match=request.headers.get("if-none-match"),
            )
            return self.summary_response(outcome)

        @app.post("/api/ai/assist/{action}")
        async def assist(action: str, request: Request) -> Response:
            if action not in ASSIST_ACTIONS:
                return JSONResponse(
                    status_code=404,
                    content={"error": f"Unknown assist action '{action}'"},
                )
            try:
                outcome = await self.assistant.run(action, await _read_json(request))
            except RequestValidationError as exc:
                return _bad_request(exc)
            return self.generation_response(outcome)

        @app.get("/healthz")
        async def healthz() -> dict[str, Any]:
            return {
                "status": "ok",
                "governor": self.governor.snapshot(),
                "pacing_interval_ms": self.endpoint.pacer.interval_ms,
            }

        logger.info(
            "Created %s app (model=%s, window=%d/%dms)",
            self.service_name,
            self.settings.model,
            self.settings.max_requests,
            self.settings.window_ms,
        )
        return app


def create_app(settings: GovernorSettings | None = None, **kwargs: Any) -> FastAPI:
    """App factory; loads settings from the environment when none are given.

    Raises `ConfigurationError` before any route exists if the credential
    is missing.
    """
    settings = settings or GovernorSettings.from_env()
    return MailmindServiceHost(settings=settings, **kwargs).create_app()
