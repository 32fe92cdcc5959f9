"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Call governor: cache, admission, upstream call, outcome recording.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ...utils import Clock, now_ms
from ..cache.base import ResponseCacheBackend
from ..cache.inmemory import InMemoryResponseCache
from ..fingerprint import fingerprint_request
from ..metrics import GovernorMetrics, NoOpGovernorMetrics
from ..providers.contracts import TextGenerator
from ..types import (
    ErrorKind,
    Freshness,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
)
from .classify import EMPTY_RESPONSE_MESSAGE, classify_upstream_error
from .coalescing import RequestCoalescer
from .contracts import CoalescingPolicy
from .rate_limit import SlidingWindowLimiter

logger = logging.getLogger("mailmind.llms.governor")

RATE_LIMIT_EXCEEDED_MESSAGE = "Rate limit exceeded. Please try again in a moment."


class CallGovernor:
    """Single "generate text for this request" entry point.

    Fresh cache hits return without touching admission. Stale hits return
    immediately and schedule a best-effort background refresh. Misses go
    through the limiter, the upstream call and the cache.

    One instance is built at process start and shared by every caller.
    """

    def __init__(
        self,
        *,
        generator: TextGenerator,
        limiter: SlidingWindowLimiter | None = None,
        cache: ResponseCacheBackend | None = None,
        coalescing_policy: CoalescingPolicy | None = None,
        metrics: GovernorMetrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._clock = clock or now_ms
        self._generator = generator
        self.limiter = limiter or SlidingWindowLimiter(
            clock=self._clock,
            target=getattr(generator, "provider_id", "default"),
        )
        self.cache = cache or InMemoryResponseCache(clock=self._clock)
        self._coalescing_policy = coalescing_policy or CoalescingPolicy()
        self._coalescer = RequestCoalescer()
        self._metrics: GovernorMetrics = metrics or NoOpGovernorMetrics()
        self._refreshes: dict[str, asyncio.Task[None]] = {}
        self.upstream_calls = 0

    @staticmethod
    def fingerprint(request: GenerationRequest) -> str:
        return fingerprint_request(request)

    @property
    def pending_refreshes(self) -> int:
        return len(self._refreshes)

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        fp = fingerprint_request(request)
        cached = self.cache.get(fp)
        if cached is not None:
            if cached.is_stale:
                self._metrics.incr("governor_cache_total", tags={"state": "stale"})
                self._schedule_refresh(fp, request)
                return GenerationResult(
                    text=cached.payload,
                    fingerprint=fp,
                    validator=cached.validator,
                    freshness=Freshness.STALE,
                    age_ms=cached.age_ms,
                )
            self._metrics.incr("governor_cache_total", tags={"state": "hit"})
            return GenerationResult(
                text=cached.payload,
                fingerprint=fp,
                validator=cached.validator,
                freshness=Freshness.HIT,
                age_ms=cached.age_ms,
            )

        self._metrics.incr("governor_cache_total", tags={"state": "miss"})
        if self._coalescing_policy.enabled:
            return await self._coalescer.run(fp, lambda: self._admit_and_call(fp, request))
        return await self._admit_and_call(fp, request)

    async def _admit_and_call(
        self,
        fp: str,
        request: GenerationRequest,
        *,
        background: bool = False,
    ) -> GenerationOutcome:
        decision = self.limiter.check_admission()
        if not decision.allowed:
            self._metrics.incr(
                "governor_admission_denied_total", tags={"reason": decision.reason}
            )
            return GenerationFailure(
                kind=ErrorKind.RATE_LIMITED,
                message=RATE_LIMIT_EXCEEDED_MESSAGE,
                retry_after_ms=decision.retry_after_ms,
            )

        self.upstream_calls += 1
        try:
            text = await self._generator.generate_content(request.prompt, request.config)
        except Exception as exc:
            window_retry_ms = self.limiter.next_available_delay_ms()
            self.limiter.record_attempt(False)
            failure = classify_upstream_error(exc, window_retry_ms=window_retry_ms)
            self._metrics.incr(
                "governor_upstream_calls_total", tags={"outcome": failure.kind.value}
            )
            if not background:
                logger.error(
                    "Upstream generation failed (variant=%s, status=%s): %s",
                    request.variant,
                    failure.status_code,
                    exc,
                )
            return failure
        except BaseException:
            # Cancelled mid-call: nothing is recorded, so free the probe slot.
            self.limiter.breaker.release_probe()
            raise

        if not text:
            self.limiter.record_attempt(False)
            self._metrics.incr("governor_upstream_calls_total", tags={"outcome": "empty"})
            return GenerationFailure(
                kind=ErrorKind.UPSTREAM_FAILURE,
                message=EMPTY_RESPONSE_MESSAGE,
            )

        self.limiter.record_attempt(True)
        validator = self.cache.put(fp, text)
        self._metrics.incr("governor_upstream_calls_total", tags={"outcome": "success"})
        return GenerationResult(
            text=text,
            fingerprint=fp,
            validator=validator,
            freshness=Freshness.MISS,
        )

    def _schedule_refresh(self, fp: str, request: GenerationRequest) -> None:
        if fp in self._refreshes or self._coalescer.in_flight(fp):
            return
        task = asyncio.ensure_future(self._refresh(fp, request))
        self._refreshes[fp] = task
        task.add_done_callback(lambda _: self._refreshes.pop(fp, None))

    async def _refresh(self, fp: str, request: GenerationRequest) -> None:
        try:
            if self._coalescing_policy.enabled:
                outcome = await self._coalescer.run(
                    fp, lambda: self._admit_and_call(fp, request, background=True)
                )
            else:
                outcome = await self._admit_and_call(fp, request, background=True)
        except Exception:  # noqa: BLE001
            self._metrics.incr("governor_background_refresh_total", tags={"outcome": "error"})
            logger.exception("Background refresh crashed (fingerprint=%s)", fp[:12])
            return

        if isinstance(outcome, GenerationResult):
            self._metrics.incr("governor_background_refresh_total", tags={"outcome": "success"})
            logger.debug("Background refresh stored new payload (fingerprint=%s)", fp[:12])
            return
        if outcome.kind is ErrorKind.RATE_LIMITED and outcome.status_code is None:
            self._metrics.incr("governor_background_refresh_total", tags={"outcome": "abandoned"})
            logger.debug("Background refresh abandoned: admission denied (fingerprint=%s)", fp[:12])
            return
        self._metrics.incr("governor_background_refresh_total", tags={"outcome": "failed"})
        logger.warning(
            "Background refresh failed (fingerprint=%s): %s", fp[:12], outcome.message
        )

    async def wait_for_refreshes(self) -> None:
        """Wait for scheduled background refreshes (tests and shutdown)."""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes.values()), return_exceptions=True)

    def snapshot(self) -> dict[str, Any]:
        stats = self.cache.stats
        return {
            **self.limiter.snapshot(),
            "upstream_calls": self.upstream_calls,
            "pending_refreshes": self.pending_refreshes,
            "cache": {
                "size": stats.size,
                "hits": stats.hits,
                "stale_hits": stats.stale_hits,
                "misses": stats.misses,
                "evictions": stats.evictions,
            },
        }
