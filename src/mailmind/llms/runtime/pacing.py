"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Endpoint-wide pacing guard that sheds load before the call governor.
"""

from __future__ import annotations

import logging

from ...utils import Clock, clamp_ms, now_ms
from ..types import AdmissionDecision
from .contracts import PacingPolicy

logger = logging.getLogger("mailmind.llms.pacing")


class EndpointPacer:
    """Single global minimum interval between endpoint invocations.

    The interval grows by `backoff_multiplier` on every rejection (capped at
    `max_interval_ms`) and shrinks by `decay` on every success (floored at
    `min_interval_ms`).
    """

    def __init__(self, policy: PacingPolicy | None = None, *, clock: Clock | None = None) -> None:
        self.policy = policy or PacingPolicy()
        self._clock = clock or now_ms
        self._interval_ms = float(self.policy.min_interval_ms)
        self._last_invocation_ms: float | None = None

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    def try_acquire(self) -> AdmissionDecision:
        now = self._clock()
        last = self._last_invocation_ms
        if last is not None and now - last < self._interval_ms:
            self._interval_ms = min(
                float(self.policy.max_interval_ms),
                self._interval_ms * self.policy.backoff_multiplier,
            )
            retry_after_ms = clamp_ms(last + self._interval_ms - now)
            logger.warning(
                "Endpoint pacing rejected invocation; interval now %.0f ms", self._interval_ms
            )
            return AdmissionDecision(allowed=False, retry_after_ms=retry_after_ms, reason="window")

        self._last_invocation_ms = now
        return AdmissionDecision(allowed=True)

    def record_success(self) -> None:
        self._interval_ms = max(
            float(self.policy.min_interval_ms),
            self._interval_ms * self.policy.decay,
        )
