"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/rate_limit.py.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from ...utils import Clock, clamp_ms, now_ms
from ..types import AdmissionDecision
from .circuit_breaker import CircuitBreaker, CircuitPhase
from .contracts import RateWindowPolicy

logger = logging.getLogger("mailmind.llms.rate_limit")


class SlidingWindowLimiter:
    """Admission controller: a rolling request window gated by a breaker.

    Every recorded attempt, successful or not, consumes a slot. Recording
    is separate from checking so that callers record once the upstream
    call has resolved.
    """

    def __init__(
        self,
        policy: RateWindowPolicy | None = None,
        *,
        breaker: CircuitBreaker | None = None,
        clock: Clock | None = None,
        target: str = "default",
    ) -> None:
        self.policy = policy or RateWindowPolicy()
        self.target = target
        self._clock = clock or now_ms
        self.breaker = breaker or CircuitBreaker(clock=self._clock, target=target)
        self._requests: deque[float] = deque()

    def _prune(self, now: float) -> None:
        window_start = now - self.policy.window_ms
        while self._requests and self._requests[0] <= window_start:
            self._requests.popleft()

    @property
    def in_window(self) -> int:
        """Number of attempts counted in the current window."""
        self._prune(self._clock())
        return len(self._requests)

    def _window_wait_ms(self, now: float) -> int:
        if len(self._requests) < self.policy.max_requests:
            return 0
        return clamp_ms(self._requests[0] + self.policy.window_ms - now)

    def check_admission(self) -> AdmissionDecision:
        now = self._clock()
        self._prune(now)

        circuit = self.breaker.check()
        if circuit.phase is CircuitPhase.OPEN:
            reason = "half_open" if self.breaker.state.half_open else "circuit"
            logger.warning(
                "Admission denied for '%s': circuit %s (retry in %d ms)",
                self.target,
                reason,
                circuit.retry_after_ms,
            )
            return AdmissionDecision(
                allowed=False,
                retry_after_ms=circuit.retry_after_ms,
                reason=reason,
            )

        if len(self._requests) >= self.policy.max_requests:
            if circuit.phase is CircuitPhase.HALF_OPEN:
                # The probe slot was claimed above but no call will be made.
                self.breaker.release_probe()
            retry_after_ms = self._window_wait_ms(now)
            logger.warning(
                "Admission denied for '%s': %d/%d requests in window (retry in %d ms)",
                self.target,
                len(self._requests),
                self.policy.max_requests,
                retry_after_ms,
            )
            return AdmissionDecision(
                allowed=False,
                retry_after_ms=retry_after_ms,
                reason="window",
            )

        return AdmissionDecision(allowed=True)

    def record_attempt(self, success: bool) -> None:
        if success:
            self.breaker.record_success()
        else:
            self.breaker.record_failure()
        self._requests.append(self._clock())

    def next_available_delay_ms(self) -> int:
        """Failure-aware wait estimate for telemetry and retry hints.

        Returns 0 while the breaker is open; its own retry hint wins there.
        """
        if self.breaker.is_open:
            return 0
        now = self._clock()
        self._prune(now)
        base_wait = self._window_wait_ms(now)
        return clamp_ms(
            base_wait * self.policy.backoff_multiplier ** self.breaker.consecutive_failures
        )

    def snapshot(self) -> dict[str, Any]:
        now = self._clock()
        self._prune(now)
        return {
            "target": self.target,
            "in_window": len(self._requests),
            "max_requests": self.policy.max_requests,
            "window_ms": self.policy.window_ms,
            "circuit": self.breaker.phase.value,
            "consecutive_failures": self.breaker.consecutive_failures,
        }
