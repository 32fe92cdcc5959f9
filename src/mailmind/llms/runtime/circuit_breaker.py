"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/circuit_breaker.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ...utils import Clock, clamp_ms, now_ms
from .contracts import CircuitBreakerPolicy

logger = logging.getLogger("mailmind.llms.circuit_breaker")


class CircuitPhase(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(slots=True)
class CircuitState:
    """Mutable breaker state for one upstream target."""

    consecutive_failures: int = 0
    last_failure_at_ms: float | None = None
    is_open: bool = False
    half_open: bool = False
    half_open_calls: int = 0


@dataclass(frozen=True, slots=True)
class CircuitView:
    """Read-only evaluation of a breaker at one instant."""

    phase: CircuitPhase
    retry_after_ms: int = 0


def evaluate_circuit(
    state: CircuitState,
    policy: CircuitBreakerPolicy,
    now: float,
) -> CircuitView:
    """Derive the breaker phase from `(now, state)` without mutating anything."""
    if state.is_open:
        elapsed = now - (state.last_failure_at_ms or 0.0)
        if elapsed < policy.reset_timeout_ms:
            return CircuitView(
                phase=CircuitPhase.OPEN,
                retry_after_ms=clamp_ms(policy.reset_timeout_ms - elapsed),
            )
        return CircuitView(phase=CircuitPhase.HALF_OPEN)
    if state.half_open:
        return CircuitView(phase=CircuitPhase.HALF_OPEN)
    return CircuitView(phase=CircuitPhase.CLOSED)


class CircuitBreaker:
    """Failure-counting breaker with polling-on-access half-open transition.

    There is no timer: the cooldown is re-evaluated on every `check()`, and
    the first check after it elapses moves the breaker to half-open.
    """

    def __init__(
        self,
        policy: CircuitBreakerPolicy | None = None,
        *,
        clock: Clock | None = None,
        target: str = "default",
    ) -> None:
        self.policy = policy or CircuitBreakerPolicy()
        self.target = target
        self._clock = clock or now_ms
        self._state = CircuitState()

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._state.consecutive_failures

    @property
    def is_open(self) -> bool:
        return evaluate_circuit(self._state, self.policy, self._clock()).phase is CircuitPhase.OPEN

    @property
    def phase(self) -> CircuitPhase:
        return evaluate_circuit(self._state, self.policy, self._clock()).phase

    def check(self) -> CircuitView:
        """Evaluate the breaker, applying the open -> half-open transition.

        Returns an OPEN view when calls must fail fast. While half-open only
        `half_open_max_calls` probes are let through until one resolves.
        """
        state = self._state
        view = evaluate_circuit(state, self.policy, self._clock())
        if view.phase is CircuitPhase.OPEN:
            return view
        if view.phase is CircuitPhase.CLOSED:
            return view

        if state.is_open:
            state.is_open = False
            state.half_open = True
            state.half_open_calls = 0
            logger.info("Circuit for '%s' is half-open; allowing probe", self.target)

        if state.half_open_calls >= self.policy.half_open_max_calls:
            return CircuitView(
                phase=CircuitPhase.OPEN,
                retry_after_ms=self.policy.half_open_retry_ms,
            )
        state.half_open_calls += 1
        return view

    def record_success(self) -> None:
        state = self._state
        if state.half_open:
            state.consecutive_failures = 0
            state.half_open = False
            state.half_open_calls = 0
            state.is_open = False
            logger.info("Circuit for '%s' closed after successful probe", self.target)
            return

        state.consecutive_failures = max(0, state.consecutive_failures - 1)
        if state.consecutive_failures == 0 and state.is_open:
            state.is_open = False
            logger.info("Circuit for '%s' closed", self.target)

    def record_failure(self) -> None:
        state = self._state
        state.consecutive_failures += 1
        state.last_failure_at_ms = self._clock()
        if state.half_open or state.consecutive_failures >= self.policy.failure_threshold:
            if not state.is_open:
                logger.warning(
                    "Circuit for '%s' opened after %d consecutive failure(s)",
                    self.target,
                    state.consecutive_failures,
                )
            state.is_open = True
            state.half_open = False
            state.half_open_calls = 0

    def release_probe(self) -> None:
        """Give back a claimed half-open slot when no outcome will be recorded."""
        state = self._state
        if state.half_open and state.half_open_calls > 0:
            state.half_open_calls -= 1
