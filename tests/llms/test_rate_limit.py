from __future__ import annotations

from mailmind.llms.runtime import CircuitBreaker, RateWindowPolicy, SlidingWindowLimiter


def test_window_admits_max_requests_then_denies_until_oldest_expires(clock):
    limiter = SlidingWindowLimiter(RateWindowPolicy(window_ms=60_000, max_requests=10), clock=clock)

    for i in range(10):
        clock.now = i * 100
        assert limiter.check_admission().allowed is True
        limiter.record_attempt(True)

    clock.now = 950
    denied = limiter.check_admission()
    assert denied.allowed is False
    assert denied.reason == "window"
    assert denied.retry_after_ms == 59_050

    clock.now = 61_000
    assert limiter.check_admission().allowed is True


def test_window_reopens_exactly_after_window_length(clock):
    limiter = SlidingWindowLimiter(RateWindowPolicy(window_ms=1_000, max_requests=1), clock=clock)
    limiter.record_attempt(True)

    clock.now = 999
    assert limiter.check_admission().allowed is False

    clock.now = 1_000
    assert limiter.check_admission().allowed is True


def test_check_admission_does_not_consume_slots(clock):
    limiter = SlidingWindowLimiter(RateWindowPolicy(max_requests=1), clock=clock)

    for _ in range(5):
        assert limiter.check_admission().allowed is True
    assert limiter.in_window == 0


def test_failures_consume_window_slots(clock):
    limiter = SlidingWindowLimiter(RateWindowPolicy(max_requests=2), clock=clock)
    limiter.record_attempt(False)
    limiter.record_attempt(True)

    assert limiter.in_window == 2
    assert limiter.check_admission().allowed is False


def test_open_breaker_takes_precedence_over_window_capacity(clock):
    limiter = SlidingWindowLimiter(clock=clock)
    for t in (0, 10, 20):
        clock.now = t
        limiter.record_attempt(False)

    clock.now = 30
    decision = limiter.check_admission()
    assert decision.allowed is False
    assert decision.reason == "circuit"
    assert decision.retry_after_ms == 29_990
    assert limiter.in_window == 3

    clock.now = 20 + 30_000
    assert limiter.check_admission().allowed is True


def test_next_available_delay_applies_failure_backoff(clock):
    limiter = SlidingWindowLimiter(RateWindowPolicy(window_ms=60_000, max_requests=10), clock=clock)
    assert limiter.next_available_delay_ms() == 0

    for _ in range(8):
        limiter.record_attempt(True)
    limiter.record_attempt(False)
    limiter.record_attempt(False)

    assert limiter.breaker.consecutive_failures == 2
    assert limiter.next_available_delay_ms() == 135_000


def test_next_available_delay_is_zero_while_breaker_open(clock):
    limiter = SlidingWindowLimiter(clock=clock)
    for _ in range(3):
        limiter.record_attempt(False)

    assert limiter.next_available_delay_ms() == 0


def test_snapshot_reports_window_and_circuit(clock):
    limiter = SlidingWindowLimiter(clock=clock, target="gemini")
    limiter.record_attempt(True)

    snap = limiter.snapshot()
    assert snap["target"] == "gemini"
    assert snap["in_window"] == 1
    assert snap["circuit"] == "closed"


def test_full_window_during_half_open_returns_the_probe_slot(clock):
    breaker = CircuitBreaker(clock=clock)
    limiter = SlidingWindowLimiter(
        RateWindowPolicy(window_ms=60_000, max_requests=3),
        breaker=breaker,
        clock=clock,
    )
    for _ in range(3):
        limiter.record_attempt(False)
    assert breaker.is_open is True

    clock.now = 30_000
    denied = limiter.check_admission()
    assert denied.allowed is False
    assert denied.reason == "window"
    assert denied.retry_after_ms == 30_000
    assert breaker.state.half_open is True
    assert breaker.state.half_open_calls == 0

    clock.now = 60_000
    assert limiter.check_admission().allowed is True

    second = limiter.check_admission()
    assert second.allowed is False
    assert second.reason == "half_open"
    assert second.retry_after_ms == 1_000
