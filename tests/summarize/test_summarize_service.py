from __future__ import annotations

import asyncio

import pytest

from mailmind.llms import (
    CallGovernor,
    CircuitBreaker,
    EndpointPacer,
    Freshness,
    InMemoryResponseCache,
    PacingPolicy,
    RateWindowPolicy,
    RequestValidationError,
    SlidingWindowLimiter,
    UpstreamFailureError,
)
from mailmind.summarize import (
    SummarizationEndpoint,
    SummarizeInput,
    SummaryStatus,
    parse_validators,
)
from mailmind.summarize.service import PACING_MESSAGE


def run_async(coro):
    return asyncio.run(coro)


def make_endpoint(generator, clock, *, min_interval_ms: int = 0, max_requests: int = 10):
    limiter = SlidingWindowLimiter(
        RateWindowPolicy(max_requests=max_requests),
        breaker=CircuitBreaker(clock=clock),
        clock=clock,
    )
    governor = CallGovernor(
        generator=generator,
        limiter=limiter,
        cache=InMemoryResponseCache(clock=clock),
        clock=clock,
    )
    pacer = EndpointPacer(PacingPolicy(min_interval_ms=min_interval_ms), clock=clock)
    return SummarizationEndpoint(governor, pacer=pacer)


def body(summary_type: str = "brief", content: str = "Lunch at noon?") -> SummarizeInput:
    return SummarizeInput(content=content, type=summary_type, subject="Lunch")


def test_first_request_is_a_miss(clock, generator):
    endpoint = make_endpoint(generator, clock)

    outcome = run_async(endpoint.summarize(body()))

    assert outcome.status is SummaryStatus.OK
    assert outcome.summary == "text-1"
    assert outcome.type == "brief"
    assert outcome.freshness is Freshness.MISS
    assert outcome.validator
    prompt, config = generator.calls[0]
    assert "Subject: Lunch" in prompt
    assert "Lunch at noon?" in prompt
    assert config.temperature == 0.3
    assert config.max_output_tokens == 150


def test_repeat_request_is_served_from_cache(clock, generator):
    endpoint = make_endpoint(generator, clock)

    first = run_async(endpoint.summarize(body()))
    second = run_async(endpoint.summarize(body()))

    assert second.freshness is Freshness.HIT
    assert second.summary == first.summary
    assert len(generator.calls) == 1


def test_matching_validator_returns_not_modified(clock, generator):
    endpoint = make_endpoint(generator, clock)

    first = run_async(endpoint.summarize(body()))
    again = run_async(endpoint.summarize(body(), if_none_match=f'"{first.validator}"'))

    assert again.status is SummaryStatus.NOT_MODIFIED
    assert again.summary is None
    assert again.validator == first.validator


def test_mismatched_validator_returns_body(clock, generator):
    endpoint = make_endpoint(generator, clock)
    run_async(endpoint.summarize(body()))

    again = run_async(endpoint.summarize(body(), if_none_match='"something-else"'))

    assert again.status is SummaryStatus.OK
    assert again.summary == "text-1"


def test_types_are_cached_separately(clock, generator):
    endpoint = make_endpoint(generator, clock)

    brief = run_async(endpoint.summarize(body("brief")))
    detailed = run_async(endpoint.summarize(body("detailed")))

    assert brief.summary != detailed.summary
    assert len(generator.calls) == 2
    assert generator.calls[1][1].max_output_tokens == 500


def test_window_denial_becomes_rate_limited(clock, generator):
    endpoint = make_endpoint(generator, clock, max_requests=1)
    run_async(endpoint.summarize(body(content="one")))

    clock.now = 1_000
    outcome = run_async(endpoint.summarize(body(content="two")))

    assert outcome.status is SummaryStatus.RATE_LIMITED
    assert outcome.retry_after_ms == 59_000


def test_upstream_failure_becomes_failed(clock, generator):
    endpoint = make_endpoint(generator, clock)
    generator.fail_with = UpstreamFailureError("model unavailable")

    outcome = run_async(endpoint.summarize(body()))

    assert outcome.status is SummaryStatus.FAILED
    assert outcome.message == "model unavailable"


def test_pacing_rejects_bursts(clock, generator):
    endpoint = make_endpoint(generator, clock, min_interval_ms=250)

    first = run_async(endpoint.summarize(body(content="one")))
    second = run_async(endpoint.summarize(body(content="two")))

    assert first.status is SummaryStatus.OK
    assert second.status is SummaryStatus.RATE_LIMITED
    assert second.message == PACING_MESSAGE
    assert second.retry_after_ms == 500
    assert len(generator.calls) == 1


def test_success_decays_pacing_interval(clock, generator):
    endpoint = make_endpoint(generator, clock, min_interval_ms=250)
    run_async(endpoint.summarize(body(content="one")))
    run_async(endpoint.summarize(body(content="two")))
    assert endpoint.pacer.interval_ms == 500

    clock.now = 1_000
    run_async(endpoint.summarize(body(content="three")))

    assert endpoint.pacer.interval_ms == 250


def test_parse_accepts_optional_fields():
    parsed = SummarizeInput.parse(
        {"content": "hi", "type": "action-items", "subject": None, "emailId": "m-1"}
    )

    assert parsed.type == "action-items"
    assert parsed.subject == ""
    assert parsed.email_id == "m-1"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"type": "brief"},
        {"content": "   ", "type": "brief"},
        {"content": "hi"},
        {"content": "hi", "type": "haiku"},
        {"content": "hi", "type": "brief", "subject": 3},
        {"content": "hi", "type": "brief", "emailId": 7},
    ],
)
def test_parse_rejects_bad_payloads(payload):
    with pytest.raises(RequestValidationError):
        SummarizeInput.parse(payload)


def test_parse_validators_handles_lists_and_weak_tags():
    assert parse_validators(None) == set()
    assert parse_validators('"abc"') == {"abc"}
    assert parse_validators('W/"abc", "def" ,ghi') == {"abc", "def", "ghi"}
