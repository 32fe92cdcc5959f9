from __future__ import annotations

import asyncio

import pytest

from mailmind.llms import CallGovernor, GenerationRequest, PrometheusGovernorMetrics


def run_async(coro):
    return asyncio.run(coro)


class RecordingMetrics:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, str]]] = []

    def incr(self, name, value=1, *, tags=None):
        self.events.append((name, dict(tags or {})))


def test_governor_reports_cache_and_upstream_outcomes(clock, generator):
    metrics = RecordingMetrics()
    governor = CallGovernor(generator=generator, metrics=metrics, clock=clock)

    run_async(governor.generate(GenerationRequest(prompt="hi")))
    run_async(governor.generate(GenerationRequest(prompt="hi")))

    assert metrics.events == [
        ("governor_cache_total", {"state": "miss"}),
        ("governor_upstream_calls_total", {"outcome": "success"}),
        ("governor_cache_total", {"state": "hit"}),
    ]


def test_prometheus_adapter_exports_labelled_counters(clock, generator):
    prometheus_client = pytest.importorskip("prometheus_client")
    registry = prometheus_client.CollectorRegistry()
    governor = CallGovernor(
        generator=generator,
        metrics=PrometheusGovernorMetrics(registry=registry),
        clock=clock,
    )

    run_async(governor.generate(GenerationRequest(prompt="hi")))
    run_async(governor.generate(GenerationRequest(prompt="hi")))

    assert registry.get_sample_value("mailmind_governor_cache_total", {"state": "miss"}) == 1.0
    assert registry.get_sample_value("mailmind_governor_cache_total", {"state": "hit"}) == 1.0
    assert (
        registry.get_sample_value(
            "mailmind_governor_upstream_calls_total", {"outcome": "success"}
        )
        == 1.0
    )


def test_prometheus_adapter_registers_known_counters_up_front():
    prometheus_client = pytest.importorskip("prometheus_client")
    registry = prometheus_client.CollectorRegistry()

    metrics = PrometheusGovernorMetrics(registry=registry)

    assert registry.get_sample_value("mailmind_endpoint_pacing_rejected_total") == 0.0
    with pytest.raises(ValueError, match="outcome"):
        metrics.incr("governor_upstream_calls_total", tags={"state": "x"})


def test_prometheus_adapter_accepts_unlisted_counters():
    prometheus_client = pytest.importorskip("prometheus_client")
    registry = prometheus_client.CollectorRegistry()
    metrics = PrometheusGovernorMetrics(registry=registry)

    metrics.incr("custom_events_total", 2, tags={"kind": "a"})

    assert registry.get_sample_value("mailmind_custom_events_total", {"kind": "a"}) == 2.0
