"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for governor and endpoint observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class GovernorMetrics(Protocol):
    """Minimal metrics interface for governor instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpGovernorMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


# Counters emitted by the governor and the summarization endpoint, with
# their label names. Each name has exactly one label set.
GOVERNOR_COUNTERS: dict[str, tuple[str, ...]] = {
    "governor_cache_total": ("state",),
    "governor_admission_denied_total": ("reason",),
    "governor_upstream_calls_total": ("outcome",),
    "governor_background_refresh_total": ("outcome",),
    "endpoint_pacing_rejected_total": (),
}


class PrometheusGovernorMetrics(GovernorMetrics):
    """Export governor counters to a Prometheus registry.

    Known counters are registered eagerly so they appear on the first
    scrape. Unknown names are registered on first use with the label set
    of that first call. Requires the `metrics` extra (`prometheus_client`).
    """

    def __init__(self, *, namespace: str = "mailmind", registry=None) -> None:
        try:
            import prometheus_client
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusGovernorMetrics requires the `metrics` extra "
                "(pip install 'mailmind[metrics]')."
            ) from exc

        self._prometheus = prometheus_client
        self._namespace = namespace
        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._counters: dict[str, tuple[object, tuple[str, ...]]] = {}
        for name, labels in GOVERNOR_COUNTERS.items():
            self._register(name, labels)

    def _register(self, name: str, labels: tuple[str, ...]) -> tuple[object, tuple[str, ...]]:
        counter = self._prometheus.Counter(
            name,
            f"mailmind {name.removesuffix('_total').replace('_', ' ')}",
            labelnames=labels,
            namespace=self._namespace,
            registry=self._registry,
        )
        self._counters[name] = (counter, labels)
        return counter, labels

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        tags = tags or {}
        entry = self._counters.get(name)
        if entry is None:
            entry = self._register(name, tuple(sorted(tags)))
        counter, labels = entry
        if not labels:
            counter.inc(value)
            return
        missing = [label for label in labels if label not in tags]
        if missing:
            raise ValueError(f"Metric '{name}' requires labels {missing}")
        counter.labels(**{label: str(tags[label]) for label in labels}).inc(value)
