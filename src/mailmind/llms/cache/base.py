"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..types import CachedPayload


@dataclass(frozen=True, slots=True)
class CachePolicy:
    """Fresh and stale lifetimes for cached responses."""

    fresh_ms: int = 3_600_000
    stale_ms: int = 86_400_000


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached text result with its storage time and validator."""

    payload: str
    stored_at_ms: float
    validator: str


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache performance counters."""

    hits: int = 0
    stale_hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0


class ResponseCacheBackend(Protocol):
    """Protocol implemented by response caches used by the call governor.

    Lookups never suspend, so the protocol is synchronous.
    """

    backend_id: str

    def get(self, fingerprint: str) -> CachedPayload | None: ...

    def put(self, fingerprint: str, payload: str) -> str: ...

    @property
    def stats(self) -> CacheStats: ...
