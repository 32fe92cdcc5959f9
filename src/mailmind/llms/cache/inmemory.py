"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

from ...utils import Clock, now_ms
from ..fingerprint import make_validator
from ..types import CachedPayload
from .base import CacheEntry, CachePolicy, CacheStats, ResponseCacheBackend


class InMemoryResponseCache(ResponseCacheBackend):
    """Process-local cache with fresh, stale-but-usable and expired states.

    An entry is fresh while `age <= fresh_ms`, stale while
    `fresh_ms < age <= stale_ms`, and evicted on the first lookup after that.
    Writes always overwrite; the last writer wins.
    """

    backend_id = "inmemory"

    def __init__(self, policy: CachePolicy | None = None, *, clock: Clock | None = None) -> None:
        self.policy = policy or CachePolicy()
        self._clock = clock or now_ms
        self._rows: dict[str, CacheEntry] = {}
        self._hits = 0
        self._stale_hits = 0
        self._misses = 0
        self._evictions = 0

    def _live_entry(self, fingerprint: str) -> tuple[CacheEntry, float] | None:
        row = self._rows.get(fingerprint)
        if row is None:
            return None
        age = self._clock() - row.stored_at_ms
        if age > self.policy.stale_ms:
            self._rows.pop(fingerprint, None)
            self._evictions += 1
            return None
        return row, age

    def get(self, fingerprint: str) -> CachedPayload | None:
        live = self._live_entry(fingerprint)
        if live is None:
            self._misses += 1
            return None
        row, age = live
        is_stale = age > self.policy.fresh_ms
        if is_stale:
            self._stale_hits += 1
        else:
            self._hits += 1
        return CachedPayload(
            payload=row.payload,
            is_stale=is_stale,
            validator=row.validator,
            age_ms=max(0, int(age)),
        )

    def put(self, fingerprint: str, payload: str) -> str:
        validator = make_validator(payload)
        self._rows[fingerprint] = CacheEntry(
            payload=payload,
            stored_at_ms=self._clock(),
            validator=validator,
        )
        return validator

    def validator_for(self, fingerprint: str) -> str | None:
        """Current validator for a live entry, without touching hit counters."""
        live = self._live_entry(fingerprint)
        return None if live is None else live[0].validator

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            stale_hits=self._stale_hits,
            misses=self._misses,
            evictions=self._evictions,
            size=len(self._rows),
        )
