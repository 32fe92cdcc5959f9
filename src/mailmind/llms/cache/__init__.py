"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, CachePolicy, CacheStats, ResponseCacheBackend
from .inmemory import InMemoryResponseCache

__all__ = [
    "CacheEntry",
    "CachePolicy",
    "CacheStats",
    "ResponseCacheBackend",
    "InMemoryResponseCache",
]
