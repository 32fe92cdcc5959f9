"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared millisecond clock helpers.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import TypeAlias

# Every time-dependent component takes a clock returning milliseconds.
Clock: TypeAlias = Callable[[], float]


def now_ms() -> float:
    """Monotonic milliseconds used as the default clock."""
    return time.monotonic() * 1000.0


def clamp_ms(value: float) -> int:
    """Round a millisecond delay up to a non-negative integer."""
    if value <= 0:
        return 0
    return int(math.ceil(value))


def ms_to_retry_after_s(value_ms: int) -> int:
    """Convert a millisecond hint into whole seconds for `Retry-After`."""
    if value_ms <= 0:
        return 0
    return int(math.ceil(value_ms / 1000.0))

