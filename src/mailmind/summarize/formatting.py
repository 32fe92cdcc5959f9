"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Plain-text helpers over generated summaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_BULLET = re.compile(r"^[-•]\s*")
_MARKUP = re.compile(r"[#*`-]")


@dataclass(slots=True)
class ActionItems:
    """Action items grouped by priority heading."""

    high: list[str] = field(default_factory=list)
    medium: list[str] = field(default_factory=list)
    low: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        return {"high": self.high, "medium": self.medium, "low": self.low}


def extract_action_items(content: str) -> ActionItems:
    """Group bullet lines under the nearest `### <Level> Priority` heading.

    Bullets before any heading count as medium priority.
    """
    items = ActionItems()
    current = items.medium
    for line in content.split("\n"):
        if "### High Priority" in line:
            current = items.high
            continue
        if "### Medium Priority" in line:
            current = items.medium
            continue
        if "### Low Priority" in line:
            current = items.low
            continue
        if line.startswith("-") or line.startswith("•"):
            current.append(_BULLET.sub("", line).strip())
    return items


def summary_preview(content: str, max_length: int = 150) -> str:
    plain = _MARKUP.sub("", content).strip()
    if len(plain) <= max_length:
        return plain
    return plain[:max_length] + "..."
