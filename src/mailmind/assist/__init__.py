"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: assist/__init__.py.
"""

from .drafting import (
    ASSIST_ACTIONS,
    AssistArgs,
    DraftingAssistant,
    enhance_prompt,
    patterns_prompt,
    reply_prompt,
    summary_prompt,
    template_prompt,
)

__all__ = [
    "ASSIST_ACTIONS",
    "AssistArgs",
    "DraftingAssistant",
    "enhance_prompt",
    "patterns_prompt",
    "reply_prompt",
    "summary_prompt",
    "template_prompt",
]
