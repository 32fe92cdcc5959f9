"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: summarize/__init__.py.
"""

from .formatting import ActionItems, extract_action_items, summary_preview
from .prompts import (
    SUMMARY_TYPES,
    SummaryType,
    build_prompt,
    build_summary_request,
    generation_config_for,
)
from .service import (
    SummarizationEndpoint,
    SummarizeInput,
    SummaryOutcome,
    SummaryStatus,
    parse_validators,
)

__all__ = [
    "ActionItems",
    "SUMMARY_TYPES",
    "SummaryType",
    "SummarizationEndpoint",
    "SummarizeInput",
    "SummaryOutcome",
    "SummaryStatus",
    "build_prompt",
    "build_summary_request",
    "extract_action_items",
    "generation_config_for",
    "parse_validators",
    "summary_preview",
]
