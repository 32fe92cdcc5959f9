"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Prompt templates and sampling presets for each summary variant.
"""

from __future__ import annotations

from typing import Literal, get_args

from ..llms.errors import RequestValidationError
from ..llms.types import GenerationConfig, GenerationRequest

SummaryType = Literal["brief", "detailed", "action-items"]

SUMMARY_TYPES: tuple[str, ...] = get_args(SummaryType)

_CONFIGS: dict[str, GenerationConfig] = {
    "brief": GenerationConfig(temperature=0.3, max_output_tokens=150),
    "detailed": GenerationConfig(temperature=0.5, max_output_tokens=500),
    "action-items": GenerationConfig(temperature=0.4, max_output_tokens=300),
}

_BRIEF = """Summarize the following email in 2-3 concise sentences, focusing on the main points and key information:

Subject: {subject}

Content:
{content}

Provide a brief summary that captures the essence of the message."""

_DETAILED = """Provide a detailed summary of the following email, breaking it down into clear sections:

Subject: {subject}

Content:
{content}

Structure your summary with the following sections:
1. Overview: A high-level summary of the main topic
2. Key Details: Important information and context
3. Important Points: Specific details that need attention
4. Conclusion: Any final thoughts or next steps

Use markdown formatting for better readability."""

_ACTION_ITEMS = """Extract and organize action items from the following email, prioritizing them by importance:

Subject: {subject}

Content:
{content}

Format your response as a markdown list with the following sections:
### High Priority
- List urgent items that need immediate attention

### Medium Priority
- List important items that can be addressed soon

### Low Priority
- List items that can be addressed when time permits

For each item, include any relevant deadlines or dependencies if mentioned."""

_TEMPLATES = {
    "brief": _BRIEF,
    "detailed": _DETAILED,
    "action-items": _ACTION_ITEMS,
}


def _check_type(summary_type: str) -> None:
    if summary_type not in _TEMPLATES:
        raise RequestValidationError(
            f"Field 'type' must be one of {', '.join(SUMMARY_TYPES)}"
        )


def generation_config_for(summary_type: str) -> GenerationConfig:
    _check_type(summary_type)
    return _CONFIGS[summary_type]


def build_prompt(summary_type: str, content: str, subject: str = "") -> str:
    _check_type(summary_type)
    template = _TEMPLATES[summary_type]
    return template.format(subject=subject, content=content)


def build_summary_request(summary_type: str, content: str, subject: str = "") -> GenerationRequest:
    """Build the governed request for one `(content, type)` pair."""
    return GenerationRequest(
        prompt=build_prompt(summary_type, content, subject),
        variant=f"summary:{summary_type}",
        config=generation_config_for(summary_type),
    )
