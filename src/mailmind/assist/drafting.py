"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Drafting helpers (reply, enhance, template, pattern analysis) routed
through the shared call governor.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from ..llms.errors import RequestValidationError
from ..llms.runtime.governor import CallGovernor
from ..llms.types import GenerationOutcome, GenerationRequest

Tone = Literal["formal", "casual"]

ASSIST_ACTIONS: tuple[str, ...] = (
    "summary",
    "reply",
    "enhance",
    "template",
    "patterns",
)


class AssistArgs(BaseModel):
    """Request body shared by the assist actions."""

    content: str | None = None
    tone: Tone = "formal"
    emails: list[str] | None = Field(default=None, max_length=50)


def _check_tone(tone: str) -> None:
    if tone not in ("formal", "casual"):
        raise RequestValidationError("Field 'tone' must be 'formal' or 'casual'")


def summary_prompt(content: str) -> str:
    return (
        "Please provide a concise summary of the following email. Focus on key points, "
        "action items, and important details. Format the summary in a clear, structured way:"
        f"\n\nEmail Content:\n{content}\n\nSummary:"
    )


def reply_prompt(content: str, tone: str = "formal") -> str:
    _check_tone(tone)
    return (
        f"Based on the following email, generate a {tone} reply that is professional and "
        "appropriate. Consider the context and maintain a natural conversation flow:"
        f"\n\nEmail Content:\n{content}\n\n{tone.capitalize()} Reply:"
    )


def enhance_prompt(content: str) -> str:
    return (
        "Please review and enhance the following email content. Improve clarity, grammar, "
        "and tone while maintaining the original message. Provide both the enhanced version "
        "and a brief explanation of the changes:"
        f"\n\nOriginal Content:\n{content}\n\nEnhanced Version:"
    )


def template_prompt(context: str, tone: str = "formal") -> str:
    _check_tone(tone)
    return (
        f"Generate a {tone} email template based on the following context. The template "
        "should be professional, clear, and adaptable:"
        f"\n\nContext:\n{context}\n\nTemplate:"
    )


def patterns_prompt(emails: Sequence[str]) -> str:
    samples = "\n\n".join(emails)
    return (
        "Analyze the following email patterns and provide insights about communication "
        "style, common themes, and potential improvements. Focus on actionable insights:"
        f"\n\nEmail Samples:\n{samples}\n\nAnalysis:"
    )


class DraftingAssistant:
    """Prompt builders bound to a governor; every call is cached and admitted."""

    def __init__(self, governor: CallGovernor) -> None:
        self.governor = governor

    async def _run(self, variant: str, prompt: str) -> GenerationOutcome:
        return await self.governor.generate(
            GenerationRequest(prompt=prompt, variant=f"assist:{variant}")
        )

    async def summarize_email(self, content: str) -> GenerationOutcome:
        return await self._run("summary", summary_prompt(content))

    async def smart_reply(self, content: str, tone: Tone = "formal") -> GenerationOutcome:
        return await self._run("reply", reply_prompt(content, tone))

    async def enhance(self, content: str) -> GenerationOutcome:
        return await self._run("enhance", enhance_prompt(content))

    async def template(self, context: str, tone: Tone = "formal") -> GenerationOutcome:
        return await self._run("template", template_prompt(context, tone))

    async def analyze_patterns(self, emails: Sequence[str]) -> GenerationOutcome:
        if not emails:
            raise RequestValidationError("Field 'emails' must contain at least one email")
        return await self._run("patterns", patterns_prompt(emails))

    async def run(self, action: str, payload: Any) -> GenerationOutcome:
        """Validate `payload` for `action` and dispatch to the matching helper."""
        if action not in ASSIST_ACTIONS:
            raise RequestValidationError(f"Unknown assist action '{action}'")
        if not isinstance(payload, dict):
            raise RequestValidationError("Request body must be a JSON object")
        try:
            args = AssistArgs.model_validate(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "body"
            raise RequestValidationError(f"Invalid field '{field}': {first['msg']}") from exc

        if action == "patterns":
            return await self.analyze_patterns(args.emails or [])

        content = args.content or ""
        if not content.strip():
            raise RequestValidationError("Missing required field: content")
        if action == "summary":
            return await self.summarize_email(content)
        if action == "reply":
            return await self.smart_reply(content, args.tone)
        if action == "enhance":
            return await self.enhance(content)
        return await self.template(content, args.tone)
