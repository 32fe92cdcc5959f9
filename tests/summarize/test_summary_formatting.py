from __future__ import annotations

import pytest

from mailmind.llms import RequestValidationError
from mailmind.summarize import (
    SUMMARY_TYPES,
    build_prompt,
    build_summary_request,
    extract_action_items,
    generation_config_for,
    summary_preview,
)


def test_summary_types():
    assert SUMMARY_TYPES == ("brief", "detailed", "action-items")


def test_each_type_has_its_own_config():
    assert generation_config_for("brief").max_output_tokens == 150
    assert generation_config_for("detailed").temperature == 0.5
    assert generation_config_for("action-items").max_output_tokens == 300


def test_unknown_type_is_rejected():
    with pytest.raises(RequestValidationError):
        generation_config_for("poem")
    with pytest.raises(RequestValidationError):
        build_prompt("poem", "body")


def test_prompt_includes_subject_and_content():
    prompt = build_prompt("detailed", "Body text", "Quarterly report")

    assert "Subject: Quarterly report" in prompt
    assert "Body text" in prompt
    assert "Key Details" in prompt


def test_requests_for_different_types_differ():
    brief = build_summary_request("brief", "same")
    detailed = build_summary_request("detailed", "same")

    assert brief.variant == "summary:brief"
    assert brief.prompt != detailed.prompt
    assert brief.config != detailed.config


def test_extract_action_items_groups_by_heading():
    content = "\n".join(
        [
            "- loose item",
            "### High Priority",
            "- ship release",
            "• call vendor",
            "### Medium Priority",
            "- review notes",
            "### Low Priority",
            "- tidy wiki",
            "plain text is ignored",
        ]
    )

    items = extract_action_items(content)

    assert items.high == ["ship release", "call vendor"]
    assert items.medium == ["loose item", "review notes"]
    assert items.low == ["tidy wiki"]
    assert items.as_dict()["low"] == ["tidy wiki"]


def test_summary_preview_strips_markup_and_truncates():
    assert summary_preview("## **Hello** `world`") == "Hello world"

    preview = summary_preview("a" * 200, max_length=10)
    assert preview == "a" * 10 + "..."
