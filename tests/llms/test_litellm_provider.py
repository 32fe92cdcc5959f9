from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

pytest.importorskip("litellm")

from mailmind.llms import GenerationConfig, LiteLLMTextGenerator, UpstreamError
from mailmind.llms.providers import litellm as provider_module


def run_async(coro):
    return asyncio.run(coro)


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def test_build_payload_merges_request_over_defaults():
    generator = LiteLLMTextGenerator(
        model="gemini/gemini-1.5-pro",
        api_key="secret",
        defaults=GenerationConfig(temperature=0.5, top_k=40, top_p=0.95, max_output_tokens=2048),
        timeout_s=10.0,
    )

    payload = generator.build_payload("hi", GenerationConfig(temperature=0.3, max_output_tokens=150))

    assert payload["model"] == "gemini/gemini-1.5-pro"
    assert payload["messages"] == [{"role": "user", "content": "hi"}]
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 150
    assert payload["top_k"] == 40
    assert payload["top_p"] == 0.95
    assert payload["api_key"] == "secret"
    assert payload["timeout"] == 10.0


def test_generate_content_returns_first_choice(monkeypatch):
    seen = {}

    async def fake_acompletion(**kwargs):
        seen.update(kwargs)
        return _response("summary text")

    monkeypatch.setattr(provider_module.litellm, "acompletion", fake_acompletion)
    generator = LiteLLMTextGenerator(model="gemini/gemini-1.5-pro")

    text = run_async(generator.generate_content("prompt", GenerationConfig()))

    assert text == "summary text"
    assert seen["messages"][0]["content"] == "prompt"


def test_missing_content_becomes_empty_string(monkeypatch):
    async def fake_acompletion(**kwargs):
        return _response(None)

    monkeypatch.setattr(provider_module.litellm, "acompletion", fake_acompletion)
    generator = LiteLLMTextGenerator(model="gemini/gemini-1.5-pro")

    assert run_async(generator.generate_content("prompt", GenerationConfig())) == ""


def test_sdk_errors_are_wrapped(monkeypatch):
    class QuotaError(Exception):
        status_code = 429
        response = SimpleNamespace(headers={"retry-after": "7"})

    async def fake_acompletion(**kwargs):
        raise QuotaError("Resource has been exhausted")

    monkeypatch.setattr(provider_module.litellm, "acompletion", fake_acompletion)
    generator = LiteLLMTextGenerator(model="gemini/gemini-1.5-pro")

    with pytest.raises(UpstreamError) as excinfo:
        run_async(generator.generate_content("prompt", GenerationConfig()))

    assert excinfo.value.status_code == 429
    assert excinfo.value.retry_after_ms == 7_000
