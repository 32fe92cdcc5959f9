from __future__ import annotations

import asyncio

import pytest

from mailmind.llms.types import GenerationConfig


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeGenerator:
    """In-process stand-in for the upstream model."""

    provider_id = "fake"

    def __init__(self) -> None:
        self.calls: list[tuple[str, GenerationConfig]] = []
        self.texts: list[str] = []
        self.fail_with: Exception | None = None
        self.hang = False

    async def generate_content(self, prompt: str, config: GenerationConfig) -> str:
        self.calls.append((prompt, config))
        await asyncio.sleep(0)
        if self.hang:
            await asyncio.Event().wait()
        if self.fail_with is not None:
            raise self.fail_with
        if self.texts:
            return self.texts.pop(0)
        return f"text-{len(self.calls)}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
