"""Shared fixtures for InkReflect tests.

Every test runs against in-process fakes: a scripted text generation service,
the in-memory key-value store and the in-memory journal store. No test needs
a running model server.
"""

import asyncio
import json
from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from pydantic import BaseModel

from inkreflect.config import Config
from inkreflect.core.journal_store import InMemoryJournalStore
from inkreflect.core.kv_store import InMemoryKeyValueStore
from inkreflect.core.llm.base import TextGenerationService
from inkreflect.models import JournalEntry, Mood, ReflectionResponse
from inkreflect.services import ReflectionCache, ReflectionPipeline
from inkreflect.utils.exceptions import LLMError

BASE_TIME = datetime(2024, 3, 11, 9, 0, 0)  # a Monday

CHUNK_RESPONSE = json.dumps(
    {
        "summary": "You spent these days with friends and felt light.",
        "themes": ["friendship", "rest"],
        "emotional_tone": "warm",
    }
)

REFLECTION_RESPONSE = json.dumps(
    {
        "summary": "This week you kept finding joy in small moments.",
        "key_insight": "Time with people you love restores you.",
        "themes": ["friendship", "gratitude", "rest"],
        "emotional_progression": "You started tired and ended the week energized.",
    }
)


class FakeTextGenerationService(TextGenerationService):
    """
    Scripted text generation service.

    Returns ``responses`` in order when given, otherwise a valid payload for
    the requested response format. Calls listed in ``fail_on`` (zero-based)
    raise LLMError. ``on_call`` runs before each call with the call index.
    """

    def __init__(
        self,
        responses: list[str | None] | None = None,
        fail_on: set[int] | None = None,
        delay: float = 0.0,
        on_call: Callable[[int], None] | None = None,
    ):
        self.responses = list(responses or [])
        self.fail_on = set(fail_on or ())
        self.delay = delay
        self.on_call = on_call
        self.calls: list[dict] = []
        self.closed = False

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        operation: str = "generate",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        response_format: type[BaseModel] | None = None,
    ) -> str:
        index = len(self.calls)
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "operation": operation,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "response_format": response_format,
            }
        )

        if self.on_call is not None:
            self.on_call(index)
        if self.delay:
            await asyncio.sleep(self.delay)
        if index in self.fail_on:
            raise LLMError(f"scripted failure on call {index}")
        if index < len(self.responses):
            return self.responses[index]
        if response_format is ReflectionResponse:
            return REFLECTION_RESPONSE
        return CHUNK_RESPONSE

    @property
    def aggregation_calls(self) -> list[dict]:
        return [call for call in self.calls if call["response_format"] is ReflectionResponse]

    @property
    def chunk_calls(self) -> list[dict]:
        return [call for call in self.calls if call["response_format"] is not ReflectionResponse]

    async def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_entry(
    index: int = 0,
    content: str | None = None,
    title: str | None = None,
    mood: Mood = Mood.HAPPY,
    created_at: datetime | None = None,
) -> JournalEntry:
    """Build an entry whose creation time is ``index`` hours after BASE_TIME."""
    return JournalEntry(
        id=f"entry_{index:04d}",
        title=f"Day {index}" if title is None else title,
        content=f"Today I spent time with friends, entry number {index}." if content is None else content,
        mood=mood,
        created_at=created_at or BASE_TIME + timedelta(hours=index),
    )


def make_entries(count: int, **kwargs) -> list[JournalEntry]:
    return [make_entry(i, **kwargs) for i in range(count)]


@pytest.fixture
def entry_factory() -> Callable[..., JournalEntry]:
    return make_entry


@pytest.fixture
def entries_factory() -> Callable[..., list[JournalEntry]]:
    return make_entries


@pytest.fixture
def service_factory() -> type[FakeTextGenerationService]:
    return FakeTextGenerationService


@pytest.fixture
def fake_service() -> FakeTextGenerationService:
    return FakeTextGenerationService()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(kv_store, clock) -> ReflectionCache:
    return ReflectionCache(kv_store, clock=clock)


@pytest.fixture
def journal_store() -> InMemoryJournalStore:
    return InMemoryJournalStore()


@pytest.fixture
def pipeline_factory(cache, journal_store, clock) -> Callable[..., ReflectionPipeline]:
    """Build a pipeline around a given service, sharing the test's cache and clock."""

    def build(service: TextGenerationService, config: Config | None = None) -> ReflectionPipeline:
        return ReflectionPipeline(
            text_service=service,
            cache=cache,
            journal_store=journal_store,
            config=config or Config(),
            clock=clock,
        )

    return build


@pytest.fixture
async def pipeline(pipeline_factory, fake_service) -> ReflectionPipeline:
    pipeline = pipeline_factory(fake_service)
    await pipeline.initialize()
    return pipeline
