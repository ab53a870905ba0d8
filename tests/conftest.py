"""Shared fixtures: an in-memory snapshot backend, seeded ids and a frozen clock."""

import random
from datetime import datetime, timezone

import pytest

from quizengine.config import IdConfig, PlayConfig
from quizengine.ids import IdGenerator
from quizengine.models import AnswerOption, Question
from quizengine.state import DomainState
from quizengine.storage import DurableStore, InMemoryBackend

FROZEN_NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
FROZEN_MILLIS = 1767225600000


class RecordingBackend(InMemoryBackend):
    def __init__(self):
        super().__init__()
        self.writes = []

    async def set(self, key, value):
        await super().set(key, value)
        self.writes.append(value)


def make_questions(count):
    return [
        Question(
            question_id=f"q{index}",
            text=f"Question {index}?",
            duration=30,
            answers=[
                AnswerOption(text="right", correct=True),
                AnswerOption(text="wrong"),
                AnswerOption(text="also wrong"),
            ],
        )
        for index in range(count)
    ]


def build_state(backend, play=None):
    return DomainState(
        DurableStore(backend),
        ids=IdGenerator(IdConfig(), rng=random.Random(1234)),
        clock=lambda: FROZEN_NOW,
        play=play or PlayConfig(),
    )


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def state(backend) -> DomainState:
    return build_state(backend)


class FakeRedisClient:
    def __init__(self):
        self.data = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value.encode("utf-8")

    async def aclose(self):
        self.closed = True
