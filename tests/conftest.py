"""Shared fixtures for the memocurve test suite."""

import random
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from memocurve.config import SchedulerConfig
from memocurve.fsrs.memory_state import Item, MemoryState
from memocurve.storage import init_db


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "MEMOCURVE_MAX_DAILY_REVIEW",
        "MEMOCURVE_SESSION_SIZE",
        "MEMOCURVE_TARGET_RETENTION",
        "MEMOCURVE_DIFFICULTY_BIAS",
        "MEMOCURVE_PRACTICE_SIZE",
        "DATABASE_URL",
        "TEST_MODE",
        "DEFAULT_USER_ID",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    return SchedulerConfig()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def no_fuzz():
    """Random source that yields a fuzz factor of exactly 1.0."""
    return FixedRandom(0.5)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


def make_state(
    stability=5.0,
    difficulty=5.0,
    reps=3,
    lapses=0,
    consecutive_correct=3,
    last_review=None,
    due=None,
    history=(),
):
    """Build a reviewed memory state relative to NOW."""
    if last_review is None:
        last_review = NOW - timedelta(days=2)
    if due is None:
        due = NOW
    return MemoryState(
        stability=stability,
        difficulty=difficulty,
        reps=reps,
        lapses=lapses,
        consecutive_correct=consecutive_correct,
        last_review_date=last_review,
        next_review_date=due,
        history=history,
    )


def make_new_state(due=None):
    return MemoryState(
        stability=0.0,
        difficulty=0.0,
        reps=0,
        lapses=0,
        consecutive_correct=0,
        last_review_date=None,
        next_review_date=due if due is not None else NOW,
    )


def make_item(item_id, memory=None, word=None):
    return Item(
        id=item_id,
        memory=memory if memory is not None else make_new_state(),
        word=word if word is not None else f"word-{item_id}",
        added_at=NOW - timedelta(days=30),
    )
