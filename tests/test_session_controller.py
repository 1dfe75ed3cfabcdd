"""
Tests for the review/practice session lifecycle.
"""

import random
from datetime import timedelta

import pytest

from conftest import NOW, make_item, make_state
from memocurve.config import SchedulerConfig
from memocurve.fsrs.constants import DEFAULT_PARAMETERS, Rating, ReviewScore
from memocurve.session_controller import ReviewSession
from memocurve.session_types import SessionMode, SessionStateError, SessionStatus


class RecordingStore:
    """Collects every save-all call."""

    def __init__(self):
        self.calls = []

    def __call__(self, items):
        self.calls.append(list(items))


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def session(config, store):
    return ReviewSession(config, rng=random.Random(5), persist=store)


@pytest.fixture
def items():
    return [make_item("1"), make_item("2"), make_item("3")]


class TestReviewSession:
    def test_starts_idle(self, session):
        assert session.status == SessionStatus.IDLE
        assert session.current_item is None
        assert session.remaining == 0

    def test_forgotten_item_is_requeued(self, session, store, items):
        assert session.start_review(items, NOW) == 3
        assert session.status == SessionStatus.ACTIVE
        assert session.mode == SessionMode.REVIEW

        session.rate(Rating.GOOD, 1000, NOW)
        forgotten = session.rate(Rating.FORGOT, 1000, NOW)
        session.rate(Rating.GOOD, 1000, NOW)

        # The updated item #2 comes back at the end
        assert session.status == SessionStatus.ACTIVE
        assert session.remaining == 1
        assert session.current_item.id == "2"
        assert session.current_item == forgotten
        assert session.current_item.memory.lapses == 1

        session.rate(Rating.GOOD, 1000, NOW + timedelta(minutes=1))

        assert session.status == SessionStatus.COMPLETED
        assert session.reviewed_count == 4
        assert session.correct_count == 3
        assert len(store.calls) == 4

        saved = {item.id: item for item in store.calls[-1]}
        assert set(saved) == {"1", "2", "3"}
        assert saved["2"].memory.reps == 2
        assert saved["2"].memory.lapses == 1
        assert saved["1"].memory.reps == 1

    def test_library_snapshot_keeps_untouched_items(self, session):
        later = make_item("later", make_state(due=NOW + timedelta(days=3)))
        session.start_review([make_item("a"), later], NOW)
        session.rate(Rating.EASY, 0, NOW)

        library = {item.id: item for item in session.items}
        assert library["later"] == later
        assert library["a"].memory.reps == 1

    def test_five_point_scores(self, session, items):
        session.start_review(items, NOW)
        result = session.rate(ReviewScore.CLEAR, 0, NOW)
        assert result.memory.history[0].rating == Rating.EASY

    def test_empty_queue_stays_idle(self, session, store):
        not_due = make_item("x", make_state(due=NOW + timedelta(days=1)))
        assert session.start_review([not_due], NOW) == 0
        assert session.status == SessionStatus.IDLE
        with pytest.raises(SessionStateError):
            session.rate(Rating.GOOD)
        assert store.calls == []

    def test_cannot_start_twice(self, session, items):
        session.start_review(items, NOW)
        with pytest.raises(SessionStateError):
            session.start_review(items, NOW)
        with pytest.raises(SessionStateError):
            session.start_practice(items)

    def test_abandon_keeps_committed_reviews(self, session, store, items):
        session.start_review(items, NOW)
        session.rate(Rating.GOOD, 0, NOW)
        session.abandon()

        assert session.status == SessionStatus.IDLE
        assert session.remaining == 0
        assert len(store.calls) == 1
        assert store.calls[0][0].memory.reps == 1

        # A new session can start after abandoning
        assert session.start_review(store.calls[0], NOW) == 2

    def test_restart_after_completion(self, session, items):
        session.start_review(items[:1], NOW)
        session.rate(Rating.GOOD, 0, NOW)
        assert session.status == SessionStatus.COMPLETED
        assert session.start_review(items, NOW) == 3

    def test_without_persist_callback(self, config, items):
        session = ReviewSession(config)
        session.start_review(items, NOW)
        assert session.rate(Rating.GOOD, 0, NOW).memory.reps == 1

    def test_failed_save_keeps_session_consistent(self, config, items):
        calls = []

        def flaky_store(saved):
            calls.append(list(saved))
            if len(calls) == 1:
                raise OSError("disk full")

        session = ReviewSession(config, rng=random.Random(5), persist=flaky_store)
        session.start_review(items[:2], NOW)

        with pytest.raises(OSError):
            session.rate(Rating.FORGOT, 0, NOW)

        # The lapse is committed, re-queued and the cursor has moved on
        assert session.current_item.id == "2"
        assert len(session.queue) == 3
        assert session.queue[-1].memory.lapses == 1
        library = {item.id: item for item in session.items}
        assert library["1"].memory.lapses == 1

        session.rate(Rating.GOOD, 0, NOW)
        saved = {item.id: item for item in calls[-1]}
        assert saved["1"].memory.lapses == 1
        assert saved["1"].memory.history[0].rating == Rating.FORGOT
        assert saved["2"].memory.reps == 1

        current = session.current_item
        assert current.id == "1"
        session.rate(Rating.GOOD, 0, NOW + timedelta(minutes=1))
        final = {item.id: item for item in calls[-1]}["1"].memory
        assert final.reps == 2
        assert final.lapses == 1
        assert [entry.rating for entry in final.history] == [Rating.GOOD, Rating.FORGOT]
        assert session.status == SessionStatus.COMPLETED


class TestPracticeSession:
    def test_practice_never_touches_memory(self, session, store):
        reviewed = make_item("r", make_state(difficulty=5.0, due=NOW + timedelta(days=10)))
        new = make_item("n")
        assert session.start_practice([reviewed, new]) == 2
        assert session.mode == SessionMode.PRACTICE

        ratings = {}
        while session.status == SessionStatus.ACTIVE:
            current = session.current_item
            rating = Rating.FORGOT if current.id == "r" else Rating.EASY
            result = session.rate(rating)
            assert result == current
            ratings[current.id] = rating

        assert session.status == SessionStatus.COMPLETED
        assert store.calls == []
        assert session.reviewed_count == 2
        assert session.correct_count == 1
        assert {item.id: item for item in session.items}["r"] == reviewed

    def test_practice_difficulty_nudge(self, session):
        reviewed = make_item("r", make_state(difficulty=5.0))
        session.start_practice([reviewed])
        session.rate(Rating.FORGOT)
        assert session.practice_difficulty("r") == pytest.approx(6.0)
        assert session.practice_difficulty("missing") is None

    def test_new_item_starts_from_base_difficulty(self, session):
        session.start_practice([make_item("n")])
        session.rate(Rating.GOOD)
        assert session.practice_difficulty("n") == pytest.approx(DEFAULT_PARAMETERS.base_difficulty)

    def test_nudge_scaled_by_bias(self, store):
        config = SchedulerConfig(difficulty_bias=2.0)
        session = ReviewSession(config, rng=random.Random(1), persist=store)
        session.start_practice([make_item("r", make_state(difficulty=5.0))])
        session.rate(Rating.EASY)
        assert session.practice_difficulty("r") == pytest.approx(4.0)

    def test_practice_sample_size(self, store):
        config = SchedulerConfig(practice_size=4)
        session = ReviewSession(config, rng=random.Random(1), persist=store)
        library = [make_item(str(i)) for i in range(10)]
        assert session.start_practice(library) == 4

    def test_forgotten_practice_item_not_requeued(self, session):
        session.start_practice([make_item("a")])
        session.rate(Rating.FORGOT)
        assert session.status == SessionStatus.COMPLETED
