"""
Session lifecycle for review and practice sessions.

A session snapshots a queue, walks it with a cursor and, in review mode,
commits every rating through the scheduler. Items forgotten during a
review session are re-queued at the end so they come back before the
session is over. The queue itself is never persisted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional, Sequence
import logging

from memocurve.config import SchedulerConfig
from memocurve.fsrs.constants import (
    DEFAULT_PARAMETERS,
    FSRSParameters,
    Rating,
    ReviewScore,
    to_rating,
)
from memocurve.fsrs.memory_state import Item
from memocurve.fsrs.scheduler import review_item
from memocurve.fsrs.updates import clamp_difficulty
from memocurve.session_builders.queue_builder import due_items, sample_practice_items
from memocurve.session_types import SessionMode, SessionStateError, SessionStatus


logger = logging.getLogger(__name__)

# Practice nudge per rating step away from GOOD, scaled by config.difficulty_bias
PRACTICE_NUDGE = 0.5


class ReviewSession:
    """
    Ephemeral review/practice session: IDLE -> ACTIVE -> COMPLETED.

    Args:
        config: Scheduler configuration
        params: Weight table for committed reviews
        rng: Random source for fuzzing and practice sampling
        persist: Save-all callback, called with every item after each
            committed rating
    """

    def __init__(
        self,
        config: SchedulerConfig,
        *,
        params: FSRSParameters = DEFAULT_PARAMETERS,
        rng=None,
        persist: Optional[Callable[[list[Item]], None]] = None
    ):
        self.config = config
        self.params = params
        self.rng = rng
        self.persist = persist
        self._reset()

    def _reset(self) -> None:
        self.status = SessionStatus.IDLE
        self.mode: Optional[SessionMode] = None
        self.position = 0
        self.reviewed_count = 0
        self.correct_count = 0
        self._queue: list[Item] = []
        self._library: dict[str, Item] = {}
        self._practice_difficulty: dict[str, float] = {}

    # ---- Lifecycle ----

    def start_review(self, items: Sequence[Item], now: Optional[datetime] = None) -> int:
        """
        Start a review session over the due items.

        Returns:
            Queue length (0 means nothing is due and the session stays idle)
        """
        queue = due_items(items, self.config, now)
        return self._start(SessionMode.REVIEW, items, queue)

    def start_practice(self, items: Sequence[Item]) -> int:
        """
        Start a practice session over a random sample of all items.

        Returns:
            Queue length (0 means there is nothing to practice)
        """
        queue = sample_practice_items(items, self.config.practice_size, self.rng)
        return self._start(SessionMode.PRACTICE, items, queue)

    def _start(self, mode: SessionMode, items: Sequence[Item], queue: list[Item]) -> int:
        if self.status == SessionStatus.ACTIVE:
            raise SessionStateError("A session is already active; abandon it first")

        self._reset()
        if not queue:
            logger.info("No items available for a %s session", mode.value)
            return 0

        self.mode = mode
        self.status = SessionStatus.ACTIVE
        self._queue = list(queue)
        self._library = {item.id: item for item in items}
        logger.info("Started %s session with %d items", mode.value, len(queue))
        return len(queue)

    def abandon(self) -> None:
        """
        Discard the queue and return to idle.

        Reviews already committed stay committed.
        """
        if self.status == SessionStatus.ACTIVE:
            logger.info(
                "Abandoned %s session at %d/%d",
                self.mode.value, self.position, len(self._queue)
            )
        self._reset()

    # ---- Progress ----

    @property
    def queue(self) -> tuple[Item, ...]:
        return tuple(self._queue)

    @property
    def items(self) -> list[Item]:
        """Library snapshot including committed updates."""
        return list(self._library.values())

    @property
    def current_item(self) -> Optional[Item]:
        if self.status != SessionStatus.ACTIVE:
            return None
        return self._queue[self.position]

    @property
    def remaining(self) -> int:
        if self.status != SessionStatus.ACTIVE:
            return 0
        return len(self._queue) - self.position

    def practice_difficulty(self, item_id: str) -> Optional[float]:
        """Session-local difficulty after practice nudges, if the item was practiced."""
        return self._practice_difficulty.get(item_id)

    # ---- Feedback ----

    def rate(
        self,
        rating: Rating | ReviewScore | str,
        duration_ms: int = 0,
        now: Optional[datetime] = None
    ) -> Item:
        """
        Process feedback for the current item and move to the next one.

        Review mode commits the rating, persists all items and re-queues
        the updated item on FORGOT. Practice mode only applies a local
        difficulty nudge.

        Returns:
            The item after this rating (unchanged in practice mode)

        Raises:
            SessionStateError: If no session is active

        Errors from persist propagate after the session has advanced;
        the committed item stays in the library for the next save.
        """
        if self.status != SessionStatus.ACTIVE:
            raise SessionStateError(f"Cannot rate while session is {self.status.value}")

        rating = to_rating(rating)
        item = self._queue[self.position]

        if self.mode == SessionMode.REVIEW:
            if now is None:
                now = datetime.now(timezone.utc)
            result = review_item(
                item,
                rating,
                duration_ms,
                self.config,
                now,
                params=self.params,
                rng=self.rng
            )
            self._library[result.id] = result
            if rating == Rating.FORGOT:
                self._queue.append(result)
        else:
            result = item
            self._nudge_practice_difficulty(item, rating)

        self.reviewed_count += 1
        if rating != Rating.FORGOT:
            self.correct_count += 1

        self.position += 1
        if self.position >= len(self._queue):
            self.status = SessionStatus.COMPLETED
            logger.info(
                "Completed %s session: %d ratings, %d correct",
                self.mode.value, self.reviewed_count, self.correct_count
            )

        # Save only once the queue and cursor are settled
        if self.mode == SessionMode.REVIEW and self.persist is not None:
            self.persist(self.items)

        return result

    def _nudge_practice_difficulty(self, item: Item, rating: Rating) -> None:
        if item.memory.is_new:
            start = self.params.base_difficulty
        else:
            start = item.memory.difficulty
        base = self._practice_difficulty.get(item.id, start)
        nudge = -PRACTICE_NUDGE * self.config.difficulty_bias * (rating - Rating.GOOD)
        self._practice_difficulty[item.id] = clamp_difficulty(base + nudge)
