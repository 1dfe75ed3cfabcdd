"""
Scheduler - Review Update Orchestration

Pure scheduling and state updates (no database calls).

Main workflow:
1. Calculate retrievability from the pre-update state
2. Apply the update rules
3. Project the next due date (with fuzzing)
4. Prepend a review log entry
5. Return the new state

Persisting the result is the caller's responsibility.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from memocurve.config import SchedulerConfig
from memocurve.fsrs import intervals, memory_state, updates
from memocurve.fsrs.constants import (
    DEFAULT_PARAMETERS,
    FSRSParameters,
    Rating,
    ReviewScore,
    to_rating,
)


def apply_review(
    state: memory_state.MemoryState,
    rating: Rating | ReviewScore | str,
    duration_ms: int,
    config: SchedulerConfig,
    now: Optional[datetime] = None,
    *,
    params: FSRSParameters = DEFAULT_PARAMETERS,
    rng=None,
    fuzz: bool = True
) -> memory_state.MemoryState:
    """
    Process a review and return the updated memory state.

    This is the core scheduling algorithm. No database calls.
    The input state is never modified.

    Args:
        state: Memory state before the review
        rating: Review rating (Rating, ReviewScore or rating name)
        duration_ms: Time spent on the review
        config: Scheduler configuration (target retention)
        now: Review timestamp (defaults to now)
        params: Weight table
        rng: Random source for interval fuzzing
        fuzz: Set False for a deterministic due date

    Returns:
        New MemoryState snapshot

    Raises:
        ValueError: For an unsupported rating or a negative or non-int duration_ms
    """
    if now is None:
        now = datetime.now(timezone.utc)
    rating = to_rating(rating)
    if isinstance(duration_ms, bool) or not isinstance(duration_ms, int) or duration_ms < 0:
        raise ValueError(f"duration_ms must be a non-negative int, got {duration_ms!r}")

    # Retrievability uses last_review_date before it is overwritten
    retrievability = memory_state.calculate_retrievability(state, now)
    update = updates.apply_update(state, rating, retrievability, params)

    next_review_date = intervals.project_next_review(
        now,
        update.stability,
        config.target_retention,
        rng=rng,
        fuzz=fuzz
    )

    entry = memory_state.ReviewLogEntry(
        rating=rating,
        reviewed_at=now,
        duration_ms=duration_ms,
        stability_before=state.stability
    )

    return memory_state.MemoryState(
        stability=update.stability,
        difficulty=update.difficulty,
        reps=update.reps,
        lapses=update.lapses,
        consecutive_correct=update.consecutive_correct,
        last_review_date=now,
        next_review_date=next_review_date,
        history=memory_state.prepend_history(state.history, entry)
    )


def review_item(
    item: memory_state.Item,
    rating: Rating | ReviewScore | str,
    duration_ms: int,
    config: SchedulerConfig,
    now: Optional[datetime] = None,
    *,
    params: FSRSParameters = DEFAULT_PARAMETERS,
    rng=None,
    fuzz: bool = True
) -> memory_state.Item:
    """Apply a review to an item and return the updated item."""
    new_state = apply_review(
        item.memory,
        rating,
        duration_ms,
        config,
        now,
        params=params,
        rng=rng,
        fuzz=fuzz
    )
    return replace(item, memory=new_state)
