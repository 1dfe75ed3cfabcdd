"""
Memory State - Per-Item State and Retrievability

Defines the memory state the scheduler reads and writes, plus the
derived retrievability.

Key concepts:
- Stability (S): How slowly memory decays (in days)
- Difficulty (D): How hard the item is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
import math
import uuid

from memocurve.fsrs.constants import (
    DECAY_FACTOR,
    D_MAX,
    D_MIN,
    HISTORY_CAPACITY,
    InvalidMemoryStateError,
    Rating,
    S_MIN,
)


SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class ReviewLogEntry:
    """A single completed review, kept for display and analytics."""
    rating: Rating
    reviewed_at: datetime
    duration_ms: int
    stability_before: float


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single item.

    Instances are immutable; every review produces a new snapshot.
    """
    # Long-term memory parameters
    stability: float   # S, in days (0 = never reviewed)
    difficulty: float  # D, range 1-10 (0 = never reviewed)

    # Review tracking
    reps: int
    lapses: int
    consecutive_correct: int
    last_review_date: Optional[datetime]
    next_review_date: datetime

    # Newest first, at most HISTORY_CAPACITY entries
    history: tuple[ReviewLogEntry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Reject structurally invalid states instead of guessing."""
        for name in ("reps", "lapses", "consecutive_correct"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidMemoryStateError(f"{name} must be a non-negative int, got {value!r}")
        if self.lapses > self.reps:
            raise InvalidMemoryStateError("lapses cannot exceed reps")
        for name in ("stability", "difficulty"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise InvalidMemoryStateError(f"{name} must be a finite non-negative number, got {value!r}")
        if not _is_aware(self.next_review_date):
            raise InvalidMemoryStateError("next_review_date must be a timezone-aware datetime")
        if self.last_review_date is not None and not _is_aware(self.last_review_date):
            raise InvalidMemoryStateError("last_review_date must be a timezone-aware datetime")
        if not isinstance(self.history, tuple) or len(self.history) > HISTORY_CAPACITY:
            raise InvalidMemoryStateError(f"history must be a tuple of at most {HISTORY_CAPACITY} entries")

        if self.reps > 0:
            if self.last_review_date is None:
                raise InvalidMemoryStateError("reviewed state is missing last_review_date")
            if not D_MIN <= self.difficulty <= D_MAX:
                raise InvalidMemoryStateError(f"difficulty {self.difficulty} outside [{D_MIN}, {D_MAX}]")
            if self.stability < S_MIN:
                raise InvalidMemoryStateError(f"stability {self.stability} below {S_MIN}")

    @property
    def is_new(self) -> bool:
        return self.reps == 0


@dataclass(frozen=True)
class Item:
    """
    A learning item: identifier plus memory state.

    word, content and added_at belong to the content collaborator;
    the scheduler never inspects them.
    """
    id: str
    memory: MemoryState
    word: str = ""
    content: Any = None
    added_at: Optional[datetime] = None


def _is_aware(value) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() is not None


def calculate_retrievability(state: MemoryState, now: datetime) -> float:
    """
    Calculate retrievability using the power-law forgetting curve.

    Formula: R = (1 + F * Δt / S) ^ -1

    Where:
    - Δt = days since last review (never negative)
    - S = stability (in days)
    - F = DECAY_FACTOR

    Never-reviewed items return 0 so they sort as most at risk.

    Args:
        state: Memory state of the item
        now: Moment to evaluate at

    Returns:
        Retrievability between 0 and 1
    """
    if state.reps == 0 or state.stability == 0:
        return 0.0

    elapsed_days = max(0.0, (now - state.last_review_date).total_seconds() / SECONDS_PER_DAY)
    return (1.0 + DECAY_FACTOR * elapsed_days / state.stability) ** -1


def prepend_history(
    history: tuple[ReviewLogEntry, ...],
    entry: ReviewLogEntry,
    capacity: int = HISTORY_CAPACITY
) -> tuple[ReviewLogEntry, ...]:
    """Return a new history with entry first, oldest entries dropped past capacity."""
    return ((entry,) + tuple(history))[:capacity]


def new_memory_state(now: Optional[datetime] = None) -> MemoryState:
    """
    Initialize state for a new item (never seen before).

    The item is due immediately.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return MemoryState(
        stability=0.0,
        difficulty=0.0,
        reps=0,
        lapses=0,
        consecutive_correct=0,
        last_review_date=None,
        next_review_date=now,
        history=()
    )


def new_item(
    word: str,
    content: Any = None,
    now: Optional[datetime] = None
) -> Item:
    """
    Create a new item with a fresh identifier and a "new" memory state.

    Args:
        word: Display text of the item
        content: Opaque content record from the content collaborator
        now: Creation time (defaults to now)

    Returns:
        Item due immediately
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return Item(
        id=str(uuid.uuid4()),
        memory=new_memory_state(now),
        word=word,
        content=content,
        added_at=now
    )
