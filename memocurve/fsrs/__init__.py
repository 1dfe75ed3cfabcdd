"""
FSRS - Free Spaced Repetition Scheduler

Main API of the scheduling engine.

This package implements a power-law spaced repetition model with:
- Interpretable memory state (Stability, Difficulty, Retrievability)
- Power-law forgetting curve: R = (1 + F * Δt / S) ^ -1
- Fuzzed interval projection toward a target retention
- Side-effect free previews of every rating

Quick start:
    from memocurve import fsrs
    from memocurve.config import load_config

    config = load_config()
    state = fsrs.new_memory_state()

    # Forecast the buttons
    fsrs.preview_intervals(state, config)

    # Commit a review (algorithm only, no DB calls)
    state = fsrs.apply_review(state, fsrs.Rating.GOOD, 4200, config)
"""

# Core scheduler API (algorithm logic)
from memocurve.fsrs.scheduler import apply_review, review_item
from memocurve.fsrs.preview import preview_intervals, preview_days, format_interval
from memocurve.fsrs.intervals import next_interval

# Constants and parameters
from memocurve.fsrs.constants import (
    Rating,
    ReviewScore,
    RATING_BY_SCORE,
    to_rating,
    InvalidMemoryStateError,
    FSRSParameters,
    DEFAULT_PARAMETERS,
    DECAY_FACTOR,
    S_MIN,
    D_MIN,
    D_MAX,
    MAX_INTERVAL_DAYS,
    HISTORY_CAPACITY,
)

# Memory state
from memocurve.fsrs.memory_state import (
    Item,
    MemoryState,
    ReviewLogEntry,
    calculate_retrievability,
    new_item,
    new_memory_state,
)


__all__ = [
    # Core algorithm
    "apply_review",
    "review_item",
    "preview_intervals",
    "preview_days",
    "format_interval",
    "next_interval",

    # Enums
    "Rating",
    "ReviewScore",
    "RATING_BY_SCORE",
    "to_rating",
    "InvalidMemoryStateError",

    # Memory state
    "Item",
    "MemoryState",
    "ReviewLogEntry",
    "calculate_retrievability",
    "new_item",
    "new_memory_state",

    # Parameters
    "FSRSParameters",
    "DEFAULT_PARAMETERS",
    "DECAY_FACTOR",
    "S_MIN",
    "D_MIN",
    "D_MAX",
    "MAX_INTERVAL_DAYS",
    "HISTORY_CAPACITY",
]
