"""
memocurve - spaced repetition scheduling engine.

Commonly used entry points are re-exported here; see the subpackages
for the full API.
"""

from memocurve.config import ConfigError, SchedulerConfig, load_config
from memocurve.fsrs import (
    Item,
    MemoryState,
    Rating,
    ReviewScore,
    apply_review,
    calculate_retrievability,
    new_item,
    new_memory_state,
    preview_intervals,
    review_item,
    to_rating,
)
from memocurve.session_builders import adaptive_load, due_items, sample_practice_items
from memocurve.session_controller import ReviewSession
from memocurve.session_types import SessionMode, SessionStateError, SessionStatus

__all__ = [
    "ConfigError",
    "SchedulerConfig",
    "load_config",
    "Item",
    "MemoryState",
    "Rating",
    "ReviewScore",
    "apply_review",
    "calculate_retrievability",
    "new_item",
    "new_memory_state",
    "preview_intervals",
    "review_item",
    "to_rating",
    "adaptive_load",
    "due_items",
    "sample_practice_items",
    "ReviewSession",
    "SessionMode",
    "SessionStateError",
    "SessionStatus",
]
