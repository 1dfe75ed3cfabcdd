"""Session builder modules for review and practice queues."""

from memocurve.session_builders.queue_builder import (
    adaptive_load,
    due_items,
    is_due,
    review_priority,
    sample_practice_items,
)

__all__ = [
    "adaptive_load",
    "due_items",
    "is_due",
    "review_priority",
    "sample_practice_items",
]
