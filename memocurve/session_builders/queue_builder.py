"""
Queue Builder - Review and Practice Session Creation

Review queues:
- Filter items whose due date has passed
- Order by risk of forgetting (lowest retrievability first)
- Cap by the adaptive load

Practice queues are a random sample and never affect scheduling.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, Sequence
import random

from memocurve.config import SchedulerConfig
from memocurve.fsrs.memory_state import Item, calculate_retrievability


def is_due(item: Item, now: datetime) -> bool:
    return item.memory.next_review_date <= now


def review_priority(item: Item, now: datetime) -> float:
    """
    Priority for sorting: 1 - R.

    Never-reviewed items have R = 0 and therefore maximum priority.
    """
    return 1.0 - calculate_retrievability(item.memory, now)


def adaptive_load(
    items: Sequence[Item],
    config: SchedulerConfig,
    now: Optional[datetime] = None
) -> int:
    """
    Batch size for a review session.

    Formula:
        load = max(session_size, min(due_count, max_daily_review))

    Never below one session, never above the daily ceiling.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    due_count = sum(1 for item in items if is_due(item, now))
    return max(config.session_size, min(due_count, config.max_daily_review))


def due_items(
    items: Sequence[Item],
    config: SchedulerConfig,
    now: Optional[datetime] = None
) -> list[Item]:
    """
    Build the ordered review queue.

    Ties keep their input order (stable sort), so the queue is
    deterministic for a fixed snapshot.

    Args:
        items: All items
        config: Scheduler configuration
        now: Evaluation time (defaults to now)

    Returns:
        Due items, most at risk first, truncated to the adaptive load
    """
    if now is None:
        now = datetime.now(timezone.utc)

    due = [item for item in items if is_due(item, now)]
    due.sort(key=lambda item: review_priority(item, now), reverse=True)
    return due[:adaptive_load(items, config, now)]


def sample_practice_items(
    items: Sequence[Item],
    size: int,
    rng: Optional[random.Random] = None
) -> list[Item]:
    """
    Sample items for a practice session, regardless of due date.
    """
    if size <= 0 or not items:
        return []

    source = rng if rng is not None else random
    return source.sample(list(items), min(size, len(items)))
