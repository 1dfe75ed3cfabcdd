"""
Preview - Forecast intervals for every rating.

Runs the same update rules and interval projection as a committed
review, without fuzzing and without touching the state, so a caller
can show "Easy: 12d" before the rating is chosen.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from memocurve.config import SchedulerConfig
from memocurve.fsrs import intervals, memory_state, updates
from memocurve.fsrs.constants import DEFAULT_PARAMETERS, FSRSParameters, Rating


def preview_days(
    state: memory_state.MemoryState,
    config: SchedulerConfig,
    now: Optional[datetime] = None,
    *,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> dict[Rating, float]:
    """
    Hypothetical next interval (in days) for each rating.

    Returns:
        Mapping of every Rating to its unfuzzed interval
    """
    if now is None:
        now = datetime.now(timezone.utc)

    retrievability = memory_state.calculate_retrievability(state, now)
    result: dict[Rating, float] = {}
    for rating in Rating:
        update = updates.apply_update(state, rating, retrievability, params)
        result[rating] = intervals.next_interval(update.stability, config.target_retention)
    return result


def format_interval(days: float) -> str:
    """
    Format an interval for display.

    <1h, hours below a day, days below a month,
    months (30 days) below a year, then years (365 days).
    """
    if days < 1.0 / 24.0:
        return "<1h"
    if days < 1.0:
        return f"{round(days * 24)}h"
    if days < 30.0:
        return f"{round(days)}d"
    if days < 365.0:
        return f"{days / 30.0:.1f}m"
    return f"{days / 365.0:.1f}y"


def preview_intervals(
    state: memory_state.MemoryState,
    config: SchedulerConfig,
    now: Optional[datetime] = None,
    *,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> dict[Rating, str]:
    """
    Preview next intervals for the rating buttons.

    Args:
        state: Current memory state (not modified)
        config: Scheduler configuration
        now: Moment of the prospective review (defaults to now)
        params: Weight table

    Returns:
        Mapping of every Rating to a human-readable interval
    """
    days = preview_days(state, config, now, params=params)
    return {rating: format_interval(value) for rating, value in days.items()}
