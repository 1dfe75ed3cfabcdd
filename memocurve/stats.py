"""
Daily check-in and streak statistics.

Stats are immutable values; each operation returns an updated copy
for the persistence layer to save.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional


HISTORY_DAYS = 14  # Daily counts kept for the activity chart


@dataclass(frozen=True)
class DailyStat:
    """Number of ratings given on one day."""
    day: date
    count: int


@dataclass(frozen=True)
class UserStats:
    """Learner-level activity statistics."""
    streak: int = 0
    last_login_date: Optional[date] = None
    total_words_learned: int = 0
    words_today: int = 0
    history: tuple[DailyStat, ...] = field(default_factory=tuple)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _with_day(history: tuple[DailyStat, ...], day: date, count: int) -> tuple[DailyStat, ...]:
    """Set the count for day, appending an entry if the day is missing."""
    if any(entry.day == day for entry in history):
        return tuple(
            DailyStat(day=entry.day, count=count) if entry.day == day else entry
            for entry in history
        )
    return history + (DailyStat(day=day, count=count),)


def check_in(stats: UserStats, today: Optional[date] = None) -> UserStats:
    """
    Register a visit.

    Logic:
    - First visit of a new day: streak +1 if the last visit was
      yesterday, otherwise the streak restarts at 1
    - words_today resets and today gets a history entry
    - History is trimmed to the last HISTORY_DAYS entries
    - A repeat visit on the same day only makes sure today has an entry

    Args:
        stats: Current stats
        today: Visit date (defaults to today, UTC)

    Returns:
        Updated stats
    """
    if today is None:
        today = _today()

    if stats.last_login_date == today:
        if any(entry.day == today for entry in stats.history):
            return stats
        return replace(stats, history=_with_day(stats.history, today, stats.words_today))

    if stats.last_login_date == today - timedelta(days=1):
        streak = stats.streak + 1
    else:
        streak = 1

    history = _with_day(stats.history, today, 0)
    return replace(
        stats,
        streak=streak,
        last_login_date=today,
        words_today=0,
        history=history[-HISTORY_DAYS:]
    )


def record_review(stats: UserStats, today: Optional[date] = None) -> UserStats:
    """Count one rating for today."""
    if today is None:
        today = _today()

    words_today = stats.words_today + 1
    return replace(
        stats,
        words_today=words_today,
        history=_with_day(stats.history, today, words_today)
    )


def record_learned(stats: UserStats) -> UserStats:
    """Count a newly added item."""
    return replace(stats, total_words_learned=stats.total_words_learned + 1)
