"""
Metric computations for the memory dashboard.

All item metrics work on the frame built by build_items_frame(), one
row per item. Unreviewed items have reps == 0 and are excluded from the
difficulty, stability and average metrics.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

import pandas as pd

from memocurve.analytics.constants import (
    DIFFICULTY_LEVELS,
    FORECAST_DAYS,
    HEATMAP_LEVELS,
    HEATMAP_WEEKS,
    ITEM_DTYPES,
    RETENTION_BUCKETS,
    STABILITY_BUCKETS,
    SUMMARY_DAYS,
)
from memocurve.fsrs.memory_state import SECONDS_PER_DAY, Item, calculate_retrievability
from memocurve.stats import UserStats


def build_items_frame(items: Sequence[Item], now: Optional[datetime] = None) -> pd.DataFrame:
    """
    Snapshot items into a dataframe.

    Retrievability is 0 for unreviewed items.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    rows = []
    for item in items:
        memory = item.memory
        rows.append({
            "item_id": item.id,
            "word": item.word,
            "reps": memory.reps,
            "stability": memory.stability,
            "difficulty": memory.difficulty,
            "retrievability": 0.0 if memory.is_new else calculate_retrievability(memory, now),
            "days_until_due": (memory.next_review_date - now).total_seconds() / SECONDS_PER_DAY,
        })

    return pd.DataFrame(rows, columns=list(ITEM_DTYPES)).astype(ITEM_DTYPES)


def _reviewed(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame["reps"] > 0]


def _count_labels(buckets: pd.Series, labels: list[str]) -> pd.Series:
    """Count binned values per label; values outside every bin are dropped."""
    return buckets.astype("object").value_counts().reindex(labels, fill_value=0).astype("int64")


def retention_buckets(frame: pd.DataFrame) -> pd.Series:
    """
    Count items per current-retrievability bucket.

    New items count as "<80%".
    """
    labels = [label for label, _ in RETENTION_BUCKETS]
    bins = [float("-inf")] + [upper for _, upper in RETENTION_BUCKETS]
    buckets = pd.cut(frame["retrievability"], bins=bins, labels=labels, right=False)
    return _count_labels(buckets, labels)


def review_forecast(frame: pd.DataFrame, days: int = FORECAST_DAYS) -> pd.Series:
    """
    Count items coming due on each of the next `days` days.

    Formula:
        offset = 0                       if overdue
        offset = ceil(days_until_due)    otherwise (kept only if < days)
    """
    counts = pd.Series(0, index=range(days), dtype="int64")
    for days_until_due in frame["days_until_due"]:
        offset = 0 if days_until_due <= 0 else math.ceil(days_until_due)
        if offset < days:
            counts[offset] += 1
    return counts


def difficulty_distribution(frame: pd.DataFrame) -> pd.Series:
    """Count reviewed items per rounded difficulty level 1-10."""
    reviewed = _reviewed(frame)
    levels = reviewed["difficulty"].round().clip(lower=1, upper=10).astype("int64")
    return levels.value_counts().reindex(DIFFICULTY_LEVELS, fill_value=0).astype("int64")


def stability_distribution(frame: pd.DataFrame) -> pd.Series:
    """Count reviewed items per stability maturity bucket."""
    reviewed = _reviewed(frame)
    labels = [label for label, _, _ in STABILITY_BUCKETS]
    bins = [lower for _, lower, _ in STABILITY_BUCKETS] + [STABILITY_BUCKETS[-1][2]]
    buckets = pd.cut(reviewed["stability"], bins=bins, labels=labels, right=False)
    return _count_labels(buckets, labels)


def average_memory(frame: pd.DataFrame) -> tuple[float, float]:
    """
    Mean difficulty and stability of reviewed items.

    Returns:
        (avg_difficulty, avg_stability), (0.0, 0.0) with no reviewed items
    """
    reviewed = _reviewed(frame)
    if reviewed.empty:
        return 0.0, 0.0
    return float(reviewed["difficulty"].mean()), float(reviewed["stability"].mean())


def _heat_level(count: int) -> int:
    return sum(1 for threshold in HEATMAP_LEVELS if count > threshold)


def _daily_counts(stats: UserStats) -> pd.Series:
    if not stats.history:
        return pd.Series(dtype="int64")
    return pd.Series(
        [entry.count for entry in stats.history],
        index=pd.to_datetime([entry.day for entry in stats.history]),
        dtype="int64",
    ).groupby(level=0).sum()


def activity_heatmap(
    stats: UserStats,
    today: Optional[date] = None,
    weeks: int = HEATMAP_WEEKS
) -> pd.DataFrame:
    """
    Daily activity grid from the Sunday `weeks` weeks ago through today.

    Returns:
        DataFrame indexed by day with columns "count" and "level" (0-4)
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    days_since_sunday = (today.weekday() + 1) % 7
    start = today - timedelta(days=weeks * 7 + days_since_sunday)
    day_index = pd.date_range(start=start, end=today, freq="D")

    counts = _daily_counts(stats).reindex(day_index, fill_value=0).astype("int64")
    return pd.DataFrame({
        "count": counts,
        "level": counts.map(_heat_level).astype("int64"),
    }, index=day_index)


def reviews_in_last_days(
    stats: UserStats,
    today: Optional[date] = None,
    days: int = SUMMARY_DAYS
) -> int:
    """Total ratings recorded on or after `days` days before today."""
    if today is None:
        today = datetime.now(timezone.utc).date()

    cutoff = today - timedelta(days=days)
    return sum(entry.count for entry in stats.history if entry.day >= cutoff)
