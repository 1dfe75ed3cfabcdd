"""
Bucket labels and thresholds for memory analytics.
"""

from __future__ import annotations

from typing import Final


# Retention buckets: (label, upper bound exclusive)
RETENTION_BUCKETS: Final[list[tuple[str, float]]] = [
    ("<80%", 0.80),
    ("80-90%", 0.90),
    ("90-99%", 0.99),
    (">=99%", float("inf")),
]

# Stability buckets in days: (label, lower bound inclusive, upper bound exclusive)
STABILITY_BUCKETS: Final[list[tuple[str, float, float]]] = [
    ("<1d", 0.0, 1.0),
    ("1-7d", 1.0, 7.0),
    ("7-21d", 7.0, 21.0),
    ("21-90d", 21.0, 90.0),
    (">90d", 90.0, 99999.0),
]

DIFFICULTY_LEVELS: Final[list[int]] = list(range(1, 11))

FORECAST_DAYS: Final[int] = 7
HEATMAP_WEEKS: Final[int] = 16
SUMMARY_DAYS: Final[int] = 30

# Heatmap intensity: level n when count exceeds HEATMAP_LEVELS[n - 1]
HEATMAP_LEVELS: Final[list[int]] = [0, 5, 15, 30]

ITEM_DTYPES: Final[dict[str, str]] = {
    "item_id": "object",
    "word": "object",
    "reps": "int64",
    "stability": "float64",
    "difficulty": "float64",
    "retrievability": "float64",
    "days_until_due": "float64",
}
