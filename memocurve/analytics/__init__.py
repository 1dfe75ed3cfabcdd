"""
Analytics package exports.
"""

from memocurve.analytics.metrics import (
    activity_heatmap,
    average_memory,
    build_items_frame,
    difficulty_distribution,
    retention_buckets,
    review_forecast,
    reviews_in_last_days,
    stability_distribution,
)

__all__ = [
    "activity_heatmap",
    "average_memory",
    "build_items_frame",
    "difficulty_distribution",
    "retention_buckets",
    "review_forecast",
    "reviews_in_last_days",
    "stability_distribution",
]
