"""
Tests for dashboard metrics.
"""

from datetime import date, timedelta

import pandas as pd
import pytest

from conftest import NOW, make_item, make_new_state, make_state
from memocurve.analytics import (
    activity_heatmap,
    average_memory,
    build_items_frame,
    difficulty_distribution,
    retention_buckets,
    review_forecast,
    reviews_in_last_days,
    stability_distribution,
)
from memocurve.stats import DailyStat, UserStats


TODAY = date(2024, 3, 15)  # A Friday
YESTERDAY = NOW - timedelta(days=1)


@pytest.fixture
def frame():
    items = [
        make_item("new", make_new_state(due=NOW - timedelta(days=1))),
        # R = 1 / (1 + 19 * 1 / S) one day after review
        make_item("weak", make_state(stability=0.5, difficulty=1.0, last_review=YESTERDAY, due=NOW)),
        make_item("ok", make_state(stability=100.0, difficulty=5.2, last_review=YESTERDAY, due=NOW + timedelta(hours=12))),
        make_item("solid", make_state(stability=1000.0, difficulty=9.7, last_review=YESTERDAY, due=NOW + timedelta(days=3))),
        make_item("fresh", make_state(stability=5.0, difficulty=5.4, last_review=NOW, due=NOW + timedelta(days=10))),
    ]
    return build_items_frame(items, NOW)


class TestItemMetrics:
    def test_frame(self, frame):
        assert list(frame["item_id"]) == ["new", "weak", "ok", "solid", "fresh"]
        assert frame.loc[0, "retrievability"] == 0.0
        assert frame.loc[4, "retrievability"] == pytest.approx(1.0)

    def test_retention_buckets(self, frame):
        buckets = retention_buckets(frame)
        assert buckets.to_dict() == {"<80%": 2, "80-90%": 1, "90-99%": 1, ">=99%": 1}

    def test_forecast(self, frame):
        forecast = review_forecast(frame)
        assert len(forecast) == 7
        assert forecast[0] == 2  # overdue new item and the one due now
        assert forecast[1] == 1
        assert forecast[3] == 1
        assert forecast.sum() == 4  # ten days out is beyond the window

    def test_difficulty_distribution(self, frame):
        dist = difficulty_distribution(frame)
        assert list(dist.index) == list(range(1, 11))
        assert dist[1] == 1
        assert dist[5] == 2
        assert dist[10] == 1
        assert dist.sum() == 4

    def test_stability_distribution(self, frame):
        dist = stability_distribution(frame)
        assert dist.to_dict() == {"<1d": 1, "1-7d": 1, "7-21d": 0, "21-90d": 0, ">90d": 2}

    def test_average_memory(self, frame):
        avg_difficulty, avg_stability = average_memory(frame)
        assert avg_difficulty == pytest.approx((1.0 + 5.2 + 9.7 + 5.4) / 4)
        assert avg_stability == pytest.approx((0.5 + 100.0 + 1000.0 + 5.0) / 4)

    def test_retention_bucket_edges(self):
        frame = pd.DataFrame({"retrievability": [0.0, 0.7999, 0.8, 0.9, 0.98, 0.99, 1.0]})
        buckets = retention_buckets(frame)
        assert buckets.to_dict() == {"<80%": 2, "80-90%": 1, "90-99%": 2, ">=99%": 2}

    def test_stability_bucket_edges(self):
        frame = pd.DataFrame({
            "reps": [1, 1, 1, 1, 1, 1, 0],
            "stability": [0.1, 1.0, 7.0, 21.0, 90.0, 99999.0, 50.0],
        })
        dist = stability_distribution(frame)
        # Stability beyond the last bucket is not counted
        assert dist.to_dict() == {"<1d": 1, "1-7d": 1, "7-21d": 1, "21-90d": 1, ">90d": 1}

    def test_empty_library(self):
        frame = build_items_frame([], NOW)
        assert retention_buckets(frame).sum() == 0
        assert review_forecast(frame).sum() == 0
        assert difficulty_distribution(frame).sum() == 0
        assert stability_distribution(frame).sum() == 0
        assert average_memory(frame) == (0.0, 0.0)


class TestActivity:
    @pytest.fixture
    def stats(self):
        return UserStats(history=(
            DailyStat(TODAY - timedelta(days=31), 50),
            DailyStat(TODAY - timedelta(days=30), 4),
            DailyStat(TODAY - timedelta(days=3), 16),
            DailyStat(TODAY - timedelta(days=2), 1),
            DailyStat(TODAY - timedelta(days=1), 6),
            DailyStat(TODAY, 31),
        ))

    def test_heatmap_starts_on_sunday(self, stats):
        heatmap = activity_heatmap(stats, TODAY)
        assert heatmap.index[0].dayofweek == 6
        assert heatmap.index[-1] == pd.Timestamp(TODAY)
        assert len(heatmap) == 16 * 7 + 5 + 1

    def test_heatmap_levels(self, stats):
        heatmap = activity_heatmap(stats, TODAY)
        levels = {
            offset: int(heatmap.loc[pd.Timestamp(TODAY - timedelta(days=offset)), "level"])
            for offset in range(5)
        }
        assert levels == {0: 4, 1: 2, 2: 1, 3: 3, 4: 0}
        assert int(heatmap.loc[pd.Timestamp(TODAY), "count"]) == 31

    def test_heatmap_without_history(self):
        heatmap = activity_heatmap(UserStats(), TODAY, weeks=1)
        assert heatmap["count"].sum() == 0
        assert (heatmap["level"] == 0).all()

    def test_last_30_days(self, stats):
        assert reviews_in_last_days(stats, TODAY) == 4 + 16 + 1 + 6 + 31
