"""
Interval Projection

Turns a stability value into the next due date.

The interval is the algebraic inverse of the forgetting curve: the time
at which predicted retrievability drops to the target retention.
Committed reviews add a small random fuzz so items learned together
do not all come due on the same day.
"""

from __future__ import annotations
from datetime import datetime, timedelta
import logging
import random

from memocurve.fsrs.constants import (
    DECAY_FACTOR,
    FUZZ_RANGE,
    FUZZ_THRESHOLD_DAYS,
    MAX_INTERVAL_DAYS,
)
from memocurve.fsrs.memory_state import SECONDS_PER_DAY


logger = logging.getLogger(__name__)

MS_PER_DAY = SECONDS_PER_DAY * 1000.0


def raw_interval(stability: float, target_retention: float) -> float:
    """
    Days until retrievability decays to target_retention (unclamped).

    Formula: t = (S / F) * (1 / R_target - 1)
    """
    if not 0.0 < target_retention < 1.0:
        raise ValueError(f"target_retention must be in (0, 1), got {target_retention}")
    return (stability / DECAY_FACTOR) * (target_retention ** -1 - 1.0)


def clamp_interval(days: float) -> float:
    return min(max(0.0, days), MAX_INTERVAL_DAYS)


def next_interval(stability: float, target_retention: float) -> float:
    """
    Calculate the next interval in days, clamped to [0, 100 years].

    Args:
        stability: Stability in days
        target_retention: Desired recall probability at the due date

    Returns:
        Interval in days
    """
    return clamp_interval(raw_interval(stability, target_retention))


def fuzz_factor(rng=None) -> float:
    """
    Draw a multiplier from [1 - FUZZ_RANGE, 1 + FUZZ_RANGE].

    rng is any object with a random() method returning a float in [0, 1).
    A failing or misbehaving source degrades to 1.0 (no fuzz).
    """
    source = rng if rng is not None else random
    try:
        u = float(source.random())
    except Exception:
        logger.warning("Random source failed, scheduling without fuzz", exc_info=True)
        return 1.0

    if not 0.0 <= u <= 1.0:
        logger.warning("Random source returned %r outside [0, 1], scheduling without fuzz", u)
        return 1.0

    return (1.0 - FUZZ_RANGE) + u * (2.0 * FUZZ_RANGE)


def fuzzed_interval(stability: float, target_retention: float, rng=None) -> float:
    """
    Calculate the next interval with fuzzing applied.

    Only intervals longer than FUZZ_THRESHOLD_DAYS (before clamping)
    are fuzzed. The result is clamped again afterwards.
    """
    unclamped = raw_interval(stability, target_retention)
    days = clamp_interval(unclamped)
    if unclamped > FUZZ_THRESHOLD_DAYS:
        days = clamp_interval(days * fuzz_factor(rng))
    return days


def due_date(reviewed_at: datetime, days: float) -> datetime:
    """Add an interval in days to reviewed_at, rounded to the millisecond."""
    return reviewed_at + timedelta(milliseconds=round(days * MS_PER_DAY))


def project_next_review(
    reviewed_at: datetime,
    stability: float,
    target_retention: float,
    rng=None,
    fuzz: bool = True
) -> datetime:
    """
    Project the next due date for a freshly updated stability.

    Args:
        reviewed_at: Review timestamp
        stability: Stability after the review
        target_retention: Desired retention
        rng: Optional random source for fuzzing
        fuzz: Disable to get the deterministic interval

    Returns:
        Next due date (never before reviewed_at)
    """
    if fuzz:
        days = fuzzed_interval(stability, target_retention, rng)
    else:
        days = next_interval(stability, target_retention)
    return due_date(reviewed_at, days)
