"""
FSRS Constants and Parameters

All tunable parameters of the scheduling model in one place.

The weights follow the FSRS v4.5 layout:
- w0-w3:   initial stability per grade
- w4-w7:   difficulty (base, first-review bias, update delta, mean reversion)
- w8-w10:  stability growth on recall
- w11-w14: stability rebuild on lapse
- w15-w16: hard penalty / easy bonus on recall
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Sequence


# ---- Ratings ----

class Rating(IntEnum):
    """Algorithmic grade for a single review."""
    FORGOT = 1  # Retrieval failed (lapse)
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


class ReviewScore(IntEnum):
    """Five-point self-assessment shown to the learner."""
    FAIL = 1   # Completely forgotten
    HARD = 2   # Vague memory, could not recall
    GOOD = 3   # Recalled with effort
    CLEAR = 4  # Clearly remembered
    EASY = 5   # Instant recall


# UI score -> algorithmic grade. CLEAR and EASY collapse to the same grade.
RATING_BY_SCORE: dict[ReviewScore, Rating] = {
    ReviewScore.FAIL: Rating.FORGOT,
    ReviewScore.HARD: Rating.HARD,
    ReviewScore.GOOD: Rating.GOOD,
    ReviewScore.CLEAR: Rating.EASY,
    ReviewScore.EASY: Rating.EASY,
}


class InvalidMemoryStateError(ValueError):
    """Raised when a memory state is structurally invalid."""


def to_rating(value: Rating | ReviewScore | str) -> Rating:
    """
    Map a rating from any supported boundary representation to a Rating.

    Accepts a Rating, a five-point ReviewScore, or a rating name
    ("forgot", "hard", "good", "easy", case-insensitive).
    Plain integers are rejected because 1-4 grades and 1-5 scores overlap.

    Raises:
        ValueError: for any other input
    """
    if isinstance(value, Rating):
        return value
    if isinstance(value, ReviewScore):
        return RATING_BY_SCORE[value]
    if isinstance(value, str):
        try:
            return Rating[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown rating name: {value!r}") from None
    raise ValueError(f"Unsupported rating: {value!r}")


# ---- Global Constants ----

DECAY_FACTOR = 19.0          # F in R = (1 + F * t / S) ^ -1
S_MIN = 0.1                  # Minimum stability (days) once reviewed
D_MIN = 1.0                  # Minimum difficulty
D_MAX = 10.0                 # Maximum difficulty
MAX_INTERVAL_DAYS = 36500.0  # 100-year ceiling
HISTORY_CAPACITY = 10        # Review log entries kept per item


# ---- Fuzzing ----

FUZZ_THRESHOLD_DAYS = 2.5  # Only intervals longer than this are fuzzed
FUZZ_RANGE = 0.05          # Factor drawn from [1 - range, 1 + range]


# ---- Learning Parameters ----

@dataclass(frozen=True)
class FSRSParameters:
    """
    Immutable weight table for the update rules.

    Pass an instance into every update call; swap it for tests or
    for a re-tuned parameter set without touching the update logic.
    """
    initial_stability: tuple[float, float, float, float] = (0.40255, 1.18385, 3.173, 15.69105)
    base_difficulty: float = 7.19605
    difficulty_bias_weight: float = 0.5345
    difficulty_delta_weight: float = 1.4604
    mean_reversion_weight: float = 0.0046
    growth_const: float = 1.54575
    stability_exponent: float = 0.1192
    retrievability_growth_weight: float = 1.01925
    forget_const: float = 1.9395
    forget_difficulty_exp: float = 0.11
    forget_stability_exp: float = 0.29605
    forget_retrievability_weight: float = 1.25985
    hard_penalty: float = 0.2272
    easy_bonus: float = 2.8755

    def __post_init__(self):
        if len(self.initial_stability) != len(Rating):
            raise ValueError("initial_stability needs one value per rating")
        if min(self.initial_stability) < S_MIN:
            raise ValueError(f"initial_stability values must be >= {S_MIN}")
        if not 0.0 <= self.mean_reversion_weight <= 1.0:
            raise ValueError("mean_reversion_weight must be in [0, 1]")
        if not 0.0 <= self.hard_penalty <= 1.0:
            raise ValueError("hard_penalty must be in [0, 1]")
        if self.easy_bonus < 1.0:
            raise ValueError("easy_bonus must be >= 1")

    def stability_for(self, rating: Rating) -> float:
        """Initial stability for a first review with this rating."""
        return self.initial_stability[rating - 1]

    @property
    def weights(self) -> tuple[float, ...]:
        """The parameters as a flat w0-w16 vector."""
        flat: list[float] = list(self.initial_stability)
        flat.extend(getattr(self, f.name) for f in fields(self)[1:])
        return tuple(flat)

    @classmethod
    def from_weights(cls, weights: Sequence[float]) -> "FSRSParameters":
        """
        Build parameters from a w0-w16 vector.

        Extra trailing slots (reserved weights) are ignored.
        """
        if len(weights) < 17:
            raise ValueError(f"Expected at least 17 weights, got {len(weights)}")
        names = [f.name for f in fields(cls)[1:]]
        return cls(
            initial_stability=tuple(float(w) for w in weights[:4]),
            **{name: float(w) for name, w in zip(names, weights[4:17])},
        )


DEFAULT_PARAMETERS = FSRSParameters()
