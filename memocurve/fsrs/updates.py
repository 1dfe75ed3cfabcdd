"""
State Update Rules

Implements difficulty and stability transitions for a single review.

Two branches:
- First review: no history to extrapolate from, so stability comes
  from a per-rating lookup and difficulty from a fixed base
- Later reviews: difficulty is nudged by the rating and mean-reverted,
  stability grows on recall or is rebuilt on a lapse

Key principles:
- Successful recall at low retrievability produces the largest gains
- Failures are penalized more when recall was expected (high R)
- Difficulty drifts back toward a global target
"""

from __future__ import annotations
from dataclasses import dataclass
import math

from memocurve.fsrs.constants import (
    DEFAULT_PARAMETERS,
    D_MAX,
    D_MIN,
    FSRSParameters,
    Rating,
    S_MIN,
)
from memocurve.fsrs.memory_state import MemoryState


@dataclass(frozen=True)
class StateUpdate:
    """Result of the update rules, before interval projection."""
    stability: float
    difficulty: float
    reps: int
    lapses: int
    consecutive_correct: int


def clamp_difficulty(difficulty: float) -> float:
    return min(max(D_MIN, difficulty), D_MAX)


def initial_difficulty(rating: Rating, params: FSRSParameters = DEFAULT_PARAMETERS) -> float:
    """
    Difficulty after the first review.

    Formula:
        D_0 = clip(base - bias_weight * (rating - GOOD), 1, 10)

    Harder first ratings push difficulty up, easier ones push it down.
    """
    return clamp_difficulty(
        params.base_difficulty - params.difficulty_bias_weight * (rating - Rating.GOOD)
    )


def initial_stability(rating: Rating, params: FSRSParameters = DEFAULT_PARAMETERS) -> float:
    """Stability after the first review (per-rating lookup)."""
    return params.stability_for(rating)


def next_difficulty(
    difficulty: float,
    rating: Rating,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Update difficulty after a later review.

    Formula:
        D' = D - delta_weight * (rating - GOOD)
        D_new = clip(w * D_target + (1 - w) * D', 1, 10)

    Where D_target is the first-review difficulty of a GOOD rating,
    and w is the mean reversion weight.
    """
    nudged = difficulty - params.difficulty_delta_weight * (rating - Rating.GOOD)
    target = initial_difficulty(Rating.GOOD, params)
    reverted = params.mean_reversion_weight * target + (1.0 - params.mean_reversion_weight) * nudged
    return clamp_difficulty(reverted)


def next_stability_on_recall(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S_new = S * (1 + e^g * (11 - D) * S^-k * (e^(m * (1 - R)) - 1) * penalty * bonus)

    Where:
        - (e^(m * (1 - R)) - 1) rewards recall close to forgetting
        - S^-k damps growth for already stable items
        - penalty < 1 applies to HARD, bonus > 1 applies to EASY

    Args:
        difficulty: Difficulty before this review
        stability: Stability before this review
        retrievability: Retrievability at the moment of review
        rating: HARD, GOOD or EASY

    Returns:
        New stability value (never below the previous one)
    """
    if rating == Rating.FORGOT:
        raise ValueError("Use next_stability_on_lapse for FORGOT ratings")

    hard_penalty = params.hard_penalty if rating == Rating.HARD else 1.0
    easy_bonus = params.easy_bonus if rating == Rating.EASY else 1.0

    growth = (
        math.exp(params.growth_const)
        * (11.0 - difficulty)
        * stability ** -params.stability_exponent
        * (math.exp(params.retrievability_growth_weight * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return max(S_MIN, stability * (1.0 + growth))


def next_stability_on_lapse(
    difficulty: float,
    stability: float,
    retrievability: float,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Rebuild stability after a failed retrieval (Forgot).

    Formula:
        S_new = max(S_min, c * D^-a * ((S + 1)^b - 1) * e^(w * (1 - R)))

    Forgetting an item that should have been remembered (high R)
    yields a lower stability than forgetting a genuinely faded one.
    """
    rebuilt = (
        params.forget_const
        * difficulty ** -params.forget_difficulty_exp
        * ((stability + 1.0) ** params.forget_stability_exp - 1.0)
        * math.exp(params.forget_retrievability_weight * (1.0 - retrievability))
    )
    return max(S_MIN, rebuilt)


def apply_update(
    state: MemoryState,
    rating: Rating,
    retrievability: float,
    params: FSRSParameters = DEFAULT_PARAMETERS
) -> StateUpdate:
    """
    Apply the update rules to get new S, D and counters.

    This is the main entry point for state updates. It does not touch
    timestamps or history; see scheduler.apply_review.

    Args:
        state: Current memory state
        rating: Review rating
        retrievability: Retrievability at the moment of review
        params: Weight table

    Returns:
        StateUpdate with the new values
    """
    forgot = rating == Rating.FORGOT

    if state.reps == 0:
        return StateUpdate(
            stability=initial_stability(rating, params),
            difficulty=initial_difficulty(rating, params),
            reps=1,
            lapses=1 if forgot else 0,
            consecutive_correct=0 if forgot else 1
        )

    # Stability uses the difficulty before this review
    if forgot:
        new_stability = next_stability_on_lapse(
            state.difficulty, state.stability, retrievability, params
        )
    else:
        new_stability = next_stability_on_recall(
            state.difficulty, state.stability, retrievability, rating, params
        )

    return StateUpdate(
        stability=new_stability,
        difficulty=next_difficulty(state.difficulty, rating, params),
        reps=state.reps + 1,
        lapses=state.lapses + (1 if forgot else 0),
        consecutive_correct=0 if forgot else state.consecutive_correct + 1
    )
