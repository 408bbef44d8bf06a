"""Deterministic scoring utilities for matching.

Every sub-score lands in [0, 1]. The weighted candidate score is the sum of
sub-scores multiplied by the normalized MatchingWeights.
"""

from __future__ import annotations

from math import exp
from typing import Optional

from groupmatch.models import MatchingWeights, User
from groupmatch.utils.geo import distance_miles

AGE_HALF_LIFE_YEARS = 5.0
DISTANCE_SOFT_CAP_MILES = 10.0
DISTANCE_DECAY_PER_MILE = 0.08
UNKNOWN_DISTANCE_SCORE = 0.5

EXACT_MATCH_SCORE = 1.0
# Partial credit when both sides answered but differ.
VIBE_CLOSE_SCORE = 0.5
ETHNICITY_CLOSE_SCORE = 0.3
RELIGION_CLOSE_SCORE = 0.5


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def age_score(age_a: int, age_b: int, half_life: float = AGE_HALF_LIFE_YEARS) -> float:
    """Exponential decay on the age gap: 1.0 at the same age, ~0.37 at 5 years."""

    diff = abs(float(age_a - age_b))
    return _clamp(exp(-diff / half_life))


def distance_score(
    miles: Optional[float],
    soft_cap_miles: float = DISTANCE_SOFT_CAP_MILES,
    decay_per_mile: float = DISTANCE_DECAY_PER_MILE,
) -> float:
    """Score a distance in miles.

    Anything inside the soft cap scores 1.0 and each mile past it costs
    ``decay_per_mile``. An unknown distance (None) scores a neutral 0.5 so
    unrecognized cities are neither rewarded nor punished.
    """

    if miles is None:
        return UNKNOWN_DISTANCE_SCORE

    extra = max(0.0, miles - soft_cap_miles)
    penalty = extra * decay_per_mile
    return _clamp(1.0 - penalty)


def city_distance_score(city_a: Optional[str], city_b: Optional[str]) -> float:
    return distance_score(distance_miles(city_a, city_b))


def equality_score(
    a: Optional[str],
    b: Optional[str],
    exact: float = EXACT_MATCH_SCORE,
    close: float = 0.5,
) -> float:
    """Case-insensitive categorical comparison.

    Blank on either side carries no signal and scores 0.
    """

    a_trimmed = (a or "").strip()
    b_trimmed = (b or "").strip()
    if not a_trimmed or not b_trimmed:
        return 0.0
    return exact if a_trimmed.casefold() == b_trimmed.casefold() else close


def vibe_score(a: Optional[str], b: Optional[str]) -> float:
    return equality_score(a, b, close=VIBE_CLOSE_SCORE)


def ethnicity_score(a: Optional[str], b: Optional[str]) -> float:
    return equality_score(a, b, close=ETHNICITY_CLOSE_SCORE)


def religion_score(a: Optional[str], b: Optional[str]) -> float:
    return equality_score(a, b, close=RELIGION_CLOSE_SCORE)


def has_done_activity(user: User, activity: Optional[str]) -> bool:
    """True when the user wants to do, or has attended, the given activity."""

    wanted = (activity or "").strip().casefold()
    if not wanted:
        return False
    if user.activity and user.activity.strip().casefold() == wanted:
        return True
    return any(entry.strip().casefold() == wanted for entry in user.attendance)


def activity_score(candidate: User, activity: Optional[str]) -> float:
    """1.0 if the candidate is into the requested activity, else 0.0."""

    return 1.0 if has_done_activity(candidate, activity) else 0.0


def calculate_candidate_score(
    me: User,
    candidate: User,
    weights: MatchingWeights,
    activity: Optional[str] = None,
) -> float:
    """Weighted compatibility of ``candidate`` for ``me``.

    Weights are normalized here, so callers may pass raw magnitudes.
    """

    return weighted_score(me, candidate, weights.normalized(), activity=activity)


def weighted_score(
    me: User,
    candidate: User,
    w: MatchingWeights,
    activity: Optional[str] = None,
) -> float:
    """Weighted sum of sub-scores; ``w`` must already be normalized."""

    return (
        w.activity * activity_score(candidate, activity)
        + w.age * age_score(me.age, candidate.age)
        + w.distance * city_distance_score(me.city, candidate.city)
        + w.vibe * vibe_score(me.vibe, candidate.vibe)
        + w.ethnicity * ethnicity_score(me.ethnicity, candidate.ethnicity)
        + w.religion * religion_score(me.religion, candidate.religion)
    )


def pair_score(user_a: User, user_b: User) -> int:
    """Quick 0-2 affinity: one point each for matching MBTI and vibe."""

    score = 0
    if user_a.mbti and user_a.mbti == user_b.mbti:
        score += 1
    if user_a.vibe and user_a.vibe == user_b.vibe:
        score += 1
    return score
