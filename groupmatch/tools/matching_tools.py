"""Group matching: hard filters, ranking, and group assembly.

Everything here is a pure function of its inputs apart from the random
source, which is always passed in explicitly so callers can seed it. No
function mutates a User or the pool it was given.
"""

from __future__ import annotations

import random
from itertools import combinations
from typing import Iterable, Optional, Sequence

from groupmatch.models import (
    GenderMode,
    Group,
    MatchingWeights,
    ScoredCandidate,
    User,
)
from groupmatch.tools.scoring_tools import (
    has_done_activity,
    pair_score,
    weighted_score,
)
from groupmatch.utils.geo import distance_miles
from groupmatch.utils.logging_config import logger

MAX_AGE_GAP_YEARS = 8
MAX_DISTANCE_MILES = 50.0
TIE_EPSILON = 1e-6


def normalize_gender(gender: Optional[str]) -> str:
    """Map male/female (any case) to canonical form, pass others through trimmed."""

    trimmed = (gender or "").strip()
    lowered = trimmed.lower()
    if lowered == "male":
        return "Male"
    if lowered == "female":
        return "Female"
    return trimmed


def clean_activity(activity: Optional[str]) -> Optional[str]:
    trimmed = (activity or "").strip()
    return trimmed or None


def is_eligible(
    me: User,
    candidate: User,
    activity: Optional[str] = None,
    gender_mode: GenderMode = GenderMode.ANY,
) -> bool:
    """Apply every hard filter to one candidate.

    Checks run cheapest first: identity, activity, age, distance, gender.
    """

    if candidate.id == me.id:
        return False

    required = clean_activity(activity)
    if required and not has_done_activity(candidate, required):
        return False

    if abs(me.age - candidate.age) >= MAX_AGE_GAP_YEARS:
        return False

    miles = distance_miles(me.city, candidate.city)
    # Unknown distance never excludes.
    if miles is not None and miles > MAX_DISTANCE_MILES:
        return False

    if gender_mode == GenderMode.SAME_GENDER:
        mine = normalize_gender(me.gender)
        theirs = normalize_gender(candidate.gender)
        if not mine or not theirs or mine.casefold() != theirs.casefold():
            return False

    return True


def filter_candidates(
    me: User,
    pool: Iterable[User],
    activity: Optional[str] = None,
    gender_mode: GenderMode = GenderMode.ANY,
) -> list[User]:
    """Return pool members that pass every hard filter, in pool order.

    Only the first eligible entry for each user id is kept.
    """

    seen: set[str] = set()
    filtered: list[User] = []
    for candidate in pool:
        if candidate.id in seen:
            continue
        if not is_eligible(me, candidate, activity=activity, gender_mode=gender_mode):
            continue
        seen.add(candidate.id)
        filtered.append(candidate)
    logger.debug(
        "filter_candidates user=%s activity_filter=%s result=%s",
        me.id,
        bool(clean_activity(activity)),
        len(filtered),
    )
    return filtered


def rank_candidates(
    me: User,
    pool: Iterable[User],
    activity: Optional[str] = None,
    gender_mode: GenderMode = GenderMode.ANY,
    weights: Optional[MatchingWeights] = None,
    rng: Optional[random.Random] = None,
    score_activity: Optional[str] = None,
) -> list[ScoredCandidate]:
    """Filter and score the pool, best first.

    The scored list is shuffled before a stable sort so equal scores come out
    in random relative order instead of pool order.

    ``score_activity`` is the activity credited by the activity sub-score; it
    defaults to ``activity`` and lets a caller keep crediting the requested
    activity after dropping it as a filter.
    """

    rng = rng or random.Random()
    normalized = (weights or MatchingWeights()).normalized()
    credited = score_activity if score_activity is not None else activity

    scored = [
        ScoredCandidate(
            candidate,
            weighted_score(me, candidate, normalized, activity=credited),
        )
        for candidate in filter_candidates(
            me, pool, activity=activity, gender_mode=gender_mode
        )
    ]
    rng.shuffle(scored)
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored


def select_companions(
    ranked: Sequence[ScoredCandidate],
    companions_needed: int,
    rng: Optional[random.Random] = None,
) -> list[User]:
    """Pick the top ``companions_needed`` users from a ranked list.

    Everyone scoring clearly above the cutoff rank is taken. Remaining seats
    go to a random subset of the users tied (within TIE_EPSILON) with the
    cutoff score.
    """

    if companions_needed <= 0 or not ranked:
        return []

    if len(ranked) < companions_needed:
        return [item.user for item in ranked]

    rng = rng or random.Random()
    cutoff = ranked[companions_needed - 1].score

    chosen: list[User] = []
    index = 0
    while index < len(ranked) and ranked[index].score > cutoff + TIE_EPSILON:
        chosen.append(ranked[index].user)
        index += 1

    remaining = companions_needed - len(chosen)
    if remaining > 0:
        tied: list[User] = []
        while index < len(ranked) and abs(ranked[index].score - cutoff) <= TIE_EPSILON:
            tied.append(ranked[index].user)
            index += 1
        rng.shuffle(tied)
        chosen.extend(tied[:remaining])

    return chosen


def fill_shortfall(
    me: User,
    pool: Iterable[User],
    chosen: Sequence[User],
    desired_size: int,
    gender_mode: GenderMode = GenderMode.ANY,
    rng: Optional[random.Random] = None,
) -> list[User]:
    """Pick random extra companions when ranking left seats empty.

    Extras must pass every hard filter except the activity filter and must
    not already be in the group. Returns only the extras.

    Age and same-gender are checked here on purpose, not just distance, so
    no output ever breaks the age or distance cutoffs.
    """

    missing = desired_size - 1 - len(chosen)
    if missing <= 0:
        return []

    taken = {me.id, *(user.id for user in chosen)}
    leftovers: list[User] = []
    for candidate in pool:
        if candidate.id in taken:
            continue
        if not is_eligible(me, candidate, gender_mode=gender_mode):
            continue
        taken.add(candidate.id)
        leftovers.append(candidate)

    rng = rng or random.Random()
    rng.shuffle(leftovers)
    extras = leftovers[:missing]
    logger.debug(
        "fill_shortfall user=%s missing=%s filled=%s", me.id, missing, len(extras)
    )
    return extras


def match_group(
    me: User,
    pool: Sequence[User],
    desired_size: int,
    activity: Optional[str] = None,
    gender_mode: GenderMode = GenderMode.ANY,
    weights: Optional[MatchingWeights] = None,
    rng: Optional[random.Random] = None,
    fill_shortfall_enabled: bool = True,
) -> list[User]:
    """Assemble a group for ``me`` out of ``pool``.

    The result always starts with ``me`` and holds between 1 and
    ``desired_size`` users. When nobody matches the requested activity the
    pool is ranked again without the activity filter. Never raises for an
    empty or fully ineligible pool; the caller gets a solo group instead.
    """

    if desired_size <= 0:
        return [me]

    companions_needed = desired_size - 1
    if companions_needed == 0:
        return [me]

    rng = rng or random.Random()
    required = clean_activity(activity)

    ranked = rank_candidates(
        me, pool, activity=required, gender_mode=gender_mode, weights=weights, rng=rng
    )
    if not ranked and required:
        logger.debug(
            "match_group user=%s no activity matches; ranking without filter", me.id
        )
        ranked = rank_candidates(
            me,
            pool,
            activity=None,
            gender_mode=gender_mode,
            weights=weights,
            rng=rng,
            score_activity=required,
        )
    if not ranked:
        logger.debug("match_group user=%s no eligible candidates", me.id)
        return [me]

    chosen = select_companions(ranked, companions_needed, rng=rng)

    if fill_shortfall_enabled and len(chosen) < companions_needed:
        chosen = chosen + fill_shortfall(
            me, pool, chosen, desired_size, gender_mode=gender_mode, rng=rng
        )

    return [me, *chosen]


def build_group(
    members: Sequence[User],
    activity: Optional[str],
    desired_size: int,
) -> Group:
    """Summarize an assembled group; the first member is the requester.

    ``affinity`` sums ``pair_score`` over every pair of members.
    """

    group_size = max(1, desired_size)
    requester = members[0] if members else None
    return Group(
        activity=clean_activity(activity) or "",
        group_size=group_size,
        members=list(members),
        matched_user_names=[user.name for user in members[1:]],
        vibe=requester.vibe if requester else "",
        affinity=sum(pair_score(a, b) for a, b in combinations(members, 2)),
        status="locked" if len(members) >= group_size else "forming",
    )
