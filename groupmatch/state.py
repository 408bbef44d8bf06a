"""Shared LangGraph state definitions.

Graph states are TypedDicts so the fields each node reads and writes are
explicit and consistent across graph nodes.
"""

from __future__ import annotations

import random
from typing import Any, TypedDict

from groupmatch.models import GenderMode, Group, MatchingWeights, ScoredCandidate, User

JsonDict = dict[str, object]


class MatchingState(TypedDict, total=False):
    """State for the group matching graph.

    Fields are optional at runtime because nodes populate them progressively.
    """

    # Requesting user, as a User or a raw record.
    me: Any
    # Candidate pool, as Users or raw records. Missing = synthetic pool.
    pool: list[Any]
    # Total group size including the requester.
    desired_size: int
    # Activity the group is for; empty means no activity filter.
    activity: str
    # Gender matching mode (enum or its string value).
    gender_mode: Any
    # Scoring weights (model or dict). Missing = config defaults.
    weights: Any
    # Seed for the tie-breaking random source.
    seed: int
    # Whether empty seats may be filled at random after ranking.
    fill_shortfall: bool

    # Populated by validate_request.
    requester: User
    candidates: list[User]
    resolved_gender_mode: GenderMode
    resolved_weights: MatchingWeights
    rng: random.Random
    # Candidates that passed the hard filters, best first.
    ranked: list[ScoredCandidate]
    # True when ranking had to drop the activity filter.
    activity_fallback: bool
    # Companions picked so far.
    companions: list[User]
    # Companions added by the random shortfall stage.
    shortfall_filled: int
    # Requester followed by companions.
    final_group: list[User]
    group: Group
    # Error string if any node fails.
    error: str
    # Response metadata for observability.
    response_metadata: JsonDict
