"""Matching graph: the host-facing pipeline around the group matcher.

The graph runs the same steps as ``match_group`` (rank, optional
activity-free re-rank, companion selection, shortfall fill) as separate
nodes so hosts get per-step metadata. With the same seed it returns the
same group as ``match_group``.
"""

from __future__ import annotations

import random

from langgraph.graph import StateGraph
from pydantic import ValidationError

from groupmatch.config import config
from groupmatch.graphs.base_graph import BaseGraph
from groupmatch.models import GenderMode, MatchingWeights, User
from groupmatch.state import MatchingState
from groupmatch.tools.matching_tools import (
    build_group,
    clean_activity,
    fill_shortfall,
    rank_candidates,
    select_companions,
)
from groupmatch.tools.sample_data import generate_sample_users
from groupmatch.utils.errors import InvalidInputError
from groupmatch.utils.logging_config import logger


def _parse_user(record: object, label: str) -> User:
    if isinstance(record, User):
        return record
    if isinstance(record, dict):
        try:
            return User.model_validate(record)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid {label}: {exc}") from exc
    raise InvalidInputError(f"Invalid {label}: expected a user record")


def _parse_weights(value: object) -> MatchingWeights:
    if value is None:
        return config.default_weights()
    if isinstance(value, MatchingWeights):
        return value
    if isinstance(value, dict):
        try:
            return MatchingWeights.model_validate(value)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid weights: {exc}") from exc
    raise InvalidInputError("Invalid weights: expected a mapping")


def _parse_gender_mode(value: object) -> GenderMode:
    if value is None:
        return GenderMode.ANY
    try:
        return GenderMode(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown gender mode: {value!r}") from exc


class MatchingGraph(BaseGraph):
    """Group matching as a LangGraph pipeline."""

    name = "matching"

    def build_graph(self) -> StateGraph:
        graph = StateGraph(MatchingState)

        graph.add_node("validate_request", self.node_validate_request)
        graph.add_node("rank_candidates", self.node_rank_candidates)
        graph.add_node(
            "fallback_without_activity", self.node_fallback_without_activity
        )
        graph.add_node("select_companions", self.node_select_companions)
        graph.add_node("fill_shortfall", self.node_fill_shortfall)
        graph.add_node("finalize_response", self.node_finalize_response)

        graph.set_entry_point("validate_request")
        graph.add_edge("validate_request", "rank_candidates")
        graph.add_conditional_edges(
            "rank_candidates",
            self.route_after_ranking,
            {
                "fallback": "fallback_without_activity",
                "select": "select_companions",
            },
        )
        graph.add_edge("fallback_without_activity", "select_companions")
        graph.add_edge("select_companions", "fill_shortfall")
        graph.add_edge("fill_shortfall", "finalize_response")
        graph.set_finish_point("finalize_response")

        return graph

    @staticmethod
    def _companions_needed(state: MatchingState) -> int:
        return max(0, state.get("desired_size", 0) - 1)

    def node_validate_request(self, state: MatchingState) -> MatchingState:
        """Parse the request into engine types and seed the random source."""

        self._log_node_execution("validate_request", state)
        try:
            if state.get("me") is None:
                raise InvalidInputError("Request is missing the requesting user")
            requester = _parse_user(state["me"], "requesting user")

            desired_size = state.get("desired_size", config.DEFAULT_GROUP_SIZE)
            if isinstance(desired_size, bool) or not isinstance(desired_size, int):
                raise InvalidInputError("desired_size must be an integer")
            if desired_size > config.MAX_GROUP_SIZE:
                raise InvalidInputError(
                    f"desired_size {desired_size} exceeds MAX_GROUP_SIZE "
                    f"{config.MAX_GROUP_SIZE}"
                )

            seed = state.get("seed")
            if "pool" in state and state["pool"] is not None:
                candidates = [
                    _parse_user(record, f"pool entry {index}")
                    for index, record in enumerate(state["pool"])
                ]
            else:
                candidates = generate_sample_users(
                    count=config.SAMPLE_POOL_SIZE,
                    seed=seed,
                    min_per_activity=config.SAMPLE_MIN_PER_ACTIVITY,
                )

            return self._with_state(
                state,
                requester=requester,
                candidates=candidates,
                desired_size=desired_size,
                activity=clean_activity(state.get("activity")) or "",
                resolved_gender_mode=_parse_gender_mode(state.get("gender_mode")),
                resolved_weights=_parse_weights(state.get("weights")),
                fill_shortfall=state.get("fill_shortfall", config.FILL_SHORTFALL),
                rng=random.Random(seed),
                ranked=[],
                companions=[],
                activity_fallback=False,
                shortfall_filled=0,
            )
        except InvalidInputError as exc:
            self._log_node_error("validate_request", exc)
            return self._with_state(state, error=str(exc))

    def node_rank_candidates(self, state: MatchingState) -> MatchingState:
        """Rank the pool under the activity filter."""

        if state.get("error") or self._companions_needed(state) == 0:
            return state

        self._log_node_execution("rank_candidates", state)
        ranked = rank_candidates(
            state["requester"],
            state["candidates"],
            activity=state.get("activity") or None,
            gender_mode=state["resolved_gender_mode"],
            weights=state["resolved_weights"],
            rng=state["rng"],
        )
        return self._with_state(state, ranked=ranked)

    def route_after_ranking(self, state: MatchingState) -> str:
        if (
            not state.get("error")
            and self._companions_needed(state) > 0
            and not state.get("ranked")
            and state.get("activity")
        ):
            return "fallback"
        return "select"

    def node_fallback_without_activity(self, state: MatchingState) -> MatchingState:
        """Nobody matched the activity: rank again without that filter."""

        self._log_node_execution("fallback_without_activity", state)
        ranked = rank_candidates(
            state["requester"],
            state["candidates"],
            activity=None,
            gender_mode=state["resolved_gender_mode"],
            weights=state["resolved_weights"],
            rng=state["rng"],
            score_activity=state.get("activity") or None,
        )
        return self._with_state(state, ranked=ranked, activity_fallback=True)

    def node_select_companions(self, state: MatchingState) -> MatchingState:
        """Take the top of the ranking, breaking cutoff ties at random."""

        if state.get("error") or not state.get("ranked"):
            return state

        self._log_node_execution("select_companions", state)
        companions = select_companions(
            state["ranked"], self._companions_needed(state), rng=state["rng"]
        )
        return self._with_state(state, companions=companions)

    def node_fill_shortfall(self, state: MatchingState) -> MatchingState:
        """Top up empty seats with random eligible leftovers."""

        if (
            state.get("error")
            or not state.get("fill_shortfall")
            or not state.get("ranked")
        ):
            return state

        companions = state.get("companions", [])
        if len(companions) >= self._companions_needed(state):
            return state

        self._log_node_execution("fill_shortfall", state)
        extras = fill_shortfall(
            state["requester"],
            state["candidates"],
            companions,
            state["desired_size"],
            gender_mode=state["resolved_gender_mode"],
            rng=state["rng"],
        )
        return self._with_state(
            state,
            companions=[*companions, *extras],
            shortfall_filled=len(extras),
        )

    def node_finalize_response(self, state: MatchingState) -> MatchingState:
        """Construct the final group and response metadata."""

        if state.get("error"):
            return self._with_state(
                state,
                final_group=[],
                response_metadata={
                    "success": False,
                    "error": state.get("error"),
                    "requested_size": state.get("desired_size"),
                    "group_size": 0,
                    "eligible_count": 0,
                    "activity_fallback": False,
                    "shortfall_filled": 0,
                },
            )

        final_group = [state["requester"], *state.get("companions", [])]
        group = build_group(
            final_group, state.get("activity"), state["desired_size"]
        )
        metadata = {
            "success": True,
            "error": None,
            "requested_size": state["desired_size"],
            "group_size": len(final_group),
            "eligible_count": len(state.get("ranked", [])),
            "activity_fallback": state.get("activity_fallback", False),
            "shortfall_filled": state.get("shortfall_filled", 0),
        }
        logger.info(
            "matching: user=%s requested=%s formed=%s status=%s",
            state["requester"].id,
            state["desired_size"],
            len(final_group),
            group.status,
        )

        return self._with_state(
            state, final_group=final_group, group=group, response_metadata=metadata
        )


def create_matching_graph():
    """Build and compile the matching graph for host usage."""

    graph_builder = MatchingGraph(timeout=config.GRAPH_TIMEOUT)
    return graph_builder.compile()


def run_matching(request: dict) -> MatchingState:
    """Run one matching request through the graph and return the final state."""

    return MatchingGraph(timeout=config.GRAPH_TIMEOUT).run(request)


if __name__ == "__main__":
    """Match a demo requester against the synthetic pool:
    python -m groupmatch.graphs.matching"""
    from groupmatch.config import validate_config
    from groupmatch.utils.logging_config import setup_langsmith, setup_logging

    setup_logging(debug=config.DEBUG)
    setup_langsmith()
    validate_config()

    demo = run_matching(
        {
            "me": {"id": "demo", "name": "Demo", "age": 27, "gender": "Female", "city": "Irvine"},
            "desired_size": config.DEFAULT_GROUP_SIZE,
            "activity": "Hiking",
            "seed": 7,
        }
    )
    for member in demo["final_group"]:
        print(f"{member.name:<24} {member.age:>3}  {member.city or '-'}")
    print(demo["response_metadata"])
