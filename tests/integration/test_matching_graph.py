"""
Integration tests for the matching graph.

These tests validate that the LangGraph pipeline:
  1. Compiles and runs end to end without external services
  2. Returns the same group as the matcher for the same seed
  3. Reports fallback and shortfall steps in response metadata
  4. Turns bad input into an error response instead of crashing
"""

import random

import pytest
from groupmatch.graphs.matching import MatchingGraph, create_matching_graph, run_matching
from groupmatch.models import GenderMode, Group, MatchingWeights
from groupmatch.tools.matching_tools import match_group


@pytest.fixture
def pool(make_user):
    """Ten nearby candidates; two of them bowl."""
    users = [make_user(f"c{i}", age=25 + (i % 6)) for i in range(8)]
    users.append(make_user("bowler1", activity="Bowling"))
    users.append(make_user("bowler2", attendance=["Bowling"]))
    return users


class TestGraphCompilation:
    """Test graph construction."""

    def test_create_matching_graph(self):
        """The compiled graph should expose invoke()."""
        graph = create_matching_graph()
        assert hasattr(graph, "invoke")

    def test_compile_is_cached(self):
        builder = MatchingGraph()
        assert builder.compile() is builder.compile()


class TestGraphExecution:
    """Test matching through the graph."""

    def test_matches_engine_for_same_seed(self, me, pool):
        """Graph output equals match_group with the same seed."""
        weights = MatchingWeights()
        result = run_matching(
            {
                "me": me,
                "pool": pool,
                "desired_size": 4,
                "activity": "Bowling",
                "gender_mode": "any",
                "weights": weights,
                "seed": 21,
            }
        )
        expected = match_group(
            me, pool, 4, activity="Bowling", weights=weights, rng=random.Random(21)
        )
        assert [u.id for u in result["final_group"]] == [u.id for u in expected]

    def test_response_metadata(self, me, pool):
        result = run_matching(
            {"me": me, "pool": pool, "desired_size": 4, "activity": "Bowling", "seed": 1}
        )
        metadata = result["response_metadata"]
        assert metadata["success"] is True
        assert metadata["group_size"] == 4
        assert metadata["eligible_count"] == 2
        assert metadata["shortfall_filled"] == 1
        assert metadata["activity_fallback"] is False
        assert isinstance(result["group"], Group)
        assert result["group"].status == "locked"

    def test_activity_fallback_reported(self, me, pool):
        result = run_matching(
            {
                "me": me,
                "pool": pool,
                "desired_size": 3,
                "activity": "underwater basket weaving",
                "seed": 1,
            }
        )
        assert result["response_metadata"]["activity_fallback"] is True
        assert len(result["final_group"]) == 3

    def test_accepts_raw_records(self, pool):
        """Hosts may send plain dicts with camelCase aliases."""
        records = [u.model_dump(by_alias=True) for u in pool]
        result = run_matching(
            {
                "me": {"id": "host-user", "age": 27, "gender": "female", "city": "Irvine"},
                "pool": records,
                "desired_size": 3,
                "gender_mode": "sameGenderOnly",
                "weights": {"activity": 1, "age": 1, "distance": 1},
                "seed": 3,
            }
        )
        assert result["final_group"][0].id == "host-user"
        assert len(result["final_group"]) == 3
        assert result["resolved_gender_mode"] == GenderMode.SAME_GENDER

    def test_default_pool_is_synthetic(self, make_user):
        requester = make_user("req", age=30, city="Los Angeles")
        result = run_matching({"me": requester, "desired_size": 4, "seed": 7})
        assert result["response_metadata"]["success"] is True
        assert len(result["candidates"]) > 3

    def test_solo_request(self, me, pool):
        result = run_matching({"me": me, "pool": pool, "desired_size": 1, "seed": 1})
        assert result["final_group"] == [me]
        assert result["group"].status == "locked"


class TestGraphErrors:
    """Test invalid input handling."""

    def test_missing_requester(self, pool):
        result = run_matching({"pool": pool, "desired_size": 3})
        assert result["response_metadata"]["success"] is False
        assert "requesting user" in result["error"]
        assert result["final_group"] == []

    def test_unknown_gender_mode(self, me, pool):
        result = run_matching({"me": me, "pool": pool, "gender_mode": "sometimes"})
        assert result["response_metadata"]["success"] is False
        assert "gender mode" in result["error"]

    def test_negative_weight_rejected(self, me, pool):
        result = run_matching({"me": me, "pool": pool, "weights": {"age": -1}})
        assert "Invalid weights" in result["error"]

    def test_group_size_over_limit(self, me, pool):
        result = run_matching({"me": me, "pool": pool, "desired_size": 500})
        assert "MAX_GROUP_SIZE" in result["error"]

    def test_bad_pool_entry(self, me):
        result = run_matching({"me": me, "pool": [{"name": "no age"}]})
        assert "pool entry 0" in result["error"]
