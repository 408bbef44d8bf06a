"""
Unit tests for the city table and haversine distance.

Edge cases tested include:
  - Case and whitespace differences in city names
  - Missing, blank and unknown cities
  - Same-city distance
"""

import pytest
from groupmatch.utils.geo import (
    CITY_COORDS,
    city_coordinates,
    distance_miles,
    haversine_miles,
)


class TestCityTable:
    """Test the static city coordinate table."""

    def test_keys_are_normalized(self):
        """Every key should already be lowercase and trimmed."""
        for name in CITY_COORDS:
            assert name == name.strip().lower()

    def test_table_is_read_only(self):
        """The table must not be mutable at runtime."""
        with pytest.raises(TypeError):
            CITY_COORDS["atlantis"] = (0.0, 0.0)

    def test_lookup_ignores_case_and_whitespace(self):
        """Lookups should be case-insensitive and trimmed."""
        assert city_coordinates("  LOS Angeles ") == CITY_COORDS["los angeles"]

    @pytest.mark.parametrize("city", [None, "", "   ", "Nowhereville"])
    def test_unknown_city_returns_none(self, city):
        """Missing or unknown names resolve to None."""
        assert city_coordinates(city) is None


class TestDistanceMiles:
    """Test distance between named cities."""

    def test_los_angeles_to_san_diego(self):
        """LA to San Diego is roughly 111-112 miles as the crow flies."""
        miles = distance_miles("Los Angeles", "San Diego")
        assert miles == pytest.approx(111.48, abs=0.05)

    def test_symmetric(self):
        """Distance should not depend on argument order."""
        assert distance_miles("Irvine", "Anaheim") == pytest.approx(
            distance_miles("Anaheim", "Irvine")
        )

    def test_same_city_is_zero(self):
        """A city is zero miles from itself."""
        assert distance_miles("Irvine", "irvine") == pytest.approx(0.0)

    @pytest.mark.parametrize(
        "city_a, city_b",
        [("Irvine", "Nowhereville"), (None, "Irvine"), ("Irvine", ""), (None, None)],
    )
    def test_unknown_side_returns_none(self, city_a, city_b):
        """Either side unknown means the distance is unknown, not zero."""
        assert distance_miles(city_a, city_b) is None


class TestHaversine:
    """Test the raw haversine formula."""

    def test_one_degree_latitude(self):
        """One degree of latitude is about 69 miles."""
        assert haversine_miles(0.0, 0.0, 1.0, 0.0) == pytest.approx(69.09, abs=0.05)

    def test_antipodal_points_do_not_fail(self):
        """Antipodal points give half the circumference without a domain error."""
        miles = haversine_miles(0.0, 0.0, 0.0, 180.0)
        assert miles == pytest.approx(3.141592653589793 * 3958.7613, rel=1e-9)
