"""
Tests for the Classifier.

These tests verify that:
1. Values map to the expected category
2. The shared-endpoint tie-break is pinned (upper boundary wins)
3. Unmatched values are reported as Unclassified
"""

import math

import pytest

from veribound.boundaries import Boundary, BoundarySet, require_well_formed
from veribound.classifier import classify, classify_many, classify_or_raise
from veribound.errors import ErrorKind, Unclassified


@pytest.fixture
def capital_bands():
    return require_well_formed(
        BoundarySet.build([
            Boundary(0.0, 4.5, "Critical"),
            Boundary(4.5, 6.0, "Watch"),
            Boundary(6.0, 8.0, "Adequate"),
            Boundary(8.0, 100.0, "Excellent"),
        ]),
        0.0,
        100.0,
    )


# =============================================================================
# CLASSIFICATION
# =============================================================================

class TestClassify:
    """Test classification against the regulatory capital bands."""

    def test_interior_value(self, capital_bands):
        """7.5 falls in the Adequate band."""
        assert classify(capital_bands, 7.5) == "Adequate"

    def test_shared_endpoint_goes_to_upper_boundary(self, capital_bands):
        """4.5 is shared by Critical and Watch; Watch owns it."""
        assert classify(capital_bands, 4.5) == "Watch"

    @pytest.mark.parametrize("value,expected", [
        (0.0, "Critical"),
        (4.499999, "Critical"),
        (6.0, "Adequate"),
        (8.0, "Excellent"),
        (100.0, "Excellent"),
    ])
    def test_endpoints(self, capital_bands, value, expected):
        """Lower ends are inclusive; the last upper end is inclusive."""
        assert classify(capital_bands, value) == expected

    @pytest.mark.parametrize("value", [-0.1, 100.5, math.inf, float("nan")])
    def test_outside_every_boundary(self, capital_bands, value):
        """Out-of-range and NaN values are unclassified."""
        assert classify(capital_bands, value) is None

    def test_accepts_unvalidated_set(self):
        """classify itself never re-validates."""
        boundary_set = BoundarySet.build([Boundary(0.0, 1.0, "Only")])
        assert classify(boundary_set, 0.5) == "Only"

    def test_first_match_wins_on_overlap(self):
        """On an unsound set the first sorted match is returned."""
        boundary_set = BoundarySet.build([
            Boundary(0.0, 5.0, "Low"),
            Boundary(4.0, 10.0, "High"),
        ])
        assert classify(boundary_set, 4.5) == "Low"

    def test_zero_width_interior_boundary_matches_nothing(self):
        """A zero-width band that is not last is empty."""
        boundary_set = BoundarySet.build([
            Boundary(0.0, 5.0, "Low"),
            Boundary(5.0, 5.0, "Point"),
            Boundary(5.0, 10.0, "High"),
        ])
        assert classify(boundary_set, 5.0) == "High"

    def test_zero_width_last_boundary_is_closed(self):
        """A zero-width last band matches its single point."""
        boundary_set = BoundarySet.build([
            Boundary(0.0, 5.0, "Low"),
            Boundary(5.0, 5.0, "Cap"),
        ])
        assert classify(boundary_set, 5.0) == "Cap"

    def test_idempotent(self, capital_bands):
        """Repeated calls give the same category."""
        assert classify(capital_bands, 5.0) == classify(capital_bands, 5.0)


class TestClassifyOrRaise:
    """Test the strict variant for callers that treat Unclassified as fatal."""

    def test_returns_category(self, capital_bands):
        """Matched values return their category."""
        assert classify_or_raise(capital_bands, 2.0) == "Critical"

    def test_raises_unclassified(self, capital_bands):
        """Unmatched values raise with the offending value."""
        with pytest.raises(Unclassified) as exc_info:
            classify_or_raise(capital_bands, -1.0)
        assert exc_info.value.value == -1.0
        assert exc_info.value.kind is ErrorKind.UNCLASSIFIED


class TestClassifyMany:
    """Test batch classification."""

    def test_batch(self, capital_bands):
        """Each value is classified independently."""
        assert classify_many(capital_bands, [1.0, 5.0, 7.0, 50.0, 200.0]) == [
            "Critical", "Watch", "Adequate", "Excellent", None,
        ]

    def test_empty_batch(self, capital_bands):
        """An empty batch yields an empty list."""
        assert classify_many(capital_bands, []) == []
