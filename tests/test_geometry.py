"""Tests for planar geometry helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from vision_chain.analysis.geometry import (
    centers_array,
    point_to_line_distance,
    point_to_line_distances,
)
from vision_chain.core.exceptions import DegenerateLineError
from vision_chain.core.types import CircleDetection, Point


class TestPointToLineDistance:
    """Tests for the scalar point-to-line distance."""

    def test_horizontal_line(self) -> None:
        """Distance to a horizontal line is the y offset."""
        assert point_to_line_distance(Point(0, 0), Point(10, 0), Point(5, 3)) == 3.0

    def test_point_beyond_segment(self) -> None:
        """The line is infinite, not a segment."""
        assert point_to_line_distance(Point(0, 0), Point(1, 0), Point(100, -4)) == 4.0

    def test_diagonal_line(self) -> None:
        """Distance to y = x from (0, 2) is sqrt(2)."""
        distance = point_to_line_distance(Point(0, 0), Point(1, 1), Point(0, 2))
        assert pytest.approx(distance) == math.sqrt(2)

    def test_symmetric_in_endpoints(self) -> None:
        """Swapping the endpoints gives the same distance."""
        a, b, p = Point(1.5, -2.0), Point(7.0, 4.25), Point(-3.0, 9.0)
        assert point_to_line_distance(a, b, p) == pytest.approx(point_to_line_distance(b, a, p))

    def test_zero_on_line(self) -> None:
        """Points on the line, including the endpoints, are at distance zero."""
        a, b = Point(2, 3), Point(8, 6)
        assert point_to_line_distance(a, b, a) == 0.0
        assert point_to_line_distance(a, b, b) == 0.0
        assert point_to_line_distance(a, b, Point(14, 9)) == pytest.approx(0.0)

    def test_coincident_endpoints_raise(self) -> None:
        """A line through one point twice is rejected."""
        with pytest.raises(DegenerateLineError):
            point_to_line_distance(Point(1, 1), Point(1, 1), Point(5, 5))


class TestPointToLineDistances:
    """Tests for the vectorised distance."""

    def test_matches_scalar(self) -> None:
        """Each entry equals the scalar distance."""
        a, b = Point(-1.0, 2.0), Point(5.0, -3.0)
        xy = np.array([[0.0, 0.0], [4.0, 4.0], [-7.5, 1.25], [5.0, -3.0]])

        distances = point_to_line_distances(a, b, xy)

        expected = [point_to_line_distance(a, b, Point(x, y)) for x, y in xy]
        assert distances.tolist() == pytest.approx(expected)

    def test_coincident_endpoints_raise(self) -> None:
        """Degenerate lines are rejected before any division."""
        with pytest.raises(DegenerateLineError):
            point_to_line_distances(Point(0, 0), Point(0, 0), np.zeros((3, 2)))


class TestCentersArray:
    """Tests for stacking detection centers."""

    def test_empty(self) -> None:
        """No detections gives an empty (0, 2) array."""
        assert centers_array([]).shape == (0, 2)

    def test_stacks_centers(self) -> None:
        """Radii are dropped, order is kept."""
        xy = centers_array([CircleDetection(1, 2, 9), CircleDetection(3, 4, 9)])
        assert xy.tolist() == [[1.0, 2.0], [3.0, 4.0]]
