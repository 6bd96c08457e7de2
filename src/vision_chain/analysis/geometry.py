"""Planar geometry helpers shared by the line fitter and circle filters."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import NDArray

from vision_chain.core.exceptions import DegenerateLineError
from vision_chain.core.types import CircleDetection, Point


def point_to_line_distance(a: Point, b: Point, p: Point) -> float:
    """Perpendicular distance from ``p`` to the infinite line through ``a`` and ``b``.

    Args:
        a: First point on the line
        b: Second point on the line
        p: Point to measure

    Returns:
        Distance in the same units as the inputs

    Raises:
        DegenerateLineError: If ``a`` and ``b`` coincide
    """
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0.0:
        raise DegenerateLineError(f"Cannot measure distance to a line through {a} twice")

    return abs((p.x - a.x) * dy - (p.y - a.y) * dx) / length


def point_to_line_distances(
    a: Point,
    b: Point,
    xy: NDArray[np.floating[Any]],
) -> NDArray[np.float64]:
    """Vectorised :func:`point_to_line_distance` over an ``(N, 2)`` array.

    Raises:
        DegenerateLineError: If ``a`` and ``b`` coincide
    """
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0.0:
        raise DegenerateLineError(f"Cannot measure distance to a line through {a} twice")

    xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    cross = (xy[:, 0] - a.x) * dy - (xy[:, 1] - a.y) * dx
    return np.abs(cross) / length


def centers_array(detections: list[CircleDetection]) -> NDArray[np.float64]:
    """Stack detection centers into an ``(N, 2)`` float array."""
    if not detections:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([[d.x, d.y] for d in detections], dtype=np.float64)
