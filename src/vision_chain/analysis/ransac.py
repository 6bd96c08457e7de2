"""RANSAC line estimation for noisy 2D points.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from vision_chain.analysis.geometry import point_to_line_distances
from vision_chain.core.config import get_settings
from vision_chain.core.exceptions import DegenerateHypothesisError
from vision_chain.core.logging import get_logger
from vision_chain.core.types import Line, Point

logger = get_logger(__name__)


def ransac_line(
    points: Sequence[Point],
    iterations: int,
    inlier_threshold: float,
    rng: np.random.Generator | None = None,
) -> Line:
    """Estimate the line supported by the most points.

    Each iteration draws two distinct points as a hypothesis and counts the
    points within ``inlier_threshold`` of it. The first hypothesis reaching
    the highest count wins, so results are reproducible for a seeded ``rng``.

    A sample whose points share the same coordinates is never scored: the
    second point is redrawn from the points that differ from the first.

    Args:
        points: Candidate points (at least two)
        iterations: Number of hypotheses to score (at least one)
        inlier_threshold: Maximum perpendicular distance for an inlier
        rng: Random source (seeded from the RANSAC settings if None)

    Returns:
        The two points defining the best line

    Raises:
        ValueError: If fewer than two points or invalid parameters are given
        DegenerateHypothesisError: If every point has the same coordinates
    """
    if len(points) < 2:
        raise ValueError(f"RANSAC needs at least 2 points, got {len(points)}")
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    if inlier_threshold < 0:
        raise ValueError(f"inlier_threshold must be >= 0, got {inlier_threshold}")

    rng = rng if rng is not None else np.random.default_rng(get_settings().ransac.seed)
    xy = np.array([[p.x, p.y] for p in points], dtype=np.float64)

    best, best_count = _score_hypothesis(xy, inlier_threshold, rng)
    for _ in range(iterations - 1):
        line, count = _score_hypothesis(xy, inlier_threshold, rng)
        if count > best_count:
            best, best_count = line, count

    logger.debug(
        "RANSAC line %s -> %s supported by %d/%d points",
        best[0],
        best[1],
        best_count,
        len(xy),
    )
    return best


def _score_hypothesis(
    xy: NDArray[np.float64], inlier_threshold: float, rng: np.random.Generator
) -> tuple[Line, int]:
    n = len(xy)
    i = int(rng.integers(n))
    # Indices whose coordinates differ from the first sample
    candidates = np.flatnonzero(np.any(xy != xy[i], axis=1))
    if candidates.size == 0:
        raise DegenerateHypothesisError(
            f"All {n} points coincide at ({xy[i, 0]:g}, {xy[i, 1]:g}); no line can be fit"
        )
    j = int(candidates[rng.integers(candidates.size)])

    a = Point(float(xy[i, 0]), float(xy[i, 1]))
    b = Point(float(xy[j, 0]), float(xy[j, 1]))
    count = int(np.count_nonzero(point_to_line_distances(a, b, xy) <= inlier_threshold))
    return (a, b), count
