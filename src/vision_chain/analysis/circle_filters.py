"""Geometric filters over detected circles.

Filters return a new list holding a subsequence of their input: entries are
never reordered, duplicated or modified.
"""

from __future__ import annotations

import math

import numpy as np

from vision_chain.analysis.geometry import centers_array, point_to_line_distances
from vision_chain.analysis.ransac import ransac_line
from vision_chain.core.logging import get_logger
from vision_chain.core.types import DetectionSet, Line

logger = get_logger(__name__)

DEFAULT_LINE_ITERATIONS = 100


def filter_by_distance(
    detections: DetectionSet,
    origin_x: float,
    origin_y: float,
    min_distance: float,
    max_distance: float,
) -> DetectionSet:
    """Keep detections whose center lies in an annulus around an origin.

    Both bounds are inclusive.

    Args:
        detections: Circles to filter
        origin_x: Annulus center x in pixels
        origin_y: Annulus center y in pixels
        min_distance: Inner radius in pixels
        max_distance: Outer radius in pixels

    Returns:
        Detections within ``[min_distance, max_distance]`` of the origin
    """
    kept = [
        d
        for d in detections
        if min_distance <= math.hypot(d.x - origin_x, d.y - origin_y) <= max_distance
    ]
    logger.debug(
        "Distance filter (%.1f, %.1f) [%.1f, %.1f]: kept %d/%d",
        origin_x,
        origin_y,
        min_distance,
        max_distance,
        len(kept),
        len(detections),
    )
    return kept


def fit_line(
    detections: DetectionSet,
    max_distance: float,
    iterations: int = DEFAULT_LINE_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> Line | None:
    """Fit a RANSAC line through detection centers.

    Returns:
        The fitted line, or None when fewer than two distinct centers exist
    """
    xy = centers_array(detections)
    if len(np.unique(xy, axis=0)) < 2:
        return None

    return ransac_line([d.center for d in detections], iterations, max_distance, rng)


def filter_to_line(
    detections: DetectionSet,
    max_distance: float,
    iterations: int = DEFAULT_LINE_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> DetectionSet:
    """Keep detections lying within ``max_distance`` of their best-fit line.

    The line is estimated with RANSAC, then every detection is tested against
    it. With fewer than two distinct centers no line exists and the input is
    returned unchanged.

    Args:
        detections: Circles to filter
        max_distance: Inlier threshold in pixels
        iterations: RANSAC iterations
        rng: Random source for RANSAC (seeded from the RANSAC settings if None)

    Returns:
        Detections close to the fitted line
    """
    line = fit_line(detections, max_distance, iterations, rng)
    if line is None:
        logger.debug("Line filter: %d detection(s), passing through", len(detections))
        return list(detections)

    a, b = line
    distances = point_to_line_distances(a, b, centers_array(detections))
    kept = [d for d, dist in zip(detections, distances) if dist <= max_distance]
    logger.debug("Line filter (max %.2f px): kept %d/%d", max_distance, len(kept), len(detections))
    return kept
