"""Pure analysis logic: geometry, RANSAC line fitting, and circle filters.

This module contains NO I/O operations and NO OpenCV imports.
All functions operate on typed dataclasses and return results.
"""

from vision_chain.analysis.circle_filters import filter_by_distance, filter_to_line, fit_line
from vision_chain.analysis.geometry import point_to_line_distance, point_to_line_distances
from vision_chain.analysis.ransac import ransac_line

__all__ = [
    "point_to_line_distance",
    "point_to_line_distances",
    "ransac_line",
    "fit_line",
    "filter_by_distance",
    "filter_to_line",
]
