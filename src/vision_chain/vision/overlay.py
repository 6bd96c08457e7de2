"""Overlay rendering for detections, contours, and fitted lines."""

from __future__ import annotations

import colorsys
from collections.abc import Sequence
from typing import TYPE_CHECKING

import cv2
import numpy as np

from vision_chain.core.config import OverlaySettings
from vision_chain.core.types import CircleDetection, Point

if TYPE_CHECKING:
    from numpy.typing import NDArray

Color = tuple[int, int, int]  # BGR


def complementary(color: Color) -> Color:
    """Rotate a BGR color's hue by 180 degrees."""
    b, g, r = color
    h, l, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    r2, g2, b2 = colorsys.hls_to_rgb((h + 0.5) % 1.0, l, s)
    return int(round(b2 * 255)), int(round(g2 * 255)), int(round(r2 * 255))


def indexed_color(i: int) -> Color:
    """Pick a color for the i-th object in a list.

    Successive indices give visibly different colors; uniqueness is not
    guaranteed.
    """
    h = (i * i) % 360
    s = max((i * i) % 100, 50)
    l = max((i * i) % 100, 50)
    r, g, b = colorsys.hls_to_rgb(h / 360, l / 100, s / 100)
    return int(round(b * 255)), int(round(g * 255)), int(round(r * 255))


def _as_bgr(image: NDArray[np.uint8]) -> NDArray[np.uint8]:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image.copy()


class OverlayRenderer:
    """Draws pipeline results onto images.

    All methods return a new BGR image and leave their input untouched.
    """

    def __init__(self, settings: OverlaySettings | None = None) -> None:
        """Initialize renderer with settings.

        Args:
            settings: Overlay settings (uses defaults if None)
        """
        self.settings = settings or OverlaySettings()

    def draw_circles(
        self,
        image: NDArray[np.uint8],
        detections: Sequence[CircleDetection],
        color: Color | None = None,
    ) -> NDArray[np.uint8]:
        """Draw each circle outline with a center dot in the complementary color.

        Args:
            image: Base image
            detections: Circles to draw
            color: Outline color (settings default if None)

        Returns:
            Image with circles drawn
        """
        color = color or self.settings.circle_color
        center_color = complementary(color)
        output = _as_bgr(image)
        thickness = self.settings.thickness

        for d in detections:
            center = (int(round(d.x)), int(round(d.y)))
            cv2.circle(output, center, int(d.radius), color, thickness)
            cv2.circle(output, center, 1, center_color, thickness)

        return output

    def draw_contours(
        self,
        image: NDArray[np.uint8],
        contours: Sequence[NDArray[np.int32]],
        color: Color | None = None,
        thickness: int = 1,
    ) -> NDArray[np.uint8]:
        """Draw contours; each gets its own color when ``color`` is None."""
        output = _as_bgr(image)
        if color is None:
            for i in range(len(contours)):
                cv2.drawContours(output, contours, i, indexed_color(i), thickness)
        else:
            cv2.drawContours(output, contours, -1, color, thickness)
        return output

    def draw_contour_rects(
        self,
        image: NDArray[np.uint8],
        contours: Sequence[NDArray[np.int32]],
        color: Color | None = None,
        thickness: int = 1,
    ) -> NDArray[np.uint8]:
        """Draw the minimum-area rotated rectangle of each contour."""
        output = _as_bgr(image)
        for i, contour in enumerate(contours):
            rect = cv2.minAreaRect(contour.astype(np.float32))
            box = cv2.boxPoints(rect).astype(np.int32)
            cv2.polylines(output, [box], True, color or indexed_color(i), thickness)
        return output

    def draw_line(
        self,
        image: NDArray[np.uint8],
        a: Point,
        b: Point,
        color: Color | None = None,
        thickness: int = 1,
    ) -> NDArray[np.uint8]:
        """Draw the infinite line through two points across the whole image."""
        output = _as_bgr(image)
        height, width = output.shape[:2]

        if a.x != b.x:
            slope = (a.y - b.y) / (a.x - b.x)
            intercept = a.y - slope * a.x
            p = (0, int(round(intercept)))
            q = (width, int(round(slope * width + intercept)))
        else:
            # Vertical lines have no slope
            p = (int(round(a.x)), 0)
            q = (int(round(a.x)), height)

        cv2.line(output, p, q, color or self.settings.circle_color, thickness)
        return output
