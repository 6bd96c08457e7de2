"""Tests for overlay rendering."""

from __future__ import annotations

import numpy as np

from vision_chain.core.types import CircleDetection, Point
from vision_chain.vision.overlay import OverlayRenderer, complementary, indexed_color


class TestColors:
    """Tests for color helpers."""

    def test_complementary_of_red_is_cyan(self) -> None:
        """Red (BGR) rotates to cyan."""
        assert complementary((0, 0, 255)) == (255, 255, 0)

    def test_indexed_colors_differ(self) -> None:
        """Neighbouring indices give different colors."""
        colors = [indexed_color(i) for i in range(1, 6)]
        assert len(set(colors)) == len(colors)


class TestOverlayRenderer:
    """Tests for the OverlayRenderer class."""

    def test_draw_circles_leaves_input(self) -> None:
        """Drawing happens on a BGR copy."""
        image = np.zeros((50, 50), np.uint8)
        output = OverlayRenderer().draw_circles(image, [CircleDetection(25, 25, 10)], (0, 255, 0))

        assert output.shape == (50, 50, 3)
        assert not image.any()
        assert tuple(output[25, 35]) == (0, 255, 0)

    def test_draw_line_spans_image(self) -> None:
        """The line reaches both image borders."""
        image = np.zeros((40, 100, 3), np.uint8)
        output = OverlayRenderer().draw_line(image, Point(40, 20), Point(60, 20), (255, 255, 255))

        assert output[20, 0].any()
        assert output[20, 99].any()

    def test_draw_vertical_line(self) -> None:
        """Vertical lines are drawn top to bottom."""
        image = np.zeros((40, 100, 3), np.uint8)
        output = OverlayRenderer().draw_line(image, Point(30, 5), Point(30, 10), (255, 255, 255))

        assert output[0, 30].any()
        assert output[39, 30].any()
