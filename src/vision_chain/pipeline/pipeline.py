"""Chainable vision pipeline with tagged snapshots.

The pipeline holds one current working buffer, either an OpenCV raster or a
list of circle detections. Every operation reads the current buffer, installs
its result as the new current buffer and returns the pipeline, so calls can
be chained. Passing ``tag`` stores an independent copy of the result that can
later be brought back with :meth:`VisionPipeline.recall`::

    pipeline = (
        VisionPipeline()
        .read(path, tag="original")
        .to_gray()
        .gaussian_blur(5)
        .hough_circles(10, 40, 20, tag="circles")
        .filter_circles_to_line(2.0)
        .draw_circles("original")
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import cv2
import numpy as np
from numpy.typing import NDArray

from vision_chain.analysis.circle_filters import filter_by_distance, filter_to_line
from vision_chain.core.config import Settings, get_settings
from vision_chain.core.exceptions import (
    MissingCalibrationError,
    TagNotFoundError,
    UnsupportedFormatError,
)
from vision_chain.core.logging import get_logger
from vision_chain.core.types import (
    CalibrationProfile,
    CircleDetection,
    DetectionSet,
    Length,
    Location,
    Point,
    RasterBuffer,
    WorkingBuffer,
)
from vision_chain.vision.backend import initialize_backend
from vision_chain.vision.codec import channels, read_image, to_display_image, to_raster, write_image
from vision_chain.vision.overlay import Color, OverlayRenderer

logger = get_logger(__name__)


def clone_buffer(buffer: WorkingBuffer) -> WorkingBuffer:
    """Copy a working buffer so the copy shares no mutable storage with it."""
    if isinstance(buffer, np.ndarray):
        return buffer.copy()
    # CircleDetection is frozen, so copying the list is a full value copy
    return list(buffer)


class VisionPipeline:
    """Fluent pipeline over a current buffer plus a store of tagged copies.

    Tagged entries are deep copies taken when the tag is written, and
    :meth:`recall` installs a fresh copy, so no later operation can change a
    stored snapshot. Recalling a tag that was never stored raises
    :class:`TagNotFoundError`.

    Not thread-safe; each pipeline owns its tag store exclusively.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        calibration: CalibrationProfile | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Initialize pipeline with settings.

        Args:
            settings: Application settings (uses defaults if None)
            calibration: Profile for physical-unit operations
            rng: Random source for RANSAC (seeded from settings if None)
        """
        self.settings = settings or get_settings()
        initialize_backend(self.settings.backend)

        self._buffer: WorkingBuffer = np.empty((0, 0), dtype=np.uint8)
        self._stored: dict[str, WorkingBuffer] = {}
        self._calibration = calibration
        self._rng = rng if rng is not None else np.random.default_rng(self.settings.ransac.seed)
        self._overlay = OverlayRenderer(self.settings.overlay)

    # ------------------------------------------------------------------
    # State

    @property
    def current(self) -> WorkingBuffer:
        """The current working buffer."""
        return self._buffer

    @property
    def tags(self) -> list[str]:
        """Stored tags in insertion order."""
        return list(self._stored)

    @property
    def detections(self) -> DetectionSet:
        """The current buffer as detections.

        Raises:
            UnsupportedFormatError: If the current buffer is a raster
        """
        return self._require_detections("detections")

    @property
    def calibration(self) -> CalibrationProfile | None:
        """Get current calibration profile."""
        return self._calibration

    def set_calibration(self, calibration: CalibrationProfile | None) -> VisionPipeline:
        """Set the profile used by operations that take physical lengths."""
        self._calibration = calibration
        if calibration is not None:
            logger.info(
                "Calibration set: %.4f %s/px",
                calibration.avg_units_per_pixel,
                calibration.units.symbol,
            )
        return self

    def store(self, buffer: WorkingBuffer, tag: str | None = None) -> VisionPipeline:
        """Install ``buffer`` as current, keeping a copy under ``tag`` if given.

        Storing under an existing tag replaces the earlier copy.
        """
        self._buffer = buffer
        if tag is not None:
            self._stored[tag] = clone_buffer(buffer)
            logger.debug("Stored %s under tag %r", _describe(buffer), tag)
        return self

    def recall(self, tag: str) -> VisionPipeline:
        """Replace the current buffer with a copy of the one stored under ``tag``.

        Raises:
            TagNotFoundError: If nothing was stored under ``tag``
        """
        self._buffer = self.get(tag)
        logger.debug("Recalled tag %r (%s)", tag, _describe(self._buffer))
        return self

    def get(self, tag: str) -> WorkingBuffer:
        """Return a copy of the buffer stored under ``tag``.

        Raises:
            TagNotFoundError: If nothing was stored under ``tag``
        """
        try:
            return clone_buffer(self._stored[tag])
        except KeyError:
            raise TagNotFoundError(tag, self._stored) from None

    # ------------------------------------------------------------------
    # Image I/O

    def from_image(self, image: NDArray[Any], tag: str | None = None) -> VisionPipeline:
        """Install an 8-bit gray, BGR or BGRA image as the current raster."""
        return self.store(to_raster(image), tag)

    def read(self, path: Path | str, tag: str | None = None) -> VisionPipeline:
        """Read an image file into the current raster."""
        return self.store(read_image(Path(path)), tag)

    def write(self, path: Path | str) -> VisionPipeline:
        """Write the current raster to an image file."""
        write_image(Path(path), self._require_raster("write"))
        return self

    def to_display_image(self) -> NDArray[np.uint8]:
        """Return the current raster converted to an 8-bit image."""
        return to_display_image(self._require_raster("to_display_image"))

    # ------------------------------------------------------------------
    # Raster operations

    def to_gray(self, tag: str | None = None) -> VisionPipeline:
        """Convert the current BGR raster to grayscale; gray input is left as is."""
        raster = self._require_raster("to_gray")
        if channels(raster) == 1:
            return self.store(raster, tag)
        return self.store(cv2.cvtColor(raster, cv2.COLOR_BGR2GRAY), tag)

    def cvt_color(self, code: int, tag: str | None = None) -> VisionPipeline:
        """Apply an OpenCV color conversion code."""
        return self.store(cv2.cvtColor(self._require_raster("cvt_color"), code), tag)

    def threshold(
        self,
        threshold: float,
        invert: bool = False,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Binary threshold at a fixed level."""
        _, result = cv2.threshold(
            self._require_raster("threshold"),
            threshold,
            255,
            cv2.THRESH_BINARY_INV if invert else cv2.THRESH_BINARY,
        )
        return self.store(result, tag)

    def threshold_otsu(self, invert: bool = False, tag: str | None = None) -> VisionPipeline:
        """Binary threshold at the level chosen by Otsu's method."""
        mode = cv2.THRESH_BINARY_INV if invert else cv2.THRESH_BINARY
        _, result = cv2.threshold(
            self._require_raster("threshold_otsu"),
            0,
            255,
            mode | cv2.THRESH_OTSU,
        )
        return self.store(result, tag)

    def threshold_adaptive(self, invert: bool = False, tag: str | None = None) -> VisionPipeline:
        """Mean adaptive threshold."""
        result = cv2.adaptiveThreshold(
            self._require_raster("threshold_adaptive"),
            255,
            cv2.ADAPTIVE_THRESH_MEAN_C,
            cv2.THRESH_BINARY_INV if invert else cv2.THRESH_BINARY,
            self.settings.threshold.adaptive_block_size,
            self.settings.threshold.adaptive_c,
        )
        return self.store(result, tag)

    def gaussian_blur(self, kernel_size: int, tag: str | None = None) -> VisionPipeline:
        """Gaussian blur with a square kernel."""
        result = cv2.GaussianBlur(
            self._require_raster("gaussian_blur"), (kernel_size, kernel_size), 0
        )
        return self.store(result, tag)

    def canny(self, threshold1: float, threshold2: float, tag: str | None = None) -> VisionPipeline:
        """Canny edge detection."""
        return self.store(cv2.Canny(self._require_raster("canny"), threshold1, threshold2), tag)

    def abs_diff(self, source_tag: str, tag: str | None = None) -> VisionPipeline:
        """Absolute difference between the raster under ``source_tag`` and the current one."""
        source = self.get(source_tag)
        if not isinstance(source, np.ndarray):
            raise UnsupportedFormatError("abs_diff", f"tag {source_tag!r} holds detections")
        return self.store(cv2.absdiff(source, self._require_raster("abs_diff")), tag)

    def find_contours(
        self,
        contours: list[NDArray[np.int32]],
        tag: str | None = None,
    ) -> VisionPipeline:
        """Append every contour of the current binary raster to ``contours``.

        The current raster itself is unchanged.
        """
        raster = self._require_raster("find_contours")
        found, _ = cv2.findContours(raster.copy(), cv2.RETR_LIST, cv2.CHAIN_APPROX_NONE)
        contours.extend(found)
        logger.debug("Found %d contours", len(found))
        return self.store(raster, tag)

    def hough_circles(
        self,
        min_diameter: float | Length,
        max_diameter: float | Length,
        min_distance: float | Length,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Detect circles in the current gray raster.

        Lengths are converted to pixels with the calibration profile. The
        result replaces the current buffer with a detection list.

        Raises:
            ValueError: If the minimum center distance is not positive in pixels
        """
        operation = "hough_circles"
        min_diameter_px = int(self._to_pixels(min_diameter, operation))
        max_diameter_px = int(self._to_pixels(max_diameter, operation))
        min_distance_px = self._to_pixels(min_distance, operation)
        if min_distance_px <= 0:
            raise ValueError(
                f"{operation}: min_distance {min_distance} is {min_distance_px:g} px; "
                "it must be positive"
            )

        hough = self.settings.hough
        circles = cv2.HoughCircles(
            self._require_raster(operation),
            cv2.HOUGH_GRADIENT,
            hough.dp,
            min_distance_px,
            param1=hough.param1,
            param2=hough.param2,
            minRadius=min_diameter_px // 2,
            maxRadius=max_diameter_px // 2,
        )

        detections: DetectionSet = []
        if circles is not None:
            detections = [
                CircleDetection(float(x), float(y), float(r)) for x, y, r in circles.reshape(-1, 3)
            ]
        logger.debug("Hough detected %d circles", len(detections))
        return self.store(detections, tag)

    # ------------------------------------------------------------------
    # Detection operations

    def circles_to_points(self, points: list[Point]) -> VisionPipeline:
        """Append the center of every current detection to ``points``."""
        points.extend(d.center for d in self._require_detections("circles_to_points"))
        return self

    def circles_to_locations(self, locations: list[Location]) -> VisionPipeline:
        """Append the physical location of every current detection to ``locations``.

        Locations are sorted by distance from the calibrated camera location.

        Raises:
            MissingCalibrationError: If no calibration is set
        """
        calibration = self._require_calibration("circles_to_locations")
        detections = self._require_detections("circles_to_locations")

        found = [calibration.pixel_to_location(d.x, d.y, d.diameter) for d in detections]
        found.sort(key=lambda loc: loc.distance_to(calibration.location_x, calibration.location_y))
        locations.extend(found)
        return self

    def filter_circles_by_distance(
        self,
        origin_x: float,
        origin_y: float,
        min_distance: float,
        max_distance: float,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Keep detections between ``min_distance`` and ``max_distance`` pixels of an origin."""
        detections = self._require_detections("filter_circles_by_distance")
        result = filter_by_distance(detections, origin_x, origin_y, min_distance, max_distance)
        return self.store(result, tag)

    def filter_circles_by_distance_from_center(
        self,
        min_distance: Length,
        max_distance: Length,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Keep detections within a physical annulus around the image center.

        Raises:
            MissingCalibrationError: If no calibration is set
        """
        operation = "filter_circles_by_distance_from_center"
        calibration = self._require_calibration(operation)
        center = calibration.center
        return self.filter_circles_by_distance(
            center.x,
            center.y,
            calibration.to_pixels(min_distance),
            calibration.to_pixels(max_distance),
            tag,
        )

    def filter_circles_to_line(
        self,
        max_distance: float | Length,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Keep detections within ``max_distance`` of their RANSAC best-fit line.

        Fewer than two detections pass through unchanged.
        """
        operation = "filter_circles_to_line"
        max_distance_px = self._to_pixels(max_distance, operation)
        detections = self._require_detections(operation)
        result = filter_to_line(
            detections,
            max_distance_px,
            iterations=self.settings.ransac.iterations,
            rng=self._rng,
        )
        return self.store(result, tag)

    # ------------------------------------------------------------------
    # Drawing

    def draw_circles(
        self,
        base_tag: str,
        color: Color | None = None,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Draw the current detections onto a copy of the raster stored under ``base_tag``."""
        detections = self._require_detections("draw_circles")
        base = self._tagged_raster(base_tag, "draw_circles")
        return self.store(self._overlay.draw_circles(base, detections, color), tag)

    def draw_contours(
        self,
        contours: Sequence[NDArray[np.int32]],
        color: Color | None = None,
        thickness: int = 1,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Draw contours onto the current raster."""
        raster = self._require_raster("draw_contours")
        return self.store(self._overlay.draw_contours(raster, contours, color, thickness), tag)

    def draw_contour_rects(
        self,
        contours: Sequence[NDArray[np.int32]],
        color: Color | None = None,
        thickness: int = 1,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Draw the minimum-area rectangle of each contour onto the current raster."""
        raster = self._require_raster("draw_contour_rects")
        return self.store(
            self._overlay.draw_contour_rects(raster, contours, color, thickness), tag
        )

    def draw_line(
        self,
        a: Point,
        b: Point,
        color: Color | None = None,
        thickness: int = 1,
        tag: str | None = None,
    ) -> VisionPipeline:
        """Draw the infinite line through ``a`` and ``b`` onto the current raster."""
        raster = self._require_raster("draw_line")
        return self.store(self._overlay.draw_line(raster, a, b, color, thickness), tag)

    # ------------------------------------------------------------------
    # Helpers

    def _require_raster(self, operation: str) -> RasterBuffer:
        if not isinstance(self._buffer, np.ndarray):
            raise UnsupportedFormatError(operation, "expected a raster, buffer holds detections")
        if self._buffer.size == 0:
            raise UnsupportedFormatError(operation, "current raster is empty")
        return self._buffer

    def _require_detections(self, operation: str) -> DetectionSet:
        if isinstance(self._buffer, np.ndarray):
            raise UnsupportedFormatError(operation, "expected detections, buffer is a raster")
        return self._buffer

    def _require_calibration(self, operation: str) -> CalibrationProfile:
        if self._calibration is None:
            raise MissingCalibrationError(operation)
        return self._calibration

    def _tagged_raster(self, tag: str, operation: str) -> RasterBuffer:
        buffer = self.get(tag)
        if not isinstance(buffer, np.ndarray):
            raise UnsupportedFormatError(operation, f"tag {tag!r} holds detections")
        return buffer

    def _to_pixels(self, value: float | Length, operation: str) -> float:
        if isinstance(value, Length):
            return self._require_calibration(operation).to_pixels(value)
        return float(value)


def _describe(buffer: WorkingBuffer) -> str:
    if isinstance(buffer, np.ndarray):
        return f"raster {buffer.shape} {buffer.dtype}"
    return f"{len(buffer)} detections"
