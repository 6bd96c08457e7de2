"""Core data types and structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, Union

import numpy as np
from numpy.typing import NDArray

from vision_chain.core.exceptions import CalibrationError


@dataclass(frozen=True, slots=True)
class Point:
    """A 2D point in pixel coordinates."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class CircleDetection:
    """A detected circle in pixel coordinates.

    Attributes:
        x: Center x coordinate
        y: Center y coordinate
        radius: Radius in pixels
    """

    x: float
    y: float
    radius: float

    @property
    def center(self) -> Point:
        """Circle center as a Point."""
        return Point(self.x, self.y)

    @property
    def diameter(self) -> float:
        """Diameter in pixels."""
        return self.radius * 2


# Ordered detections; filters never reorder or duplicate entries.
DetectionSet: TypeAlias = list[CircleDetection]

# OpenCV image: HxW gray or HxWx3 BGR.
RasterBuffer: TypeAlias = NDArray[np.generic]

WorkingBuffer: TypeAlias = Union[RasterBuffer, DetectionSet]

Line: TypeAlias = tuple[Point, Point]


class LengthUnit(Enum):
    """Physical length units with their size in millimeters."""

    MILLIMETERS = ("mm", 1.0)
    CENTIMETERS = ("cm", 10.0)
    METERS = ("m", 1000.0)
    INCHES = ("in", 25.4)

    def __init__(self, symbol: str, mm: float) -> None:
        self.symbol = symbol
        self.mm = mm

    @classmethod
    def from_symbol(cls, symbol: str) -> LengthUnit:
        """Look up a unit by its short symbol (e.g. "mm")."""
        for unit in cls:
            if unit.symbol == symbol:
                return unit
        raise ValueError(f"Unknown length unit: {symbol!r}")


@dataclass(frozen=True, slots=True)
class Length:
    """A physical length with units."""

    value: float
    units: LengthUnit = LengthUnit.MILLIMETERS

    def convert_to(self, units: LengthUnit) -> Length:
        """Return the same length expressed in other units."""
        if units is self.units:
            return self
        return Length(self.value * self.units.mm / units.mm, units)

    def __str__(self) -> str:
        return f"{self.value:g}{self.units.symbol}"


@dataclass(frozen=True, slots=True)
class Location:
    """A physical location of a detected circle.

    Attributes:
        x: X position in physical units
        y: Y position in physical units
        diameter: Circle diameter in physical units
        units: Units of all three values
    """

    x: float
    y: float
    diameter: float
    units: LengthUnit

    def distance_to(self, x: float, y: float) -> float:
        """Planar distance to a physical position in the same units."""
        return math.hypot(self.x - x, self.y - y)


@dataclass(slots=True)
class CalibrationProfile:
    """Calibration data for converting between pixels and physical lengths.

    Attributes:
        units_per_pixel_x: Physical units per pixel along x
        units_per_pixel_y: Physical units per pixel along y
        units: Physical units of the scale and location
        width: Image width in pixels
        height: Image height in pixels
        location_x: Physical x of the image center
        location_y: Physical y of the image center
    """

    units_per_pixel_x: float
    units_per_pixel_y: float
    units: LengthUnit
    width: int
    height: int
    location_x: float = 0.0
    location_y: float = 0.0

    def __post_init__(self) -> None:
        if self.units_per_pixel_x <= 0 or self.units_per_pixel_y <= 0:
            raise CalibrationError(
                "Scale must be positive, got "
                f"({self.units_per_pixel_x:g}, {self.units_per_pixel_y:g})"
            )
        if self.width <= 0 or self.height <= 0:
            raise CalibrationError(f"Image size must be positive, got {self.width}x{self.height}")

    @property
    def avg_units_per_pixel(self) -> float:
        """Mean of the x and y scale factors."""
        return (self.units_per_pixel_x + self.units_per_pixel_y) / 2

    @property
    def center(self) -> Point:
        """Image center in pixels, the reference origin for distance filters."""
        return Point(self.width / 2, self.height / 2)

    def to_pixels(self, length: Length) -> float:
        """Convert a physical length to a pixel distance."""
        return length.convert_to(self.units).value / self.avg_units_per_pixel

    def px_to_units(self, pixels: float) -> float:
        """Convert a pixel distance to physical units."""
        return pixels * self.avg_units_per_pixel

    def pixel_to_location(self, x: float, y: float, diameter_px: float = 0.0) -> Location:
        """Map a pixel position to a physical location.

        Image y grows downward while physical y grows upward.
        """
        offset_x = (x - self.width / 2) * self.units_per_pixel_x
        offset_y = (y - self.height / 2) * self.units_per_pixel_y
        return Location(
            x=self.location_x + offset_x,
            y=self.location_y - offset_y,
            diameter=self.px_to_units(diameter_px),
            units=self.units,
        )
