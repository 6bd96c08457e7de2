"""Core infrastructure: config, types, exceptions, and logging."""

from vision_chain.core.config import Settings, get_settings
from vision_chain.core.exceptions import (
    CalibrationError,
    DegenerateHypothesisError,
    DegenerateLineError,
    MissingCalibrationError,
    TagNotFoundError,
    UnsupportedFormatError,
    VisionChainError,
)
from vision_chain.core.logging import get_logger, setup_logging
from vision_chain.core.types import (
    CalibrationProfile,
    CircleDetection,
    DetectionSet,
    Length,
    LengthUnit,
    Line,
    Location,
    Point,
    RasterBuffer,
    WorkingBuffer,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Point",
    "Line",
    "CircleDetection",
    "DetectionSet",
    "RasterBuffer",
    "WorkingBuffer",
    "Length",
    "LengthUnit",
    "Location",
    "CalibrationProfile",
    # Exceptions
    "VisionChainError",
    "MissingCalibrationError",
    "TagNotFoundError",
    "DegenerateHypothesisError",
    "DegenerateLineError",
    "UnsupportedFormatError",
    "CalibrationError",
    # Logging
    "setup_logging",
    "get_logger",
]
