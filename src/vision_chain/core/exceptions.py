"""Custom exceptions for Vision Chain."""

from __future__ import annotations

from collections.abc import Iterable


class VisionChainError(Exception):
    """Base exception for all Vision Chain errors."""

    pass


class MissingCalibrationError(VisionChainError):
    """A physical-unit operation was called without a calibration profile."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.message = (
            f"{operation} requires a calibration profile; "
            "call set_calibration() before using physical units"
        )
        super().__init__(self.message)


class TagNotFoundError(VisionChainError, KeyError):
    """A tag was recalled that was never stored on this pipeline."""

    def __init__(self, tag: str, available: Iterable[str] = ()) -> None:
        self.tag = tag
        self.available = tuple(available)
        known = ", ".join(repr(t) for t in self.available) or "none"
        self.message = f"No buffer stored under tag {tag!r} (known tags: {known})"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class DegenerateHypothesisError(VisionChainError):
    """RANSAC could not form a line because every input point coincides."""

    def __init__(self, message: str = "All points coincide; no line can be fit") -> None:
        self.message = message
        super().__init__(self.message)


class DegenerateLineError(VisionChainError, ValueError):
    """A line was defined by two identical points."""

    def __init__(self, message: str = "Line endpoints coincide") -> None:
        self.message = message
        super().__init__(self.message)


class UnsupportedFormatError(VisionChainError):
    """A buffer has a pixel layout or kind the operation cannot handle."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.message = f"{operation}: {detail}"
        super().__init__(self.message)


class CalibrationError(VisionChainError):
    """Calibration process failed or invalid calibration data."""

    def __init__(self, message: str = "Calibration failed") -> None:
        self.message = message
        super().__init__(self.message)
