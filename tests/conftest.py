"""Pytest fixtures for Vision Chain tests."""

from __future__ import annotations

import numpy as np
import pytest

from vision_chain.core.config import (
    HoughSettings,
    RansacSettings,
    Settings,
)
from vision_chain.core.types import (
    CalibrationProfile,
    CircleDetection,
    LengthUnit,
)
from vision_chain.pipeline import VisionPipeline


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random source for reproducible RANSAC runs."""
    return np.random.default_rng(1234)


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed RANSAC seed and stricter Hough voting."""
    return Settings(
        ransac=RansacSettings(iterations=100, seed=7),
        hough=HoughSettings(dp=1.0, param1=100.0, param2=20.0),
    )


@pytest.fixture
def pipeline(settings: Settings, rng: np.random.Generator) -> VisionPipeline:
    """Pipeline without calibration."""
    return VisionPipeline(settings, rng=rng)


@pytest.fixture
def calibration_profile() -> CalibrationProfile:
    """0.5 mm per pixel over a 400x200 image centered at (100, 50) mm."""
    return CalibrationProfile(
        units_per_pixel_x=0.5,
        units_per_pixel_y=0.5,
        units=LengthUnit.MILLIMETERS,
        width=400,
        height=200,
        location_x=100.0,
        location_y=50.0,
    )


@pytest.fixture
def calibrated_pipeline(
    settings: Settings,
    rng: np.random.Generator,
    calibration_profile: CalibrationProfile,
) -> VisionPipeline:
    """Pipeline with a calibration profile."""
    return VisionPipeline(settings, calibration=calibration_profile, rng=rng)


@pytest.fixture
def annulus_detections() -> list[CircleDetection]:
    """Detections at distance 10, 20 and ~4.24 from the origin."""
    return [
        CircleDetection(0, 10, 2),
        CircleDetection(0, 20, 2),
        CircleDetection(3, 3, 2),
    ]


@pytest.fixture
def row_with_outlier() -> list[CircleDetection]:
    """Three detections on y=0 and one far above the row."""
    return [
        CircleDetection(0, 0, 1),
        CircleDetection(10, 0, 1),
        CircleDetection(20, 0, 1),
        CircleDetection(10, 50, 1),
    ]


@pytest.fixture
def noisy_row() -> list[CircleDetection]:
    """Twenty detections near y = 0.5x + 10 plus five scattered outliers."""
    generator = np.random.default_rng(99)
    detections = []
    for x in range(0, 200, 10):
        y = 0.5 * x + 10 + generator.uniform(-0.5, 0.5)
        detections.append(CircleDetection(float(x), float(y), 4.0))
    outliers = [(15, 90), (60, 0), (110, 140), (170, 20), (190, 170)]
    detections.extend(CircleDetection(float(x), float(y), 4.0) for x, y in outliers)
    return detections

