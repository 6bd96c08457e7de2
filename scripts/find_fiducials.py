#!/usr/bin/env python3
"""Find a row of circular fiducials in an image.

Runs the standard chain: grayscale, blur, Hough circles, an optional
annulus filter around the image center, and a colinearity filter. The
surviving circles are drawn over the original image and written out.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from vision_chain.core.config import get_settings
from vision_chain.core.exceptions import VisionChainError
from vision_chain.core.logging import get_logger, setup_logging
from vision_chain.core.types import CalibrationProfile, Length, LengthUnit, Location, Point
from vision_chain.pipeline import VisionPipeline

logger = get_logger(__name__)


def find_fiducials(
    pipeline: VisionPipeline,
    image_path: Path,
    output_path: Path,
    min_diameter: float,
    max_diameter: float,
    line_tolerance: float,
    annulus: tuple[float, float] | None = None,
) -> list[Point]:
    """Run the detection chain and write the annotated image.

    Args:
        pipeline: Pipeline to run on
        image_path: Input image
        output_path: Annotated output image
        min_diameter: Smallest circle diameter in pixels
        max_diameter: Largest circle diameter in pixels
        line_tolerance: Maximum distance from the fitted line in pixels
        annulus: Optional (min, max) distance from the image center in pixels

    Returns:
        Centers of the circles that passed every filter
    """
    points: list[Point] = []

    pipeline.read(image_path, tag="original").to_gray().gaussian_blur(5)
    pipeline.hough_circles(min_diameter, max_diameter, min_diameter, tag="circles")
    logger.info("Detected %d circles", len(pipeline.detections))

    if annulus is not None:
        height, width = pipeline.get("original").shape[:2]
        pipeline.filter_circles_by_distance(width / 2, height / 2, annulus[0], annulus[1])
        logger.info("%d circles inside annulus", len(pipeline.detections))

    (
        pipeline.filter_circles_to_line(line_tolerance, tag="fiducials")
        .circles_to_points(points)
        .draw_circles("original")
        .write(output_path)
    )
    logger.info("%d circles on the fitted line", len(points))
    return points


def main() -> int:
    """Run fiducial detection on one image."""
    parser = argparse.ArgumentParser(description="Find colinear circular fiducials")
    parser.add_argument("image", type=Path, help="Input image path")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("fiducials.png"),
        help="Annotated output image (default: fiducials.png)",
    )
    parser.add_argument("--min-diameter", type=float, default=10.0, help="Minimum diameter (px)")
    parser.add_argument("--max-diameter", type=float, default=60.0, help="Maximum diameter (px)")
    parser.add_argument(
        "--line-tolerance",
        type=float,
        default=3.0,
        help="Maximum distance from the fitted line (px)",
    )
    parser.add_argument(
        "--annulus",
        type=float,
        nargs=2,
        metavar=("MIN", "MAX"),
        help="Keep circles between MIN and MAX px from the image center",
    )
    parser.add_argument(
        "--units-per-pixel",
        type=float,
        help="Physical units per pixel; when set, physical locations are logged",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging)

    pipeline = VisionPipeline(settings)

    try:
        points = find_fiducials(
            pipeline,
            args.image,
            args.output,
            args.min_diameter,
            args.max_diameter,
            args.line_tolerance,
            tuple(args.annulus) if args.annulus else None,
        )

        for point in points:
            logger.info("Fiducial at (%.1f, %.1f) px", point.x, point.y)

        units_per_pixel = args.units_per_pixel
        if units_per_pixel is None:
            units_per_pixel = settings.calibration.units_per_pixel
        if units_per_pixel is not None:
            height, width = pipeline.get("original").shape[:2]
            profile = CalibrationProfile(
                units_per_pixel_x=units_per_pixel,
                units_per_pixel_y=units_per_pixel,
                units=LengthUnit.from_symbol(settings.calibration.units),
                width=int(width),
                height=int(height),
            )
            locations: list[Location] = []
            pipeline.set_calibration(profile).recall("fiducials").circles_to_locations(locations)
            for loc in locations:
                logger.info(
                    "Fiducial at (%s, %s), diameter %s",
                    Length(loc.x, loc.units),
                    Length(loc.y, loc.units),
                    Length(loc.diameter, loc.units),
                )

    except (VisionChainError, FileNotFoundError) as e:
        logger.error("Fiducial detection failed: %s", e)
        return 1

    logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
