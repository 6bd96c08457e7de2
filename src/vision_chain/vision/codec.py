"""Raster layout checks and image file I/O."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import cv2
import numpy as np
from numpy.typing import NDArray

from vision_chain.core.exceptions import UnsupportedFormatError
from vision_chain.core.logging import get_logger

logger = get_logger(__name__)


def channels(image: NDArray[Any]) -> int:
    """Number of channels in an OpenCV image."""
    return 1 if image.ndim == 2 else int(image.shape[2])


def to_raster(image: NDArray[Any]) -> NDArray[np.uint8]:
    """Normalize an 8-bit image to gray or BGR layout.

    Gray and BGR are copied as-is, BGRA drops its alpha channel, and a
    single-channel ``HxWx1`` image is squeezed to ``HxW``.

    Raises:
        UnsupportedFormatError: For non-8-bit data or other channel counts
    """
    if not isinstance(image, np.ndarray) or image.dtype != np.uint8:
        dtype = getattr(image, "dtype", type(image).__name__)
        raise UnsupportedFormatError("to_raster", f"expected uint8 image, got {dtype}")

    if image.ndim == 2:
        return image.copy()
    if image.ndim == 3:
        n = image.shape[2]
        if n == 1:
            return image[:, :, 0].copy()
        if n == 3:
            return image.copy()
        if n == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

    raise UnsupportedFormatError("to_raster", f"unsupported shape {image.shape}")


def to_display_image(raster: NDArray[Any]) -> NDArray[np.uint8]:
    """Convert a working raster to an 8-bit image suitable for encoding.

    ``uint8`` gray/BGR rasters pass through; ``float32`` gray rasters in
    ``[0, 1]`` are scaled to ``[0, 255]``.

    Raises:
        UnsupportedFormatError: For any other dtype or channel layout
    """
    n = channels(raster)
    if raster.dtype == np.uint8 and n in (1, 3):
        return raster
    if raster.dtype == np.float32 and n == 1:
        return np.clip(raster * 255, 0, 255).astype(np.uint8)

    raise UnsupportedFormatError(
        "to_display_image",
        f"unsupported raster: dtype {raster.dtype}, channels {n}, shape {raster.shape}",
    )


def read_image(path: Path) -> NDArray[np.uint8]:
    """Decode an image file into a BGR (or gray) raster.

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedFormatError: If OpenCV cannot decode it
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise UnsupportedFormatError("read", f"cannot decode image file {path}")

    logger.debug("Read %s (%s, %s)", path, image.shape, image.dtype)
    return to_raster(image)


def write_image(path: Path, raster: NDArray[Any]) -> None:
    """Encode a raster to a file; the format follows the file extension.

    Raises:
        UnsupportedFormatError: If the raster layout or extension is unsupported
    """
    path = Path(path)
    image = to_display_image(raster)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not cv2.imwrite(str(path), image):
        raise UnsupportedFormatError("write", f"OpenCV could not encode {path}")

    logger.debug("Wrote %s (%s)", path, image.shape)
