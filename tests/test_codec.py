"""Tests for raster layout checks and image I/O."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from vision_chain.core.exceptions import UnsupportedFormatError
from vision_chain.vision.codec import channels, read_image, to_display_image, to_raster, write_image


class TestToRaster:
    """Tests for normalizing input images."""

    def test_gray_and_bgr_are_copied(self) -> None:
        """Supported layouts are returned as independent copies."""
        for image in (np.zeros((4, 5), np.uint8), np.zeros((4, 5, 3), np.uint8)):
            raster = to_raster(image)
            assert raster.shape == image.shape
            assert raster is not image

    def test_bgra_drops_alpha(self) -> None:
        """Alpha is discarded."""
        image = np.zeros((4, 5, 4), np.uint8)
        image[..., 3] = 255
        assert to_raster(image).shape == (4, 5, 3)

    def test_single_channel_is_squeezed(self) -> None:
        """HxWx1 becomes HxW."""
        assert to_raster(np.zeros((4, 5, 1), np.uint8)).shape == (4, 5)

    def test_rejects_other_dtypes(self) -> None:
        """16-bit and float inputs are not accepted."""
        with pytest.raises(UnsupportedFormatError):
            to_raster(np.zeros((4, 5), np.uint16))

    def test_rejects_other_channel_counts(self) -> None:
        """Two-channel images have no defined color layout."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            to_raster(np.zeros((4, 5, 2), np.uint8))
        assert exc_info.value.operation == "to_raster"


class TestToDisplayImage:
    """Tests for converting rasters before encoding."""

    def test_uint8_passthrough(self) -> None:
        """8-bit gray and BGR rasters are unchanged."""
        image = np.full((3, 3, 3), 9, np.uint8)
        assert to_display_image(image) is image

    def test_float_is_scaled(self) -> None:
        """Float rasters in [0, 1] are scaled to 8 bits."""
        image = np.array([[0.0, 0.5, 1.0]], dtype=np.float32)
        assert to_display_image(image).tolist() == [[0, 127, 255]]

    def test_unsupported_layout(self) -> None:
        """The error names the dtype and channel count."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            to_display_image(np.zeros((2, 2), np.int32))
        assert "int32" in str(exc_info.value)

    def test_channels(self) -> None:
        """Channel count for 2D and 3D arrays."""
        assert channels(np.zeros((2, 2))) == 1
        assert channels(np.zeros((2, 2, 3))) == 3


class TestImageFiles:
    """Tests for reading and writing image files."""

    def test_round_trip_gray(self, tmp_path: Path) -> None:
        """Gray PNGs read back as 2D rasters."""
        image = np.arange(64, dtype=np.uint8).reshape(8, 8)
        path = tmp_path / "gray.png"

        write_image(path, image)

        assert np.array_equal(read_image(path), image)

    def test_read_missing(self, tmp_path: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_image(tmp_path / "none.png")

    def test_read_garbage(self, tmp_path: Path) -> None:
        """Undecodable files raise UnsupportedFormatError."""
        path = tmp_path / "bad.png"
        path.write_bytes(b"not an image")
        with pytest.raises(UnsupportedFormatError):
            read_image(path)
