"""OpenCV-facing operations: backend setup, codec, and overlay."""

from vision_chain.vision.backend import initialize_backend
from vision_chain.vision.codec import read_image, to_display_image, to_raster, write_image
from vision_chain.vision.overlay import OverlayRenderer

__all__ = [
    "initialize_backend",
    "read_image",
    "write_image",
    "to_raster",
    "to_display_image",
    "OverlayRenderer",
]
