"""One-time OpenCV backend initialization."""

from __future__ import annotations

import cv2

from vision_chain.core.config import BackendSettings
from vision_chain.core.logging import get_logger

logger = get_logger(__name__)

_initialized = False


def initialize_backend(settings: BackendSettings | None = None) -> None:
    """Configure OpenCV for this process.

    Safe to call repeatedly; only the first call has an effect.

    Args:
        settings: Backend settings (uses defaults if None)
    """
    global _initialized
    if _initialized:
        return

    settings = settings or BackendSettings()
    cv2.setUseOptimized(settings.use_optimized)
    if settings.num_threads is not None:
        cv2.setNumThreads(settings.num_threads)

    _initialized = True
    logger.info(
        "OpenCV %s initialized (optimized=%s, threads=%d)",
        cv2.__version__,
        cv2.useOptimized(),
        cv2.getNumThreads(),
    )


def is_initialized() -> bool:
    """Check whether the backend has been initialized."""
    return _initialized
