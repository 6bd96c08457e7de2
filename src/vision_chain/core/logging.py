"""Logging for the ``vision_chain`` logger tree.

Modules log through :func:`get_logger`. Handlers are attached only by
:func:`setup_logging`, and only to the package logger, so embedding
applications keep control of the root logger.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from vision_chain.core.config import LoggingSettings

PACKAGE_LOGGER = "vision_chain"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """Attach console and optional file handlers to the package logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        settings: Level and optional log file (environment defaults if None)

    Returns:
        The configured package logger

    Raises:
        ValueError: If the level name is not a logging level
    """
    settings = settings or LoggingSettings()
    level = _resolve_level(settings.level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Scripts pass ``__main__``; that and any other outside name are nested
    under ``vision_chain`` so :func:`setup_logging` covers them.
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
