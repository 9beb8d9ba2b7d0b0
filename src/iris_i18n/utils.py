"""Common utilities for iris-i18n modules."""

from __future__ import annotations

import logging
from pathlib import Path

# central logger for the project
logger = logging.getLogger("iris_i18n")
logger.propagate = False

ERR_READ_FILE = "Could not read {path}: {error}"


def configure_logging(
    level: str = "INFO", handler: logging.Handler | None = None
) -> logging.Logger:
    """Configure and return the package logger."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric)
    logger.handlers.clear()
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)

    # forward warnings.warn() calls through the logging system
    logging.captureWarnings(True)
    wlog = logging.getLogger("py.warnings")
    wlog.setLevel(numeric)
    wlog.handlers.clear()
    wlog.addHandler(handler)
    wlog.propagate = False
    return logger


# configure default logging on import
configure_logging()


def is_within(path: Path, root: Path) -> bool:
    """Return ``True`` when ``path`` equals ``root`` or lies below it."""
    return root == path or root in path.parents


__all__ = ["ERR_READ_FILE", "configure_logging", "is_within", "logger"]
