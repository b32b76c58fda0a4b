"""Logging configuration."""

import logging
from typing import Optional

ROOT_LOGGER = "kubedump"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name or __name__)
    root = logging.getLogger(ROOT_LOGGER)

    # Only configure if no handlers exist
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    return logger


def set_level(level: int) -> None:
    """Change the level of every kubedump logger."""
    get_logger(ROOT_LOGGER).setLevel(level)
