"""Minimal logging utilities for Plantilla.

Wraps the standard library logging so every logger lives under the
"plantilla" namespace. The library never installs handlers.

Example:
    >>> from plantilla.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsed %d nodes", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance with the "plantilla." prefix

    Example:
        >>> get_logger("loaders").name
        'plantilla.loaders'
    """
    if not (name == "plantilla" or name.startswith("plantilla.")):
        name = f"plantilla.{name}"
    return logging.getLogger(name)
