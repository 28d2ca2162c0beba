"""
Logging setup.

Library modules only call ``logging.getLogger(__name__)``. Entry points
(the CLI, or an embedding application) call ``configure_logging`` once.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Install a single stderr handler on the package logger.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level.

    Returns:
        The configured ``fides_vera`` logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("fides_vera")
    logger.setLevel(level)

    # Avoid adding duplicate handlers on repeated calls
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
