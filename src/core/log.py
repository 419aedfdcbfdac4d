"""Console logging setup for applications embedding the game."""

import logging
import sys

from src.core.config import LOG_FORMAT

ROOT_LOGGER_NAME = "src"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Attach a single console handler to the package's root logger.

    Every module logs through `logging.getLogger(__name__)`, so all of them end up here.
    Calling this twice replaces the handler instead of duplicating output.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
