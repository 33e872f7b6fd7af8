"""Logging setup for vidpipe entry points.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers themselves. Entry points such as the CLI call ``get_logger`` once
to send everything under the ``vidpipe`` namespace to a stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

ROOT_LOGGER_NAME = "vidpipe"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(
    level: int = logging.INFO,
    stream: TextIO = sys.stderr,
) -> logging.Logger:
    """Configure and return the ``vidpipe`` logger.

    The first call attaches a single stream handler. Later calls only change
    the level, so repeated setup never duplicates output.

    Args:
        level: Minimum level emitted for all vidpipe modules.
        stream: Output stream for the handler, used on the first call only.

    Returns:
        The configured ``vidpipe`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    handler = next((h for h in logger.handlers if getattr(h, "_vidpipe", False)), None)
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler._vidpipe = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)

    handler.setLevel(level)
    logger.setLevel(level)
    return logger
