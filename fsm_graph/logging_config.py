# fsm_graph/logging_config.py
from __future__ import annotations

import logging
import sys

DEFAULT_LOG_FORMAT = "%(asctime)s.%(msecs)03d  %(levelname)-8s  %(name)s  %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "fsm_graph"


def setup_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Configure the package logger for CLI use. Call once at start-up."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates on repeated calls
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    return logger
