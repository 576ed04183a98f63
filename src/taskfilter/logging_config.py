"""Logging configuration for the taskfilter CLI.

Every module logs through the ``taskfilter`` logger. Task output owns stdout,
so warnings (a query degraded to a content search, a skipped saved filter)
go to stderr unless ``--verbose`` asks for progress messages on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO


LOGGER_NAME = "taskfilter"
VERBOSE_FORMAT = "%(message)s"
WARNING_FORMAT = f"{LOGGER_NAME}: %(levelname)s: %(message)s"


def _install_handler(logger: logging.Logger, stream: TextIO, level: int, fmt: str) -> None:
    logger.handlers.clear()
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(verbose: bool) -> None:
    """Configure logging output based on verbosity.

    Args:
        verbose: Whether to enable INFO logging to stdout instead of
            warnings only on stderr
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    if verbose:
        logger.setLevel(logging.INFO)
        _install_handler(logger, sys.stdout, logging.INFO, VERBOSE_FORMAT)
    else:
        logger.setLevel(logging.WARNING)
        _install_handler(logger, sys.stderr, logging.WARNING, WARNING_FORMAT)
