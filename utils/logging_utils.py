"""
Logging setup shared by the command-line entry points.

Results go to stdout, so log records are written to stderr.
"""
from __future__ import annotations
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0) -> None:
    logging.basicConfig(
        level=verbosity_to_level(verbosity),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
