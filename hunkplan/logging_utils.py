"""Logging helpers for hunkplan.

Library modules log through `logging.getLogger(__name__)` and never configure
handlers themselves; the CLI calls configure_logging once per invocation.
Records go to stderr so `--json` output on stdout stays parseable.
"""

import logging
import sys

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# -v count -> level of the hunkplan logger
_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]

_HANDLER_NAME = "hunkplan-stderr"


def level_for_verbosity(verbosity: int) -> int:
    """Map a `-v` count to a logging level, clamped to WARNING..DEBUG."""
    return _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]


def configure_logging(verbosity: int) -> logging.Logger:
    """Attach a stderr handler to the hunkplan logger at the requested verbosity.

    The handler is installed once and rebound to the current sys.stderr on
    every call, so repeated CLI invocations in one process neither duplicate
    records nor write to a stream that was swapped out.

    Args:
        verbosity: Number of `-v` flags given on the command line.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("hunkplan")
    logger.setLevel(level_for_verbosity(verbosity))

    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        handler.stream = sys.stderr
    return logger
