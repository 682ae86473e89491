"""Logging for backplan: stdlib logging with two extra verbosity levels.

Verbosity 0 prints errors only, 1 adds scheduling decisions (``changes``),
2 adds per-task date resolution (``checks``), 3 adds pass internals (``debug``).
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30)
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20)

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

LOGGER_NAME = "backplan"

# Indexed by verbosity
_LEVELS = (logging.ERROR, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)


def level_for_verbosity(verbosity: int) -> int:
    """Logging level for a CLI verbosity, clamped to the supported range."""
    return _LEVELS[max(VERBOSITY_SILENT, min(verbosity, VERBOSITY_DEBUG))]


class BackplanLogger(logging.Logger):
    """Logger with one method per verbosity step.

    - changes(): anchors tightened or deduplicated, tasks aligned or dropped
    - checks(): resolved dates, one line per task, plus the critical set
    - debug(): pass internals (normalized durations, relative clock)
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a scheduling decision (verbosity 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a per-task check (verbosity 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)

    def task(self, task_id: str, msg: str, *args: Any) -> None:
        """Log one task's resolution at checks level, indented under its pass."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, f"  {task_id}: {msg}", args)


def get_logger() -> BackplanLogger:
    """Get the backplan logger instance (singleton)."""
    logging.setLoggerClass(BackplanLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, BackplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the backplan logger; safe to call again to reconfigure.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Output stream, sys.stderr when None (tests pass a StringIO)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(level_for_verbosity(verbosity))

    # Plain messages; the level is implied by the verbosity the user asked for
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only; used between tests."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def checks_enabled() -> bool:
    """True when per-task lines will be printed (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
