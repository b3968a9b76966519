"""Logging configuration for ganttbars with custom verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30) - verbosity level 1
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - verbosity level 2

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_CHANGES = 1  # Arrows created, tasks expanded
VERBOSITY_CHECKS = 2  # Skipped references and lookups
VERBOSITY_DEBUG = 3  # Full pipeline detail

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class GanttBarsLogger(logging.Logger):
    """Logger with semantic verbosity methods.

    - changes(): verbosity level 1 - bars and arrows produced
    - checks(): verbosity level 2 - references that were checked or skipped
    - debug(): verbosity level 3 - per-bar detail
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log changes (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log checks (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> GanttBarsLogger:
    """Get the ganttbars logger instance (singleton).

    Returns:
        The ganttbars logger singleton instance
    """
    logging.setLoggerClass(GanttBarsLogger)
    logger = logging.getLogger("ganttbars")
    assert isinstance(logger, GanttBarsLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the ganttbars logger with a verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Optional output stream (defaults to sys.stderr, useful for testing)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state between tests."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def changes_enabled() -> bool:
    """Whether -v output such as per-task summaries should be printed."""
    return get_logger().isEnabledFor(CHANGES_LEVEL)


def debug_enabled() -> bool:
    """Whether per-bar detail should be printed."""
    return get_logger().isEnabledFor(logging.DEBUG)
