"""Custom exceptions for ganttbars."""

from __future__ import annotations


class GanttBarsError(Exception):
    """Base exception for all ganttbars errors."""

    pass


class ValidationError(GanttBarsError):
    """Raised when chart input fails validation."""

    pass


class ConfigurationError(ValidationError):
    """Raised when a task cannot be expanded into bars.

    Carries the id of the owning task (and bar, when one is involved) so callers
    can report which row of the chart is broken.
    """

    def __init__(self, message: str, *, task_id: str | None = None, bar_id: str | None = None):
        super().__init__(message)
        self.task_id = task_id
        self.bar_id = bar_id


class IdentityCollisionError(ConfigurationError):
    """Raised when two tasks, or two bars of one task, share an id."""

    pass


class DateParseError(ValidationError):
    """Raised when a start instant or duration expression cannot be parsed."""

    pass


class ParseError(GanttBarsError):
    """Raised when reading or parsing a task file fails."""

    pass
