"""Display-class tags handed to the rendering layer.

Tags are opaque strings. This module only decides which tag a bar carries when
its bar spec does not name one; the renderer owns what the tags look like.
"""

from __future__ import annotations

BAR_SOLID = "bar-solid"
BAR_DASHED = "bar-dashed"
BAR_COMPLETED = "bar-completed"

RECOGNIZED_CLASSES = (BAR_SOLID, BAR_DASHED, BAR_COMPLETED)

DEFAULT_CLASS = BAR_SOLID


def resolve_display_class(
    bar_class: str | None,
    task_class: str | None,
    default_class: str = DEFAULT_CLASS,
) -> str:
    """Pick the display class for a bar.

    Precedence: the bar spec's ``class``, then the task's ``class``, then the
    configured default. Values are passed through verbatim.
    """
    if bar_class:
        return bar_class
    if task_class:
        return task_class
    return default_class


def is_recognized_class(display_class: str) -> bool:
    """Whether the tag is one of the built-in renderer tags."""
    return display_class in RECOGNIZED_CLASSES
