"""Tests for display class resolution."""

from ganttbars.styling import (
    BAR_COMPLETED,
    BAR_DASHED,
    BAR_SOLID,
    is_recognized_class,
    resolve_display_class,
)


def test_bar_class_wins() -> None:
    """Test the bar's own class takes precedence."""
    assert resolve_display_class(BAR_COMPLETED, BAR_DASHED) == BAR_COMPLETED


def test_task_class_fallback() -> None:
    """Test the task class is used when the bar names none."""
    assert resolve_display_class(None, BAR_DASHED) == BAR_DASHED


def test_default_class() -> None:
    """Test the default applies when neither names one."""
    assert resolve_display_class(None, None) == BAR_SOLID
    assert resolve_display_class("", None, "custom") == "custom"


def test_recognized_classes() -> None:
    """Test the three built-in tags are recognized and others pass through."""
    assert all(is_recognized_class(c) for c in (BAR_SOLID, BAR_DASHED, BAR_COMPLETED))
    assert not is_recognized_class("my-class")
