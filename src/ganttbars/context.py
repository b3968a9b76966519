"""Process-wide CLI state shared between the callback and commands."""

from __future__ import annotations

from pathlib import Path


class _Context:
    """Holds options given once on the command line for every command."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.strict: bool | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path given with --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Set the config path given with --config."""
    _context.config_path = path


def get_strict_override() -> bool | None:
    """Get the --strict/--no-strict override (None when not given)."""
    return _context.strict


def set_strict_override(strict: bool | None) -> None:
    """Set the --strict/--no-strict override."""
    _context.strict = strict
