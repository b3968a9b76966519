"""Date/duration resolution for bars.

The bar pipeline never parses dates itself; it hands a start string and a
duration token to a ``DateResolver``. ``IsoDateResolver`` is the default: ISO-8601
start instants and ``<integer><unit>`` durations with unit m, h or d.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Protocol

from .exceptions import DateParseError

DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([mhd])\s*$")

DURATION_UNITS = {
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


class DateResolver(Protocol):
    """Turns a start expression and a duration expression into absolute instants."""

    def resolve(self, start: str, duration: str) -> tuple[datetime, datetime]:
        """Return the (start, end) instants.

        Raises:
            DateParseError: If either expression cannot be parsed
        """
        ...

    def reference_instant(self) -> datetime:
        """Instant used for tasks that declare no start."""
        ...


def parse_duration(duration: str) -> timedelta:
    """Parse a duration token such as ``30m``, ``8h`` or ``2d``.

    Args:
        duration: Token of the form ``<integer><unit>``

    Returns:
        The duration as a timedelta

    Raises:
        DateParseError: If the token is not of the supported form
    """
    match = DURATION_PATTERN.match(str(duration))
    if not match:
        raise DateParseError(
            f"Invalid duration '{duration}'. Expected <integer><unit> with unit m, h or d"
        )
    amount, unit = match.groups()
    return int(amount) * DURATION_UNITS[unit]


def parse_start(start: str | date) -> datetime:
    """Parse an ISO-8601 date or date/time into a naive-or-aware datetime.

    Accepts ``2025-01-01``, ``2025-01-01 08:00``, ``2025-01-01T08:00:00`` and
    date/datetime objects (as produced by YAML loading).
    """
    if isinstance(start, datetime):
        return start
    if isinstance(start, date):
        return datetime(start.year, start.month, start.day)

    text = str(start).strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise DateParseError(f"Invalid start '{start}'. Expected an ISO-8601 date") from None


class IsoDateResolver:
    """Default resolver for ISO-8601 starts and m/h/d duration tokens."""

    def __init__(self, reference: datetime | date | None = None):
        """Initialize the resolver.

        Args:
            reference: Instant for tasks without a start. Defaults to today at midnight.
        """
        self._reference = parse_start(reference) if reference is not None else None

    def resolve(self, start: str, duration: str) -> tuple[datetime, datetime]:
        start_at = parse_start(start)
        return start_at, start_at + parse_duration(duration)

    def reference_instant(self) -> datetime:
        if self._reference is not None:
            return self._reference
        today = date.today()  # noqa: DTZ011
        return datetime(today.year, today.month, today.day)
