"""
Time provider abstraction

Submission dates end up inside rejection letters, so the clock is injected:
production reads the system clock, tests pin it.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Anything that can tell the current UTC time"""

    def now(self) -> datetime:
        ...


class RealTimeProvider:
    """System clock, UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedTimeProvider:
    """
    Pinned clock for reproducible runs and tests

    Every call to now() returns the same instant until advance_days() moves it.
    """

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._current_time = fixed_time or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def advance_days(self, days: int) -> None:
        self._current_time += timedelta(days=days)


def format_german_date(dt: datetime) -> str:
    """Format a date the way German tender correspondence does (dd.mm.yyyy)."""
    return dt.strftime("%d.%m.%Y")


default_time_provider: TimeProvider = RealTimeProvider()
