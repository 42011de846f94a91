"""Injectable time source.

Scheduling and statistics code asks a ``Clock`` for the current date instead
of calling ``date.today()`` so tests can pin "today" to any value.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware datetime."""
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def __init__(self, tz: str = "UTC"):
        self._tz = ZoneInfo(tz)

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock(Clock):
    """Returns a fixed instant until advanced. Naive values are treated as UTC."""

    def __init__(self, value: datetime | date):
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        self._value = value

    def now(self) -> datetime:
        return self._value

    def advance(self, delta: timedelta) -> None:
        self._value = self._value + delta

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        self._value = value


_default_clock: Clock | None = None


def get_clock() -> Clock:
    global _default_clock
    if _default_clock is None:
        from workhours.core.config import get_settings

        _default_clock = SystemClock(get_settings().timezone)
    return _default_clock


def set_clock(clock: Clock | None) -> None:
    """Replace the process-wide clock (None restores the system clock)."""
    global _default_clock
    _default_clock = clock
