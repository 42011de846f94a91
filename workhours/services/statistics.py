"""Weekly and cumulative work-hours statistics.

Everything here is recomputed from the stored entries on every call. Entries
are counted regardless of approval, so pending hours show up on dashboards
before an administrator confirms them.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from workhours.core.clock import Clock, get_clock
from workhours.services import work_hours_store

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class WeeklyWindow:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


@dataclass(frozen=True)
class WeeklyStatistics:
    employee_id: Optional[int]
    window: WeeklyWindow
    week_offset: int
    total_hours: float
    days_worked: int
    average_daily_hours: float


@dataclass(frozen=True)
class EmployeeStatistics:
    employee_id: int
    total_hours: float
    weeks_count: int
    average_weekly_hours: float


def weekly_window(reference_date: date, offset: int = 0) -> WeeklyWindow:
    """Monday..Sunday window of the week ``offset`` weeks away from ``reference_date``."""
    selected = reference_date + timedelta(weeks=int(offset))
    start = selected - timedelta(days=selected.weekday())
    return WeeklyWindow(start=start, end=start + timedelta(days=6))


def day_of_week(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def entry_duration(entry) -> Optional[timedelta]:
    """End minus start, or None when either time is missing.

    Times out of order (only possible for rows written around the workflow)
    count as zero rather than negative.
    """
    if entry.start_time is None or entry.end_time is None:
        return None

    day = date(2000, 1, 1)
    delta = datetime.combine(day, entry.end_time) - datetime.combine(day, entry.start_time)
    if delta < timedelta(0):
        return timedelta(0)
    return delta


def format_duration(delta: Optional[timedelta]) -> Optional[str]:
    if delta is None:
        return None
    minutes = int(delta.total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60:02d}m"


def _hours(minutes: float) -> float:
    return round(minutes / 60.0, 2)


def _duration_minutes(entry) -> int:
    # Minute precision, as the dashboard reports it.
    delta = entry_duration(entry)
    if delta is None:
        return 0
    return int(delta.total_seconds() // 60)


def _is_active(entry) -> bool:
    return entry.start_time is not None and entry.end_time is not None


def compute_weekly_statistics(
    entries: Iterable,
    window: WeeklyWindow,
    *,
    employee_id: Optional[int] = None,
    week_offset: int = 0,
) -> WeeklyStatistics:
    minutes = 0
    days = set()

    for entry in entries:
        if not window.contains(entry.work_date):
            continue
        minutes += _duration_minutes(entry)
        if _is_active(entry):
            days.add(entry.work_date)

    total = minutes / 60.0
    average = 0.0 if not days else total / len(days)

    return WeeklyStatistics(
        employee_id=employee_id,
        window=window,
        week_offset=int(week_offset),
        total_hours=round(total, 2),
        days_worked=len(days),
        average_daily_hours=round(average, 2),
    )


def compute_employee_statistics(employee_id: int, entries: Iterable) -> EmployeeStatistics:
    minutes = 0
    weeks = set()

    for entry in entries:
        minutes += _duration_minutes(entry)
        if _is_active(entry):
            weeks.add(weekly_window(entry.work_date).start)

    total = minutes / 60.0
    average = 0.0 if not weeks else total / len(weeks)

    return EmployeeStatistics(
        employee_id=int(employee_id),
        total_hours=round(total, 2),
        weeks_count=len(weeks),
        average_weekly_hours=round(average, 2),
    )


def get_weekly_statistics(
    employee_id: int,
    week_offset: int = 0,
    *,
    clock: Optional[Clock] = None,
    db: Optional[Session] = None,
) -> WeeklyStatistics:
    clock = clock or get_clock()
    window = weekly_window(clock.today(), week_offset)

    entries = work_hours_store.find_by_employee_and_date_range(employee_id, window.start, window.end, db=db)
    return compute_weekly_statistics(entries, window, employee_id=int(employee_id), week_offset=week_offset)


def get_employee_statistics(employee_id: int, *, db: Optional[Session] = None) -> EmployeeStatistics:
    """All-time statistics. An employee without entries gets the zero record."""
    entries = work_hours_store.find_by_employee(employee_id, db=db)
    return compute_employee_statistics(employee_id, entries)
