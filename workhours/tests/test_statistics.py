from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Optional

import pytest

from workhours.services import statistics, work_hours_store


@dataclass
class _Entry:
    work_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    approved: bool = False


@pytest.mark.parametrize("offset", range(-10, 11))
@pytest.mark.parametrize("reference", [date(2024, 6, 10), date(2024, 6, 16), date(2023, 12, 31), date(2024, 2, 29)])
def test_weekly_window_is_monday_to_sunday(reference, offset):
    window = statistics.weekly_window(reference, offset)

    assert window.start.weekday() == 0
    assert window.end.weekday() == 6
    assert window.end - window.start == timedelta(days=6)


def test_consecutive_windows_are_contiguous():
    reference = date(2024, 6, 12)
    windows = [statistics.weekly_window(reference, n) for n in range(-5, 6)]

    for earlier, later in zip(windows, windows[1:]):
        assert later.start == earlier.end + timedelta(days=1)


def test_weekly_window_contains_reference_for_offset_zero():
    window = statistics.weekly_window(date(2024, 6, 12))

    assert window.start == date(2024, 6, 10)
    assert window.end == date(2024, 6, 16)
    assert window.contains(date(2024, 6, 12))
    assert window.label == "2024-06-10 - 2024-06-16"


def test_two_days_in_one_week_average_per_day():
    window = statistics.weekly_window(date(2024, 6, 10))
    entries = [
        _Entry(date(2024, 6, 10), time(9, 0), time(17, 0)),
        _Entry(date(2024, 6, 12), time(9, 0), time(13, 0)),
    ]

    stats = statistics.compute_weekly_statistics(entries, window)

    assert stats.total_hours == 12.0
    assert stats.days_worked == 2
    assert stats.average_daily_hours == 6.0


def test_several_entries_on_one_day_count_as_one_day():
    window = statistics.weekly_window(date(2024, 6, 10))
    entries = [
        _Entry(date(2024, 6, 10), time(8, 0), time(12, 0)),
        _Entry(date(2024, 6, 10), time(13, 0), time(15, 30)),
    ]

    stats = statistics.compute_weekly_statistics(entries, window)

    assert stats.total_hours == 6.5
    assert stats.days_worked == 1
    assert stats.average_daily_hours == 6.5


def test_entries_outside_window_and_missing_times_are_ignored():
    window = statistics.weekly_window(date(2024, 6, 10))
    entries = [
        _Entry(date(2024, 6, 10), time(9, 0), time(17, 0)),
        _Entry(date(2024, 6, 11), None, time(17, 0)),
        _Entry(date(2024, 6, 12), time(9, 0), None),
        _Entry(date(2024, 6, 17), time(9, 0), time(17, 0)),
    ]

    stats = statistics.compute_weekly_statistics(entries, window)

    assert stats.total_hours == 8.0
    assert stats.days_worked == 1
    assert stats.average_daily_hours == 8.0


def test_empty_week_has_zero_average():
    stats = statistics.compute_weekly_statistics([], statistics.weekly_window(date(2024, 6, 10)))

    assert stats.total_hours == 0
    assert stats.days_worked == 0
    assert stats.average_daily_hours == 0


def test_unapproved_entries_are_counted():
    window = statistics.weekly_window(date(2024, 6, 10))
    entries = [
        _Entry(date(2024, 6, 10), time(9, 0), time(17, 0), approved=True),
        _Entry(date(2024, 6, 11), time(9, 0), time(17, 0), approved=False),
    ]

    assert statistics.compute_weekly_statistics(entries, window).total_hours == 16.0


def test_employee_without_entries_gets_zero_record(employee_factory):
    e = employee_factory()

    stats = statistics.get_employee_statistics(e.id)

    assert stats.employee_id == e.id
    assert stats.total_hours == 0
    assert stats.weeks_count == 0
    assert stats.average_weekly_hours == 0


def test_unknown_employee_also_gets_zero_record():
    stats = statistics.get_employee_statistics(555)

    assert (stats.total_hours, stats.weeks_count, stats.average_weekly_hours) == (0, 0, 0)


def test_cumulative_statistics_average_per_active_week():
    entries = [
        _Entry(date(2024, 6, 10), time(9, 0), time(17, 0)),
        _Entry(date(2024, 6, 12), time(9, 0), time(13, 0)),
        _Entry(date(2024, 6, 18), time(9, 0), time(15, 0)),
        _Entry(date(2024, 7, 1), None, None),
    ]

    stats = statistics.compute_employee_statistics(7, entries)

    assert stats.total_hours == 18.0
    assert stats.weeks_count == 2
    assert stats.average_weekly_hours == 9.0


def test_entry_duration_and_labels():
    entry = _Entry(date(2024, 6, 10), time(9, 15), time(17, 0))

    assert statistics.entry_duration(entry) == timedelta(hours=7, minutes=45)
    assert statistics.format_duration(statistics.entry_duration(entry)) == "7h 45m"
    assert statistics.day_of_week(entry.work_date) == "Monday"
    assert statistics.entry_duration(_Entry(date(2024, 6, 10), time(9, 0), None)) is None


def test_weekly_statistics_resolve_current_week_from_clock(employee_factory, work_type_factory, fixed_clock):
    e = employee_factory()
    wt = work_type_factory()
    clock = fixed_clock(date(2024, 6, 19))

    for work_date, end in [(date(2024, 6, 10), time(17, 0)), (date(2024, 6, 12), time(13, 0)), (date(2024, 6, 18), time(10, 0))]:
        work_hours_store.create_entry(e.id, work_date, wt.id, None, time(9, 0), end, None)

    current = statistics.get_weekly_statistics(e.id, 0, clock=clock)
    previous = statistics.get_weekly_statistics(e.id, -1, clock=clock)

    assert current.window.start == date(2024, 6, 17)
    assert current.total_hours == 1.0
    assert current.days_worked == 1

    assert previous.window.start == date(2024, 6, 10)
    assert previous.week_offset == -1
    assert previous.total_hours == 12.0
    assert previous.average_daily_hours == 6.0
