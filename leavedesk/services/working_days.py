from __future__ import annotations

from datetime import date, timedelta

# date.weekday(): Monday is 0, Saturday 5, Sunday 6.
_WEEKEND = frozenset({5, 6})


def is_working_day(day: date) -> bool:
    """Return True when the day is neither a Saturday nor a Sunday."""
    return day.weekday() not in _WEEKEND


def count_working_days(from_date: date, to_date: date) -> int:
    """Count working days in the inclusive range [from_date, to_date].

    Callers validate that from_date <= to_date; a reversed range counts 0.
    """
    total = 0
    current = from_date
    one_day = timedelta(days=1)

    while current <= to_date:
        if is_working_day(current):
            total += 1
        current += one_day

    return total
