"""
budget_engines.period_math -- Date-interval arithmetic for budget windows.

Responsibility:
    Overlap test between two inclusive windows, elapsed/remaining day
    counts relative to an explicit "now", calendar-month bounds and
    month shifting for look-back windows.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  ``now`` is always a
    parameter; nothing here reads a clock.

Day counting:
    ``now`` is a calendar day that is in progress.  Counting it as elapsed
    and not as remaining gives ``days_elapsed = (now - start) + 1`` and
    ``days_remaining = end - now``, which equal the ceiling of the
    fractional-day difference for any instant inside that day.  For a
    window containing ``now`` the two counts sum to the inclusive window
    length.  ``datetime`` arguments are reduced to their date.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def intervals_overlap(
    a_start: date, a_end: date, b_start: date, b_end: date,
) -> bool:
    """True iff the inclusive windows share at least one day.

    A window ending on the day another starts overlaps it.
    """
    return _as_date(a_start) <= _as_date(b_end) and _as_date(b_start) <= _as_date(a_end)


def overlap_window(
    a_start: date, a_end: date, b_start: date, b_end: date,
) -> tuple[date, date] | None:
    """The shared inclusive sub-window, or None when disjoint."""
    if not intervals_overlap(a_start, a_end, b_start, b_end):
        return None
    return (
        max(_as_date(a_start), _as_date(b_start)),
        min(_as_date(a_end), _as_date(b_end)),
    )


def days_elapsed(start: date, now: date) -> int:
    """Days of the window used so far, counting today; never below 1.

    The floor of 1 keeps daily averages well defined before the window
    starts and on its first day.
    """
    return max(1, (_as_date(now) - _as_date(start)).days + 1)


def days_remaining(end: date, now: date) -> int:
    """Whole days left after today; 0 on the last day and afterwards."""
    return max(0, (_as_date(end) - _as_date(now)).days)


def period_length(start: date, end: date) -> int:
    """Inclusive number of days in ``[start, end]``."""
    return (_as_date(end) - _as_date(start)).days + 1


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the calendar month containing ``day``."""
    day = _as_date(day)
    last = calendar.monthrange(day.year, day.month)[1]
    return date(day.year, day.month, 1), date(day.year, day.month, last)


def shift_months(day: date, months: int) -> date:
    """``day`` moved by whole calendar months, clamped to the month's end.

    ``shift_months(date(2025, 8, 31), -6)`` is 2025-02-28.
    """
    day = _as_date(day)
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))
