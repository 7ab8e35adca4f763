"""
Pure schedule evaluation for the periodic alert scan.

Contract:
    ``should_fire(schedule, as_of)`` and ``compute_next_run()`` are PURE --
    no I/O, no clock reads.  All timestamps come from the caller.

Architecture: budget_batch/domain.  ZERO I/O.

Cron support:
    Five fields (minute hour day_of_month month day_of_week) with ``*``,
    single values, ranges (``1-5``), lists (``1,15``) and steps (``*/15``,
    ``0-30/10``).  Day of week follows cron: 0 is Sunday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from budget_batch.domain.types import ScanSchedule, ScheduleFrequency

_FIELD_BOUNDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day_of_month", 1, 31),
    ("month", 1, 12),
    ("day_of_week", 0, 6),
)

_INTERVALS = {
    ScheduleFrequency.HOURLY: timedelta(hours=1),
    ScheduleFrequency.DAILY: timedelta(days=1),
    ScheduleFrequency.WEEKLY: timedelta(weeks=1),
}

# Search horizon for the next cron match, in minutes.
_CRON_HORIZON = 366 * 24 * 60


# =============================================================================
# Cron
# =============================================================================


@dataclass(frozen=True)
class CronSpec:
    """Parsed cron expression; each field is the set of allowed values."""

    minutes: frozenset[int]
    hours: frozenset[int]
    days_of_month: frozenset[int]
    months: frozenset[int]
    days_of_week: frozenset[int]

    def matches(self, dt: datetime) -> bool:
        # datetime.weekday() is 0=Monday; cron is 0=Sunday
        return (
            dt.minute in self.minutes
            and dt.hour in self.hours
            and dt.day in self.days_of_month
            and dt.month in self.months
            and (dt.weekday() + 1) % 7 in self.days_of_week
        )


def _bounded(value: int, name: str, low: int, high: int) -> int:
    if not low <= value <= high:
        raise ValueError(f"{name} value {value} outside [{low}, {high}]")
    return value


def _parse_field(text: str, name: str, low: int, high: int) -> frozenset[int]:
    """Expand one cron field into its allowed values.

    Raises:
        ValueError: on malformed syntax or out-of-range values.
    """
    allowed: set[int] = set()
    for term in text.split(","):
        term = term.strip()
        span, _, step_text = term.partition("/")
        step = int(step_text) if step_text else 1
        if step <= 0:
            raise ValueError(f"{name} step must be positive: {term!r}")

        if span == "*":
            first, last = low, high
        elif "-" in span:
            a, b = span.split("-", 1)
            first = _bounded(int(a), name, low, high)
            last = _bounded(int(b), name, low, high)
            if first > last:
                raise ValueError(f"{name} range is reversed: {term!r}")
        else:
            first = _bounded(int(span), name, low, high)
            # "5/15" means from 5 to the top of the range every 15
            last = high if step_text else first

        allowed.update(range(first, last + 1, step))
    return frozenset(allowed)


def parse_cron(expression: str) -> CronSpec:
    """Parse ``minute hour day_of_month month day_of_week``.

    Raises:
        ValueError: if the expression is malformed.
    """
    parts = expression.split()
    if len(parts) != len(_FIELD_BOUNDS):
        raise ValueError(
            f"Cron expression needs 5 fields, got {len(parts)}: {expression!r}"
        )
    minutes, hours, doms, months, dows = (
        _parse_field(part, name, low, high)
        for part, (name, low, high) in zip(parts, _FIELD_BOUNDS)
    )
    return CronSpec(
        minutes=minutes,
        hours=hours,
        days_of_month=doms,
        months=months,
        days_of_week=dows,
    )


def matches_cron(spec: CronSpec, dt: datetime) -> bool:
    return spec.matches(dt)


def next_cron_match(spec: CronSpec, after: datetime) -> datetime:
    """First whole minute strictly after ``after`` matching ``spec``.

    Raises:
        ValueError: if nothing matches within a year (e.g. ``0 0 31 2 *``).
    """
    candidate = after.replace(second=0, microsecond=0) + timedelta(minutes=1)
    for _ in range(_CRON_HORIZON):
        if spec.matches(candidate):
            return candidate
        candidate += timedelta(minutes=1)
    raise ValueError(f"No cron match within a year after {after.isoformat()}")


# =============================================================================
# Schedule evaluation
# =============================================================================


def should_fire(schedule: ScanSchedule, as_of: datetime) -> bool:
    """Decide whether the scan is due at ``as_of``.

    Rules:
        - Inactive and ON_DEMAND schedules never fire on their own.
        - ONCE fires only if it has never run.
        - Otherwise fire once ``as_of`` reaches ``next_run_at``.  The
          cron expression already shaped ``next_run_at``, so a late tick
          still fires.
        - Without ``next_run_at``: with a cron expression fire only on a
          matching minute, otherwise fire now.
    """
    if not schedule.is_active or schedule.frequency is ScheduleFrequency.ON_DEMAND:
        return False
    if schedule.frequency is ScheduleFrequency.ONCE:
        return schedule.last_run_at is None
    if schedule.next_run_at is not None:
        return as_of >= schedule.next_run_at
    if schedule.cron_expression:
        return parse_cron(schedule.cron_expression).matches(as_of)
    return True


def compute_next_run(
    frequency: ScheduleFrequency,
    last_run_at: datetime | None,
    cron_expression: str | None = None,
) -> datetime | None:
    """When the scan should next run after ``last_run_at``.

    Returns None for ONCE/ON_DEMAND and for a schedule that never ran.
    A cron expression takes precedence over the frequency interval.
    """
    if frequency in (ScheduleFrequency.ONCE, ScheduleFrequency.ON_DEMAND):
        return None
    if last_run_at is None:
        return None
    if cron_expression:
        return next_cron_match(parse_cron(cron_expression), last_run_at)
    return last_run_at + _INTERVALS[frequency]


def initial_schedule(
    frequency: ScheduleFrequency,
    as_of: datetime,
    cron_expression: str | None = None,
) -> ScanSchedule:
    """Schedule for a freshly started scheduler.

    With a cron expression the first run is the next matching minute at
    or after ``as_of``; otherwise the scan is due immediately.
    """
    next_run_at = None
    if cron_expression and frequency not in (
        ScheduleFrequency.ONCE, ScheduleFrequency.ON_DEMAND,
    ):
        next_run_at = next_cron_match(
            parse_cron(cron_expression), as_of - timedelta(minutes=1),
        )
    return ScanSchedule(
        frequency=frequency,
        cron_expression=cron_expression,
        next_run_at=next_run_at,
    )
