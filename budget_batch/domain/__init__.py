"""budget_batch.domain -- pure scan types and schedule evaluation (ZERO I/O)."""

from budget_batch.domain.schedule import (
    CronSpec,
    compute_next_run,
    initial_schedule,
    matches_cron,
    next_cron_match,
    parse_cron,
    should_fire,
)
from budget_batch.domain.types import (
    OwnerScanResult,
    ScanRunResult,
    ScanSchedule,
    ScanStatus,
    ScheduleFrequency,
)

__all__ = [
    "CronSpec",
    "OwnerScanResult",
    "ScanRunResult",
    "ScanSchedule",
    "ScanStatus",
    "ScheduleFrequency",
    "compute_next_run",
    "initial_schedule",
    "matches_cron",
    "next_cron_match",
    "parse_cron",
    "should_fire",
]
