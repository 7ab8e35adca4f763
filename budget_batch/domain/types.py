"""
budget_batch.domain.types -- Pure frozen dataclasses for the alert scan.

ZERO I/O.  Frozen dataclasses with enum status fields and tuples for
immutable collections.

Invariants enforced:
    - All DTOs are frozen dataclasses (immutable).
    - A scan has no persistent state; ScanRunResult is the only record of
      a run and is returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


# =============================================================================
# Status enums
# =============================================================================


class ScanStatus(str, Enum):
    """Outcome of one scan over all owners."""

    COMPLETED = "completed"  # Every owner processed
    PARTIALLY_COMPLETED = "partially_completed"  # Some owners failed
    FAILED = "failed"  # Every owner failed


class ScheduleFrequency(str, Enum):
    """Recurrence frequency of the periodic scan."""

    ONCE = "once"  # Fire once, no recurrence
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    ON_DEMAND = "on_demand"  # Manual trigger only


# =============================================================================
# Scan results
# =============================================================================


@dataclass(frozen=True)
class OwnerScanResult:
    """Result of evaluating one owner's active budgets."""

    owner_id: int
    succeeded: bool
    budgets_evaluated: int = 0
    budgets_skipped: int = 0
    alerts_sent: int = 0
    error_code: str | None = None
    error_message: str | None = None
    duration_ms: int = 0


@dataclass(frozen=True)
class ScanRunResult:
    """Immutable result of one complete scan.

    Returned by ``BudgetAlertScan.run()``.
    """

    scan_id: UUID
    status: ScanStatus
    owners_total: int
    owners_succeeded: int
    owners_failed: int
    budgets_evaluated: int
    budgets_skipped: int
    alerts_sent: int
    expired_deactivated: int = 0
    failed_owner_ids: tuple[int, ...] = ()
    owner_results: tuple[OwnerScanResult, ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0


# =============================================================================
# Schedule
# =============================================================================


@dataclass(frozen=True)
class ScanSchedule:
    """Snapshot of when the scan should run next.

    Evaluation (``should_fire``) is pure: the scheduler reads
    ``next_run_at`` and the current clock, with no side effects.
    """

    frequency: ScheduleFrequency
    cron_expression: str | None = None
    next_run_at: datetime | None = None
    last_run_at: datetime | None = None
    last_run_status: ScanStatus | None = None
    is_active: bool = True
