"""
BudgetScanScheduler -- In-process polling scheduler for the alert scan.

Contract:
    Polls on a configurable interval, evaluates ``should_fire()`` (pure)
    against the injected Clock, and runs one BudgetAlertScan per due tick
    in a fresh session.

Architecture: budget_batch/services.  Uses budget_batch.domain.schedule
    for pure evaluation and budget_batch.services.scan for the work.

Invariants enforced:
    - All timestamps from the injected Clock.
    - Schedule evaluation is pure (should_fire / compute_next_run).
    - Graceful shutdown: ``stop()`` is honoured between ticks; a scan in
      progress runs to completion.
    - A failed tick is logged and rolled back; it never kills the loop.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Callable

from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.logging_config import get_logger

from budget_batch.domain.schedule import compute_next_run, should_fire
from budget_batch.domain.types import ScanRunResult, ScanSchedule, ScanStatus
from budget_batch.services.scan import BudgetAlertScan

logger = get_logger("batch.scheduler")


class BudgetScanScheduler:
    """Runs the alert scan whenever its schedule is due.

    Contract:
        - ``tick()`` fires the scan if due and advances the schedule.
        - ``trigger()`` runs the scan now, regardless of the schedule.
        - ``start()`` / ``stop()`` for background thread operation.

    Non-goals:
        - NOT a distributed scheduler (no leader election); run one
          instance per deployment.
        - Does NOT persist the schedule; a restart fires on the first tick.
        - Does NOT handle timezone conversions (expects UTC).
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        scan_factory: Callable[[Session], BudgetAlertScan],
        schedule: ScanSchedule,
        clock: Clock | None = None,
        tick_interval_seconds: float = 60,
    ):
        self._session_factory = session_factory
        self._scan_factory = scan_factory
        self._schedule = schedule
        self._clock = clock or SystemClock()
        self._tick_interval = tick_interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_result: ScanRunResult | None = None

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def tick(self) -> ScanRunResult | None:
        """Run the scan if the schedule is due (public for testing).

        Returns the scan result, or None when nothing fired or the run
        failed before producing a result.
        """
        now = self._clock.now()
        if not should_fire(self._schedule, now):
            return None
        return self._fire(now)

    def trigger(self) -> ScanRunResult | None:
        """Run the scan immediately (ON_DEMAND and manual runs)."""
        return self._fire(self._clock.now())

    def start(self) -> None:
        """Start the scheduler in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="budget-scan-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("scheduler_started", extra={"tick_interval": self._tick_interval})

    def stop(self, timeout: float = 30.0) -> None:
        """Signal stop and wait for the current tick to finish."""
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("scheduler_stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def schedule(self) -> ScanSchedule:
        return self._schedule

    @property
    def last_result(self) -> ScanRunResult | None:
        return self._last_result

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("scheduler_tick_exception")
            self._stop_event.wait(timeout=self._tick_interval)

    def _fire(self, now) -> ScanRunResult | None:
        session = self._session_factory()
        result: ScanRunResult | None = None
        try:
            result = self._scan_factory(session).run()
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("scheduler_tick_failed")
        finally:
            session.close()

        status = result.status if result is not None else ScanStatus.FAILED
        next_run = compute_next_run(
            self._schedule.frequency,
            last_run_at=now,
            cron_expression=self._schedule.cron_expression,
        )
        self._schedule = replace(
            self._schedule,
            last_run_at=now,
            last_run_status=status,
            next_run_at=next_run,
        )
        self._last_result = result

        logger.info(
            "scan_fired",
            extra={
                "status": status.value,
                "next_run_at": next_run.isoformat() if next_run else None,
            },
        )
        return result
