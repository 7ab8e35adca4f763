"""
BudgetBatchOrchestrator -- DI container for the periodic alert scan.

Contract:
    Composes configuration, clock, stores and notification sink into a
    BudgetAlertScan per session and a BudgetScanScheduler.  Single place
    where the scan's dependencies are wired.

Architecture: budget_batch (top-level).  The canonical entry point for
    running the scan, once or on a schedule.

Invariants enforced:
    - Clock injection: the scan and the scheduler share one Clock.
    - Thresholds, scan settings and the log level come from
      ``budget_config`` only.
"""

from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session

from budget_config import EngineConfig, get_active_config
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.protocols import NotificationSink
from budget_kernel.logging_config import configure_logging, get_logger, set_log_level
from budget_kernel.selectors.transaction_selector import TransactionSelector
from budget_kernel.services.budget_store import SqlBudgetStore
from budget_kernel.services.notification_sink import DatabaseNotificationSink

from budget_batch.domain.schedule import initial_schedule
from budget_batch.domain.types import ScanRunResult
from budget_batch.services.scan import BudgetAlertScan
from budget_batch.services.scheduler import BudgetScanScheduler

logger = get_logger("batch.orchestrator")

SinkFactory = Callable[[Session], NotificationSink]


class BudgetBatchOrchestrator:
    """DI container for the alert scan.

    Contract:
        - ``create_scan(session)`` returns a BudgetAlertScan bound to
          ``session``.
        - ``run_once(session)`` runs one scan; the caller commits.
        - ``create_scheduler(session_factory)`` returns a scheduler whose
          first run follows the configured frequency/cron.

    Non-goals:
        - Does NOT start the scheduler automatically; caller decides.
        - Does NOT manage session lifecycle outside the scheduler.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        clock: Clock | None = None,
        sink_factory: SinkFactory | None = None,
    ) -> None:
        self._config = config or get_active_config()
        configure_logging(level=self._config.log_level)
        set_log_level(self._config.log_level)
        self._clock = clock or SystemClock()
        self._sink_factory = sink_factory or DatabaseNotificationSink

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    def create_scan(self, session: Session) -> BudgetAlertScan:
        return BudgetAlertScan(
            budget_store=SqlBudgetStore(session),
            transactions=TransactionSelector(session),
            sink=self._sink_factory(session),
            clock=self._clock,
            thresholds=self._config.thresholds,
            deactivate_expired=self._config.scan.deactivate_expired,
            session=session,
        )

    def run_once(self, session: Session) -> ScanRunResult:
        """Run one scan in ``session`` without committing."""
        return self.create_scan(session).run()

    def create_scheduler(
        self, session_factory: Callable[[], Session],
    ) -> BudgetScanScheduler:
        settings = self._config.scan
        schedule = initial_schedule(
            settings.frequency,
            self._clock.now(),
            cron_expression=settings.cron_expression,
        )
        logger.info(
            "scheduler_created",
            extra={
                "config_id": self._config.config_id,
                "frequency": settings.frequency.value,
                "cron_expression": settings.cron_expression,
                "next_run_at": schedule.next_run_at,
            },
        )
        return BudgetScanScheduler(
            session_factory=session_factory,
            scan_factory=self.create_scan,
            schedule=schedule,
            clock=self._clock,
            tick_interval_seconds=settings.tick_interval_seconds,
        )
