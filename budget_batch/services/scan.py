"""
BudgetAlertScan -- one pass of the periodic budget evaluation.

Contract:
    ``run()`` finds every owner with at least one active budget, computes
    progress for each of the owner's budgets, evaluates alerts and hands
    every alert to the NotificationSink.  Returns a ScanRunResult.

Architecture: budget_batch/services.  Uses budget_engines for the pure
    computation and the budget_kernel protocols for I/O.

Invariants enforced:
    - Failure isolation: an exception while processing one owner is
      logged with traceback and counted; the scan moves on to the next
      owner.  No retry inside a run; the next run is the retry.
    - With a session, each owner runs inside its own SAVEPOINT so a
      database error for one owner leaves the others' work intact.
    - Stateless between runs: alerts are not deduplicated, so a budget
      that stays above a threshold alerts on every run.

Spend window:
    Monthly budgets are measured against the calendar month containing
    "today".  Weekly and daily budgets are not evaluated yet; they are
    logged and counted as skipped.
"""

from __future__ import annotations

import time
from datetime import date
from uuid import uuid4

from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.dtos import Budget, PeriodKind
from budget_kernel.domain.protocols import (
    BudgetStore,
    NotificationSink,
    TransactionStore,
)
from budget_kernel.logging_config import LogContext, get_logger
from budget_engines.alerts import AlertEvaluator, AlertThresholds
from budget_engines.period_math import month_bounds
from budget_engines.progress import ProgressCalculator

from budget_batch.domain.types import OwnerScanResult, ScanRunResult, ScanStatus

logger = get_logger("batch.scan")


class BudgetAlertScan:
    """Evaluates all owners' active budgets and emits alerts.

    Non-goals:
        - Does NOT commit; the caller (scheduler tick) owns the
          transaction.
        - Does NOT remember previous alerts.
    """

    def __init__(
        self,
        budget_store: BudgetStore,
        transactions: TransactionStore,
        sink: NotificationSink,
        clock: Clock | None = None,
        thresholds: AlertThresholds | None = None,
        deactivate_expired: bool = True,
        session: Session | None = None,
    ):
        self._store = budget_store
        self._transactions = transactions
        self._sink = sink
        self._clock = clock or SystemClock()
        self._calculator = ProgressCalculator()
        self._evaluator = AlertEvaluator(thresholds)
        self._deactivate_expired = deactivate_expired
        self._session = session

    def run(self) -> ScanRunResult:
        scan_id = uuid4()
        start_time = time.monotonic()
        started_at = self._clock.now()
        today = started_at.date()

        with LogContext.bind(scan_id=str(scan_id)):
            logger.info("scan_started", extra={"as_of": today})

            expired = 0
            if self._deactivate_expired:
                expired = self._store.deactivate_expired(today)

            owner_ids = self._store.owner_ids_with_active_budgets()
            results = [self._scan_owner(owner_id, today) for owner_id in owner_ids]

            failed_ids = tuple(r.owner_id for r in results if not r.succeeded)
            succeeded = len(results) - len(failed_ids)
            if not failed_ids:
                status = ScanStatus.COMPLETED
            elif succeeded == 0:
                status = ScanStatus.FAILED
            else:
                status = ScanStatus.PARTIALLY_COMPLETED

            result = ScanRunResult(
                scan_id=scan_id,
                status=status,
                owners_total=len(results),
                owners_succeeded=succeeded,
                owners_failed=len(failed_ids),
                budgets_evaluated=sum(r.budgets_evaluated for r in results),
                budgets_skipped=sum(r.budgets_skipped for r in results),
                alerts_sent=sum(r.alerts_sent for r in results),
                expired_deactivated=expired,
                failed_owner_ids=failed_ids,
                owner_results=tuple(results),
                started_at=started_at,
                completed_at=self._clock.now(),
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )

            logger.info(
                "scan_completed",
                extra={
                    "status": status.value,
                    "owners_total": result.owners_total,
                    "owners_failed": result.owners_failed,
                    "budgets_evaluated": result.budgets_evaluated,
                    "budgets_skipped": result.budgets_skipped,
                    "alerts_sent": result.alerts_sent,
                    "expired_deactivated": expired,
                    "duration_ms": result.duration_ms,
                },
            )
            return result

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _scan_owner(self, owner_id: int, today: date) -> OwnerScanResult:
        owner_start = time.monotonic()
        savepoint = self._session.begin_nested() if self._session is not None else None

        with LogContext.bind(owner_id=str(owner_id)):
            try:
                evaluated, skipped, sent = self._evaluate_owner(owner_id, today)
            except Exception as exc:
                if savepoint is not None:
                    savepoint.rollback()
                logger.exception(
                    "owner_scan_failed",
                    extra={"error_type": type(exc).__name__},
                )
                return OwnerScanResult(
                    owner_id=owner_id,
                    succeeded=False,
                    error_code=getattr(exc, "code", "UNHANDLED_EXCEPTION"),
                    error_message=str(exc),
                    duration_ms=int((time.monotonic() - owner_start) * 1000),
                )

            if savepoint is not None:
                savepoint.commit()
            return OwnerScanResult(
                owner_id=owner_id,
                succeeded=True,
                budgets_evaluated=evaluated,
                budgets_skipped=skipped,
                alerts_sent=sent,
                duration_ms=int((time.monotonic() - owner_start) * 1000),
            )

    def _evaluate_owner(self, owner_id: int, today: date) -> tuple[int, int, int]:
        evaluated = skipped = sent = 0
        for budget in self._store.list_active(owner_id):
            kind = PeriodKind(budget.period_kind)
            if kind is PeriodKind.MONTHLY:
                alert = self._evaluate_monthly(budget, today)
                evaluated += 1
                if alert is not None:
                    self._sink.send(alert)
                    sent += 1
            elif kind in (PeriodKind.WEEKLY, PeriodKind.DAILY):
                # Not yet implemented: no spend window is defined for these.
                logger.info(
                    "budget_period_kind_not_implemented",
                    extra={"budget_id": str(budget.id), "period_kind": kind.value},
                )
                skipped += 1
            else:
                raise ValueError(f"Unhandled period kind: {kind!r}")
        return evaluated, skipped, sent

    def _evaluate_monthly(self, budget: Budget, today: date):
        month_start, month_end = month_bounds(today)
        spent = self._transactions.sum_expenses(
            budget.owner_id, budget.category_key, month_start, month_end,
        )
        progress = self._calculator.calculate(budget, spent, today)
        return self._evaluator.evaluate(progress)
