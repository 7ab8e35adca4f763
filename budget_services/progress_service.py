"""
BudgetProgressService -- request-triggered progress, alerts, summaries and
per-category performance.

Responsibility:
    Joins budgets from the Budget Store with expense totals from the
    Transaction Store and runs them through the pure engines.  Everything
    is recomputed per call; nothing is cached.

Architecture position:
    Services -- orchestrates budget_engines over the collaborator
    protocols.  "now" comes from the injected Clock.

Spend window:
    Request-triggered reads sum expenses over the budget's own
    ``[start_date, end_date]``.  The periodic scan uses the calendar month
    instead (see ``budget_batch.services.scan``).  Monthly summaries sum
    only the days a budget shares with the requested month.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.dtos import (
    Alert,
    Budget,
    BudgetProgress,
    BudgetSummary,
    CategoryPerformance,
    MonthlyBudgetSummary,
)
from budget_kernel.domain.protocols import BudgetStore, TransactionStore
from budget_kernel.exceptions import BudgetNotFoundError, InvalidPeriodError
from budget_kernel.logging_config import get_logger
from budget_engines.alerts import AlertEvaluator, AlertThresholds
from budget_engines.period_math import month_bounds, overlap_window, shift_months
from budget_engines.performance import category_performance
from budget_engines.progress import ProgressCalculator
from budget_engines.summary import summarize, summarize_month

logger = get_logger("services.progress")


class BudgetProgressService:
    """Read-side service producing progress snapshots for one owner."""

    def __init__(
        self,
        store: BudgetStore,
        transactions: TransactionStore,
        clock: Clock | None = None,
        thresholds: AlertThresholds | None = None,
    ):
        self._store = store
        self._transactions = transactions
        self._clock = clock or SystemClock()
        self._calculator = ProgressCalculator()
        self._evaluator = AlertEvaluator(thresholds)

    def get_progress(self, budget_id: UUID, owner_id: int) -> BudgetProgress:
        budget = self._store.get(budget_id, owner_id)
        if budget is None:
            raise BudgetNotFoundError(str(budget_id))
        return self._progress_for(budget)

    def list_progress(self, owner_id: int) -> list[BudgetProgress]:
        """Progress of every active budget of ``owner_id``."""
        return [self._progress_for(b) for b in self._store.list_active(owner_id)]

    def get_alerts(self, owner_id: int) -> list[Alert]:
        """Alerts for active budgets not yet past their end date, highest
        utilization first."""
        today = self._clock.today()
        alerts = []
        for progress in self.list_progress(owner_id):
            if progress.budget.is_expired(today):
                continue
            alert = self._evaluator.evaluate(progress)
            if alert is not None:
                alerts.append(alert)
        alerts.sort(key=lambda a: a.percentage_used, reverse=True)
        return alerts

    def get_summary(self, owner_id: int) -> BudgetSummary:
        summary = summarize(owner_id, self.list_progress(owner_id))
        logger.debug(
            "budget_summary_computed",
            extra={
                "owner_id": owner_id,
                "total_budgets": summary.total_budgets,
                "over_budget_count": summary.over_budget_count,
            },
        )
        return summary

    def get_performance(self, owner_id: int, months: int = 6) -> list[CategoryPerformance]:
        """Per-category track record of budgets that started within the last
        ``months`` calendar months.

        Each budget's spend is summed over its own window.

        Raises:
            InvalidPeriodError: ``months`` is not positive.
        """
        if months <= 0:
            raise InvalidPeriodError(f"look-back must be at least one month, got {months}")
        today = self._clock.today()
        since = shift_months(today, -months)
        outcomes = [
            (budget, self._spent_within(budget, budget.start_date, budget.end_date))
            for budget in self._store.list_overlapping(owner_id, since, today)
            if budget.start_date >= since
        ]
        rows = category_performance(outcomes)
        logger.debug(
            "budget_performance_computed",
            extra={"owner_id": owner_id, "months": months, "categories": len(rows)},
        )
        return rows

    def get_monthly_summary(self, owner_id: int, year: int, month: int) -> MonthlyBudgetSummary:
        """Totals for every budget, active or not, that touches the month.

        Spend counts only the days the budget and the month share.

        Raises:
            InvalidPeriodError: ``month`` is outside 1..12.
        """
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"month must be within 1..12, got {month}")
        first, last = month_bounds(date(year, month, 1))
        outcomes = []
        for budget in self._store.list_overlapping(owner_id, first, last):
            start, end = overlap_window(budget.start_date, budget.end_date, first, last)
            outcomes.append((budget, self._spent_within(budget, start, end)))
        return summarize_month(owner_id, year, month, outcomes)

    def _progress_for(self, budget: Budget) -> BudgetProgress:
        spent = self._spent_within(budget, budget.start_date, budget.end_date)
        return self._calculator.calculate(budget, spent, self._clock.today())

    def _spent_within(self, budget: Budget, start: date, end: date) -> Decimal:
        return self._transactions.sum_expenses(
            budget.owner_id, budget.category_key, start, end,
        )
