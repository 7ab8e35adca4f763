"""
budget_engines.progress -- Budget progress and end-of-period projection.

Responsibility:
    Given one budget, the amount spent against it and "now", compute the
    remaining amount, percentage used, daily average, projected spend over
    the full window and the over-budget / on-track flags.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The caller supplies
    ``spent_amount`` (from the Transaction Store) and ``now`` (from the
    injected Clock).

Invariants enforced:
    - Decimal-only arithmetic.
    - Zero guards: a zero-amount budget reports 0% used; days_elapsed is
      floored at 1 so the daily average is always defined.
    - Every finite input yields finite output.  A non-finite result raises
      ComputationDegenerateError instead of reaching the alert evaluator.

Projection:
    ``projected_spending = daily_average * (days_elapsed + days_remaining)``.
    The total length is re-derived from "now" rather than taken from
    ``end - start`` so that a budget edited mid-period projects from today.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, Overflow, localcontext

from budget_kernel.domain.dtos import Budget, BudgetProgress
from budget_kernel.exceptions import ComputationDegenerateError
from budget_kernel.logging_config import get_logger
from budget_engines.period_math import days_elapsed, days_remaining
from budget_engines.tracer import traced_engine

logger = get_logger("engines.progress")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class ProgressCalculator:
    """Stateless calculator producing ``BudgetProgress`` snapshots."""

    @traced_engine(
        "progress", "1.0",
        fingerprint_fields=("budget", "spent_amount", "now"),
    )
    def calculate(
        self, budget: Budget, spent_amount: Decimal, now: date,
    ) -> BudgetProgress:
        """Compute progress for ``budget`` as of ``now``.

        Raises:
            ComputationDegenerateError: if an input is NaN or infinite, or
                a derived value overflows the Decimal exponent range.
        """
        amount = Decimal(budget.amount)
        spent = Decimal(spent_amount)
        # NaN cannot be ordered and Infinity traps in the default context,
        # so both are rejected before any arithmetic.
        for name, value in (("amount", amount), ("spent_amount", spent)):
            if not value.is_finite():
                _degenerate(budget, name, value)

        elapsed = days_elapsed(budget.start_date, now)
        left = days_remaining(budget.end_date, now)

        # Overflow yields Infinity instead of trapping; _ensure_finite
        # reports it as a degenerate computation.
        with localcontext() as ctx:
            ctx.traps[Overflow] = False
            remaining = amount - spent
            percentage = (spent / amount) * _HUNDRED if amount > _ZERO else _ZERO
            daily_average = spent / Decimal(elapsed)
            projected = daily_average * Decimal(elapsed + left)

        progress = BudgetProgress(
            budget=budget,
            spent_amount=spent,
            remaining_amount=remaining,
            percentage_used=percentage,
            days_elapsed=elapsed,
            days_remaining=left,
            daily_average_spending=daily_average,
            projected_spending=projected,
            is_over_budget=spent > amount,
            is_on_track=projected <= amount,
        )
        _ensure_finite(progress)
        return progress


def _ensure_finite(progress: BudgetProgress) -> None:
    for name in (
        "spent_amount",
        "remaining_amount",
        "percentage_used",
        "daily_average_spending",
        "projected_spending",
    ):
        value: Decimal = getattr(progress, name)
        if not value.is_finite():
            _degenerate(progress.budget, name, value)


def _degenerate(budget: Budget, name: str, value: Decimal) -> None:
    logger.error(
        "progress_computation_degenerate",
        extra={
            "degenerate_budget_id": str(budget.id),
            "field": name,
            "value": str(value),
        },
    )
    raise ComputationDegenerateError(
        budget_id=str(budget.id),
        field_name=name,
        value=str(value),
    )
