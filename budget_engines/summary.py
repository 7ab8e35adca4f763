"""
budget_engines.summary -- Roll up an owner's progress snapshots.

Pure aggregation over already computed ``BudgetProgress`` values; the
caller decides which budgets are included (normally the active ones).
``summarize_month`` does the same for budgets paired with the spend that
fell inside one calendar month.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from budget_kernel.domain.dtos import (
    Budget,
    BudgetProgress,
    BudgetSummary,
    MonthlyBudgetSummary,
)
from budget_engines.tracer import traced_engine

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def utilization(spent: Decimal, amount: Decimal) -> Decimal:
    """``spent`` as a percentage of ``amount``; zero when nothing is budgeted."""
    if amount > _ZERO:
        return spent / amount * _HUNDRED
    return _ZERO


@traced_engine("summary", "1.1", fingerprint_fields=("owner_id", "progresses"))
def summarize(owner_id: int, progresses: Sequence[BudgetProgress]) -> BudgetSummary:
    """Totals, counts and overall utilization across ``progresses``.

    Utilization is weighted by amount: total spent over total budgeted.
    An owner without budgets gets an all-zero summary.
    """
    total_amount = sum((p.budget.amount for p in progresses), _ZERO)
    total_spent = sum((p.spent_amount for p in progresses), _ZERO)

    return BudgetSummary(
        owner_id=owner_id,
        total_budgets=len(progresses),
        total_budget_amount=total_amount,
        total_spent=total_spent,
        total_remaining=total_amount - total_spent,
        over_budget_count=sum(1 for p in progresses if p.is_over_budget),
        on_track_count=sum(1 for p in progresses if p.is_on_track),
        average_utilization=utilization(total_spent, total_amount),
    )


@traced_engine(
    "monthly_summary", "1.0",
    fingerprint_fields=("owner_id", "year", "month", "outcomes"),
)
def summarize_month(
    owner_id: int,
    year: int,
    month: int,
    outcomes: Sequence[tuple[Budget, Decimal]],
) -> MonthlyBudgetSummary:
    """Month totals from ``(budget, spent_in_month)`` pairs.

    Budget amounts count in full.  A category is listed as exceeded when
    any of its budgets' in-month spend is above the budget amount; the
    list is sorted and free of duplicates.
    """
    total_amount = sum((b.amount for b, _ in outcomes), _ZERO)
    total_spent = sum((spent for _, spent in outcomes), _ZERO)
    exceeded = sorted({b.category_key for b, spent in outcomes if spent > b.amount})

    return MonthlyBudgetSummary(
        owner_id=owner_id,
        year=year,
        month=month,
        total_budgets=len(outcomes),
        total_amount=total_amount,
        total_spent=total_spent,
        total_remaining=total_amount - total_spent,
        categories_exceeded=tuple(exceeded),
    )
