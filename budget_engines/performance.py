"""
budget_engines.performance -- Per-category budget track record.

Groups past budgets by category and reports how many stayed within their
amount and how much of the total was used.  Inputs are ``(budget, spent)``
pairs; selecting the look-back span and summing spend is the caller's job.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from budget_kernel.domain.dtos import Budget, CategoryPerformance
from budget_engines.summary import utilization
from budget_engines.tracer import traced_engine

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@traced_engine("category_performance", "1.0", fingerprint_fields=("outcomes",))
def category_performance(
    outcomes: Sequence[tuple[Budget, Decimal]],
) -> list[CategoryPerformance]:
    """One row per category, largest total budget first.

    A budget is successful when its spend does not exceed its amount.
    Ties on total budget are broken by category key.
    """
    grouped: dict[str, list[tuple[Budget, Decimal]]] = {}
    for budget, spent in outcomes:
        grouped.setdefault(budget.category_key, []).append((budget, spent))

    rows = []
    for category_key, pairs in grouped.items():
        total_budget = sum((b.amount for b, _ in pairs), _ZERO)
        total_spent = sum((spent for _, spent in pairs), _ZERO)
        successful = sum(1 for b, spent in pairs if spent <= b.amount)
        rows.append(CategoryPerformance(
            category_key=category_key,
            budget_count=len(pairs),
            successful_budgets=successful,
            total_budget=total_budget,
            total_spent=total_spent,
            success_rate=Decimal(successful) / Decimal(len(pairs)) * _HUNDRED,
            utilization=utilization(total_spent, total_budget),
        ))

    rows.sort(key=lambda r: (-r.total_budget, r.category_key))
    return rows
