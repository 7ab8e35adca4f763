"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that flow between the stores,
    the calculation engines and the scan: Budget (persistence boundary),
    NewBudget / BudgetPatch (write inputs), BudgetProgress and
    BudgetSummary (derived read models), and Alert (evaluator output).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies.  ``from_model()`` boundary converters live on
    the ORM models, never here.

Invariants enforced:
    - All DTOs are frozen dataclasses; collections are tuples.
    - Monetary fields are ``Decimal``; floats never appear.

Data flow:
    NewBudget -> Budget -> (spent) -> BudgetProgress -> Alert
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


class PeriodKind(str, Enum):
    """Recurrence kind a budget was defined for."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"


class TransactionType(str, Enum):
    """Direction of a transaction; the type carries the sign."""

    INCOME = "income"
    EXPENSE = "expense"


class AlertSeverity(str, Enum):
    """Alert tier produced by the alert evaluator."""

    WARNING = "warning"  # percentage_used >= warning threshold
    CRITICAL = "critical"  # percentage_used >= critical threshold


# =============================================================================
# Budget
# =============================================================================


@dataclass(frozen=True)
class Budget:
    """Immutable snapshot of a persisted budget.

    A spending ceiling for one category over one inclusive
    ``[start_date, end_date]`` window, owned by exactly one user.
    """

    id: UUID
    owner_id: int
    category_key: str
    amount: Decimal
    period_kind: PeriodKind
    start_date: date
    end_date: date
    is_active: bool = True

    def is_expired(self, today: date) -> bool:
        """True once the last day of the window has passed."""
        return self.end_date < today


@dataclass(frozen=True)
class NewBudget:
    """Input for budget creation (no identifier yet)."""

    owner_id: int
    category_key: str
    amount: Decimal
    period_kind: PeriodKind
    start_date: date
    end_date: date
    is_active: bool = True


@dataclass(frozen=True)
class BudgetPatch:
    """Partial update of a budget.

    ``None`` means "leave unchanged"; no patchable field accepts ``None``
    as a real value.
    """

    category_key: str | None = None
    amount: Decimal | None = None
    period_kind: PeriodKind | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set by this patch."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()

    def apply_to(self, budget: Budget) -> Budget:
        """Return ``budget`` with this patch applied (nothing is persisted)."""
        return replace(budget, **self.changes())


# =============================================================================
# Derived read models
# =============================================================================


@dataclass(frozen=True)
class BudgetProgress:
    """Spending snapshot of one budget at one point in time.

    Recomputed on every read; never cached beyond a single request or
    scan cycle.
    """

    budget: Budget
    spent_amount: Decimal
    remaining_amount: Decimal
    percentage_used: Decimal
    days_elapsed: int
    days_remaining: int
    daily_average_spending: Decimal
    projected_spending: Decimal
    is_over_budget: bool
    is_on_track: bool


@dataclass(frozen=True)
class Alert:
    """Transient alert handed to a notification sink.

    No alert history is kept; the same alert is produced again on every
    evaluation while the budget stays above a threshold.
    """

    budget_id: UUID
    owner_id: int
    category_key: str
    severity: AlertSeverity
    percentage_used: Decimal
    days_remaining: int
    message: str


@dataclass(frozen=True)
class BudgetSummary:
    """Totals across one owner's budget progresses."""

    owner_id: int
    total_budgets: int
    total_budget_amount: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    over_budget_count: int
    on_track_count: int
    average_utilization: Decimal


@dataclass(frozen=True)
class MonthlyBudgetSummary:
    """Budgets touching one calendar month and the spend inside it."""

    owner_id: int
    year: int
    month: int
    total_budgets: int
    total_amount: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    categories_exceeded: tuple[str, ...] = ()


@dataclass(frozen=True)
class CategoryPerformance:
    """How one category's budgets fared over a look-back span.

    ``success_rate`` is the share of budgets whose spend stayed within the
    amount; ``utilization`` is total spend as a share of total budget.
    Both are percentages.
    """

    category_key: str
    budget_count: int
    successful_budgets: int
    total_budget: Decimal
    total_spent: Decimal
    success_rate: Decimal
    utilization: Decimal
