"""
budget_kernel.domain -- Pure types, clock and collaborator protocols.

ZERO I/O.  All types are frozen dataclasses.
"""

from budget_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SystemClock,
)
from budget_kernel.domain.dtos import (
    Alert,
    AlertSeverity,
    Budget,
    BudgetPatch,
    BudgetProgress,
    BudgetSummary,
    CategoryPerformance,
    MonthlyBudgetSummary,
    NewBudget,
    PeriodKind,
    TransactionType,
)
from budget_kernel.domain.protocols import (
    BudgetStore,
    NotificationSink,
    TransactionStore,
)

__all__ = [
    "Alert",
    "AlertSeverity",
    "Budget",
    "BudgetPatch",
    "BudgetProgress",
    "BudgetStore",
    "BudgetSummary",
    "CategoryPerformance",
    "Clock",
    "DeterministicClock",
    "MonthlyBudgetSummary",
    "NewBudget",
    "NotificationSink",
    "PeriodKind",
    "SystemClock",
    "TransactionStore",
    "TransactionType",
]
