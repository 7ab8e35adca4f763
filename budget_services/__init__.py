"""
budget_services -- Request-triggered budget operations.

    BudgetService          write boundary (create/update/activate/delete)
    OverlapValidator       active-window collision check
    BudgetProgressService  progress, alerts and summary reads

Services depend on budget_kernel protocols and budget_engines only; they
never commit the caller's transaction.
"""

from budget_services.budget_service import BudgetService
from budget_services.overlap_validator import OverlapResult, OverlapValidator
from budget_services.progress_service import BudgetProgressService

__all__ = [
    "BudgetProgressService",
    "BudgetService",
    "OverlapResult",
    "OverlapValidator",
]
