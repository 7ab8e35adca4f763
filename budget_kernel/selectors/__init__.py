"""Read-only query selectors."""

from budget_kernel.selectors.budget_selector import BudgetSelector
from budget_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "BudgetSelector",
    "TransactionSelector",
]
