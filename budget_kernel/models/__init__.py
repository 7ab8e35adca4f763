"""ORM models.  Importing this package registers every table on Base.metadata."""

from budget_kernel.models.budget import BudgetModel
from budget_kernel.models.notification import NotificationModel
from budget_kernel.models.transaction import TransactionModel

__all__ = [
    "BudgetModel",
    "NotificationModel",
    "TransactionModel",
]
