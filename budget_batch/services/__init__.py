"""budget_batch.services -- the alert scan and its polling scheduler."""

from budget_batch.services.scan import BudgetAlertScan
from budget_batch.services.scheduler import BudgetScanScheduler

__all__ = ["BudgetAlertScan", "BudgetScanScheduler"]
