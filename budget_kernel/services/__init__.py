"""Kernel services: Budget Store and notification sinks."""

from budget_kernel.services.budget_store import SqlBudgetStore
from budget_kernel.services.notification_sink import (
    CollectingNotificationSink,
    DatabaseNotificationSink,
    LoggingNotificationSink,
)

__all__ = [
    "CollectingNotificationSink",
    "DatabaseNotificationSink",
    "LoggingNotificationSink",
    "SqlBudgetStore",
]
