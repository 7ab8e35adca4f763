"""
Notification sinks -- implementations of the ``NotificationSink`` protocol.

Responsibility:
    Hand alerts off to a destination.  Delivery (push, e-mail, in-app
    rendering) is the outer application's concern; these sinks only record
    the alert somewhere it can be picked up.

    - ``LoggingNotificationSink``: emits one structured log record per alert.
    - ``DatabaseNotificationSink``: writes a ``notifications`` row
      (flush-only, caller commits).
    - ``CollectingNotificationSink``: keeps alerts in memory, for dry runs
      and tests.

Non-goals:
    No sink deduplicates.  A budget that stays above a threshold is
    alerted again on every evaluation.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from budget_kernel.domain.dtos import Alert
from budget_kernel.logging_config import get_logger
from budget_kernel.models.notification import NotificationModel
from budget_kernel.services.base import BaseService

logger = get_logger("services.notifications")

BUDGET_ALERT_TYPE = "budget_alert"


class LoggingNotificationSink:
    """Sink that logs each alert at WARNING level."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def send(self, alert: Alert) -> None:
        self._log.warning(
            "budget_alert",
            extra={
                "alert_owner_id": alert.owner_id,
                "alert_budget_id": str(alert.budget_id),
                "category_key": alert.category_key,
                "severity": alert.severity.value,
                "percentage_used": alert.percentage_used,
                "days_remaining": alert.days_remaining,
                "alert_message": alert.message,
            },
        )


class DatabaseNotificationSink(BaseService[NotificationModel]):
    """Sink that stores each alert as an unread notification row."""

    def __init__(self, session: Session):
        super().__init__(session)

    def send(self, alert: Alert) -> None:
        self.session.add(
            NotificationModel(
                owner_id=alert.owner_id,
                budget_id=alert.budget_id,
                notification_type=BUDGET_ALERT_TYPE,
                severity=alert.severity.value,
                message=alert.message,
                percentage_used=alert.percentage_used,
                days_remaining=alert.days_remaining,
                is_read=False,
            )
        )
        self.session.flush()
        logger.info(
            "notification_stored",
            extra={
                "alert_budget_id": str(alert.budget_id),
                "severity": alert.severity.value,
            },
        )


class CollectingNotificationSink:
    """In-memory sink; ``alerts`` holds everything sent, in order."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def send(self, alert: Alert) -> None:
        self.alerts.append(alert)

    def clear(self) -> None:
        self.alerts.clear()
