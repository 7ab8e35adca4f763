"""
Module: budget_kernel.models.notification
Responsibility: ORM persistence for in-app notifications written by the
    database notification sink.
Architecture position: Kernel > Models.  May import from db/base.py only.

Non-goals:
    Rows are an outbox for the outer application to display; nothing in
    the engine reads them back, so they do not deduplicate alerts.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TrackedBase, UUIDString


class NotificationModel(TrackedBase):
    """One delivered alert."""

    __tablename__ = "notifications"

    __table_args__ = (
        Index("ix_notifications_owner_read", "owner_id", "is_read"),
    )

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    budget_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    percentage_used: Mapped[Decimal | None] = mapped_column(nullable=True)
    days_remaining: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
