"""
Module: budget_kernel.models.transaction
Responsibility: ORM mapping of income/expense records.  The budget engine
    only aggregates these rows; transaction entry belongs to the outer
    application.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TrackedBase


class TransactionModel(TrackedBase):
    """
    Single income or expense record.

    ``amount`` is stored as a positive magnitude; ``transaction_type``
    carries the direction.
    """

    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_transactions_amount"),
        Index(
            "ix_transactions_owner_category_date",
            "owner_id", "category_key", "transaction_date",
        ),
    )

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category_key: Mapped[str] = mapped_column(String(100), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<TransactionModel {self.owner_id}/{self.category_key} "
            f"{self.transaction_type} {self.amount} on {self.transaction_date}>"
        )
