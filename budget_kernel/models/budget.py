"""
Module: budget_kernel.models.budget
Responsibility: ORM persistence for budgets -- one spending ceiling per
    owner, category and inclusive date window.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain DTOs only.

Invariants enforced:
    - start_date <= end_date and amount >= 0 (CHECK constraints).
    - No overlapping active windows per (owner_id, category_key): checked by
      the overlap validator and, on PostgreSQL, by the exclusion constraint
      installed from db/sql/01_budget_overlap.sql.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TrackedBase
from budget_kernel.domain.dtos import Budget, NewBudget, PeriodKind


class BudgetModel(TrackedBase):
    """
    Persistent budget record.

    Contract:
        Rows are addressed by (id, owner_id); callers never look a budget
        up by id alone.

    Non-goals:
        - Does NOT store spend; progress is derived from transactions on
          every read.
    """

    __tablename__ = "budgets"

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_budgets_window"),
        CheckConstraint("amount >= 0", name="ck_budgets_amount"),
        Index("ix_budgets_owner_active", "owner_id", "is_active"),
        Index("ix_budgets_owner_category", "owner_id", "category_key"),
        Index("ix_budgets_end_date", "end_date"),
    )

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category_key: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    period_kind: Mapped[str] = mapped_column(String(20), nullable=False)

    # Window boundaries (inclusive)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<BudgetModel {self.owner_id}/{self.category_key} "
            f"{self.start_date}..{self.end_date}>"
        )

    def to_dto(self) -> Budget:
        return Budget(
            id=self.id,
            owner_id=self.owner_id,
            category_key=self.category_key,
            amount=Decimal(self.amount),
            period_kind=PeriodKind(self.period_kind),
            start_date=self.start_date,
            end_date=self.end_date,
            is_active=self.is_active,
        )

    @classmethod
    def from_new(cls, data: NewBudget) -> BudgetModel:
        return cls(
            owner_id=data.owner_id,
            category_key=data.category_key,
            amount=data.amount,
            period_kind=PeriodKind(data.period_kind).value,
            start_date=data.start_date,
            end_date=data.end_date,
            is_active=data.is_active,
        )
