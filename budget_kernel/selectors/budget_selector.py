"""
BudgetSelector -- read-only budget queries.

Responsibility:
    The query half of the Budget Store: active budgets per owner/category,
    owners with active budgets, single-budget lookup scoped by owner,
    budgets intersecting a date range and per-category history.

Architecture position:
    Kernel > Selectors.  Returns ``Budget`` DTOs, never ORM rows.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from budget_kernel.domain.dtos import Budget
from budget_kernel.models.budget import BudgetModel
from budget_kernel.selectors.base import BaseSelector


class BudgetSelector(BaseSelector[BudgetModel]):
    """Read-only access to budgets."""

    def list_active(
        self, owner_id: int, category_key: str | None = None,
    ) -> list[Budget]:
        """Active budgets for an owner, optionally narrowed to one category.

        Ordered by start date so callers see windows chronologically.
        """
        stmt = select(BudgetModel).where(
            BudgetModel.owner_id == owner_id,
            BudgetModel.is_active == True,  # noqa: E712
        )
        if category_key is not None:
            stmt = stmt.where(BudgetModel.category_key == category_key)
        stmt = stmt.order_by(BudgetModel.start_date, BudgetModel.category_key)

        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def list_overlapping(
        self, owner_id: int, date_from: date, date_to: date,
    ) -> list[Budget]:
        """Budgets, active or not, whose window shares a day with
        ``[date_from, date_to]``.  Ordered by start date, then category.
        """
        stmt = (
            select(BudgetModel)
            .where(
                BudgetModel.owner_id == owner_id,
                BudgetModel.start_date <= date_to,
                BudgetModel.end_date >= date_from,
            )
            .order_by(BudgetModel.start_date, BudgetModel.category_key)
        )
        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def owner_ids_with_active_budgets(self) -> list[int]:
        """Distinct owners holding at least one active budget, ascending."""
        stmt = (
            select(BudgetModel.owner_id)
            .where(BudgetModel.is_active == True)  # noqa: E712
            .distinct()
            .order_by(BudgetModel.owner_id)
        )
        return list(self.session.execute(stmt).scalars())

    def get(self, budget_id: UUID, owner_id: int) -> Budget | None:
        model = self.get_model(budget_id, owner_id)
        return model.to_dto() if model is not None else None

    def get_model(self, budget_id: UUID, owner_id: int) -> BudgetModel | None:
        """ORM row lookup for the write side (internal use only)."""
        return self.session.execute(
            select(BudgetModel).where(
                BudgetModel.id == budget_id,
                BudgetModel.owner_id == owner_id,
            )
        ).scalar_one_or_none()

    def history(
        self, owner_id: int, category_key: str, limit: int = 10,
    ) -> list[Budget]:
        """Most recent budgets of one category, active or not."""
        stmt = (
            select(BudgetModel)
            .where(
                BudgetModel.owner_id == owner_id,
                BudgetModel.category_key == category_key,
            )
            .order_by(BudgetModel.start_date.desc())
            .limit(limit)
        )
        return [m.to_dto() for m in self.session.execute(stmt).scalars()]
