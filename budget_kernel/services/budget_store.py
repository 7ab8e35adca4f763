"""
SqlBudgetStore -- SQLAlchemy implementation of the Budget Store.

Responsibility:
    Persists budget creation, edits, deletion and the expiry sweep.
    Reads are delegated to ``BudgetSelector``.

Architecture position:
    Kernel > Services -- imperative shell.  Implements the ``BudgetStore``
    protocol consumed by ``budget_services`` and ``budget_batch``.

Invariants enforced:
    - Flush-only: never commits or rolls back the caller's transaction.
      Writes run inside a SAVEPOINT so a constraint violation leaves the
      outer transaction usable.
    - Owner scoping: ``update``/``delete`` address (id, owner_id); a
      mismatched owner behaves exactly like a missing row.

Failure modes:
    - DuplicateBudgetPeriodError when the PostgreSQL exclusion constraint
      rejects an overlapping active window.  This is the storage-level
      backstop for the service-level overlap check.
    - IntegrityError (re-raised) for any other constraint violation.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_kernel.db.constraints import OVERLAP_CONSTRAINT_NAME
from budget_kernel.domain.dtos import Budget, BudgetPatch, NewBudget, PeriodKind
from budget_kernel.exceptions import DuplicateBudgetPeriodError
from budget_kernel.logging_config import get_logger
from budget_kernel.models.budget import BudgetModel
from budget_kernel.selectors.budget_selector import BudgetSelector
from budget_kernel.services.base import BaseService

logger = get_logger("services.budget_store")


class SqlBudgetStore(BaseService[BudgetModel]):
    """
    Budget Store backed by the ``budgets`` table.

    Non-goals:
        - Does NOT validate windows or overlaps; that is BudgetService's
          job before the write reaches the store.
    """

    def __init__(self, session: Session):
        super().__init__(session)
        self._selector = BudgetSelector(session)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_active(
        self, owner_id: int, category_key: str | None = None,
    ) -> list[Budget]:
        return self._selector.list_active(owner_id, category_key)

    def list_overlapping(
        self, owner_id: int, date_from: date, date_to: date,
    ) -> list[Budget]:
        return self._selector.list_overlapping(owner_id, date_from, date_to)

    def owner_ids_with_active_budgets(self) -> list[int]:
        return self._selector.owner_ids_with_active_budgets()

    def get(self, budget_id: UUID, owner_id: int) -> Budget | None:
        return self._selector.get(budget_id, owner_id)

    def history(
        self, owner_id: int, category_key: str, limit: int = 10,
    ) -> list[Budget]:
        return self._selector.history(owner_id, category_key, limit)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, data: NewBudget) -> Budget:
        model = BudgetModel.from_new(data)
        self._flush_guarded(
            model, data.owner_id, data.category_key,
            lambda: self.session.add(model),
        )
        return model.to_dto()

    def update(
        self, budget_id: UUID, owner_id: int, patch: BudgetPatch,
    ) -> Budget | None:
        model = self._selector.get_model(budget_id, owner_id)
        if model is None:
            return None

        def _apply() -> None:
            for name, value in patch.changes().items():
                if name == "period_kind":
                    value = PeriodKind(value).value
                setattr(model, name, value)

        self._flush_guarded(model, owner_id, model.category_key, _apply)
        return model.to_dto()

    def delete(self, budget_id: UUID, owner_id: int) -> bool:
        result = self.session.execute(
            delete(BudgetModel).where(
                BudgetModel.id == budget_id,
                BudgetModel.owner_id == owner_id,
            )
        )
        self.session.flush()
        return result.rowcount > 0

    def delete_all_for_owner(self, owner_id: int) -> int:
        result = self.session.execute(
            delete(BudgetModel).where(BudgetModel.owner_id == owner_id)
        )
        self.session.flush()
        return result.rowcount

    def deactivate_expired(self, today: date) -> int:
        """Flip ``is_active`` off for every active budget ending before ``today``."""
        result = self.session.execute(
            update(BudgetModel)
            .where(
                BudgetModel.is_active == True,  # noqa: E712
                BudgetModel.end_date < today,
            )
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        self.session.flush()
        return result.rowcount

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _flush_guarded(self, model, owner_id: int, category_key: str, mutate) -> None:
        """Apply ``mutate`` and flush inside a SAVEPOINT.

        Translates an exclusion-constraint violation into
        DuplicateBudgetPeriodError; other integrity errors propagate.
        """
        try:
            with self.session.begin_nested():
                mutate()
                self.session.flush()
        except IntegrityError as exc:
            if OVERLAP_CONSTRAINT_NAME not in str(exc.orig):
                raise
            logger.warning(
                "budget_overlap_rejected_by_store",
                extra={"owner_id": owner_id, "category_key": category_key},
            )
            raise DuplicateBudgetPeriodError(
                owner_id=owner_id,
                category_key=category_key,
                existing_budget_id=None,
            ) from exc
