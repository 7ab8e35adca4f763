"""
BudgetService -- the write boundary for budgets.

Responsibility:
    Validates and persists budget creation, edits, activation changes and
    deletion.  Every write that can change an active window goes through
    the OverlapValidator first.

Architecture position:
    Services -- imperative shell over the ``BudgetStore`` protocol.
    Request-triggered: the caller owns the session/transaction and renders
    raised errors as structured rejections (``error.code`` + attributes).

Invariants enforced:
    - No two active budgets of the same (owner, category) share a day.
    - ``start_date <= end_date`` and ``amount > 0`` before any store
      access.
    - A rejected write leaves stored state untouched.
    - Budgets of other owners behave exactly like missing ones.

Failure modes:
    - InvalidPeriodError: end before start, or non-positive amount.
    - DuplicateBudgetPeriodError: overlap with an active budget, detected
      by the validator or by the store's exclusion constraint.
    - BudgetNotFoundError: unknown id, or an id owned by someone else.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.dtos import Budget, BudgetPatch, NewBudget
from budget_kernel.domain.protocols import BudgetStore
from budget_kernel.exceptions import (
    BudgetNotFoundError,
    DuplicateBudgetPeriodError,
    InvalidPeriodError,
)
from budget_kernel.logging_config import get_logger
from budget_services.overlap_validator import OverlapResult, OverlapValidator

logger = get_logger("services.budget")


class BudgetService:
    """
    Create, edit, (de)activate and delete budgets for one store.

    Non-goals:
        - Does NOT commit; the caller controls transaction boundaries.
        - Does NOT compute progress (see BudgetProgressService).
    """

    def __init__(
        self,
        store: BudgetStore,
        validator: OverlapValidator | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._validator = validator or OverlapValidator(store)
        self._clock = clock or SystemClock()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_budget(self, budget_id: UUID, owner_id: int) -> Budget:
        budget = self._store.get(budget_id, owner_id)
        if budget is None:
            raise BudgetNotFoundError(str(budget_id))
        return budget

    def list_budgets(
        self, owner_id: int, category_key: str | None = None,
    ) -> list[Budget]:
        """Active budgets of ``owner_id``, optionally for one category."""
        return list(self._store.list_active(owner_id, category_key))

    def history(
        self, owner_id: int, category_key: str, limit: int = 10,
    ) -> list[Budget]:
        """Most recent budgets (active or not) for one category, newest first."""
        return list(self._store.history(owner_id, category_key, limit))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_budget(self, data: NewBudget) -> Budget:
        """
        Persist a new budget.

        Raises:
            InvalidPeriodError: window or amount invalid.
            DuplicateBudgetPeriodError: an active budget for the same
                owner and category shares at least one day.
        """
        _validate_shape(data.start_date, data.end_date, data.amount)

        if data.is_active:
            self._reject_overlap(
                data.owner_id,
                data.category_key,
                self._validator.validate(
                    data.owner_id, data.category_key,
                    data.start_date, data.end_date,
                ),
            )

        budget = self._store.create(data)
        logger.info(
            "budget_created",
            extra={
                "budget_id": str(budget.id),
                "owner_id": budget.owner_id,
                "category_key": budget.category_key,
                "amount": budget.amount,
                "start_date": budget.start_date,
                "end_date": budget.end_date,
            },
        )
        return budget

    def update_budget(
        self, budget_id: UUID, owner_id: int, patch: BudgetPatch,
    ) -> Budget:
        """
        Apply ``patch`` to an existing budget.

        The merged result is validated as a whole, so changing only
        ``end_date`` is still checked against the stored ``start_date``.
        An empty patch returns the budget unchanged.
        """
        current = self.get_budget(budget_id, owner_id)
        if patch.is_empty:
            return current

        merged = patch.apply_to(current)
        _validate_shape(merged.start_date, merged.end_date, merged.amount)

        if merged.is_active:
            self._reject_overlap(
                owner_id,
                merged.category_key,
                self._validator.validate(
                    owner_id, merged.category_key,
                    merged.start_date, merged.end_date,
                    exclude_budget_id=budget_id,
                ),
            )

        updated = self._store.update(budget_id, owner_id, patch)
        if updated is None:
            raise BudgetNotFoundError(str(budget_id))

        logger.info(
            "budget_updated",
            extra={
                "budget_id": str(budget_id),
                "owner_id": owner_id,
                "changed_fields": sorted(patch.changes()),
            },
        )
        return updated

    def activate_budget(self, budget_id: UUID, owner_id: int) -> Budget:
        """Re-activate a budget; its window must not collide with active ones."""
        return self.update_budget(budget_id, owner_id, BudgetPatch(is_active=True))

    def deactivate_budget(self, budget_id: UUID, owner_id: int) -> Budget:
        return self.update_budget(budget_id, owner_id, BudgetPatch(is_active=False))

    def delete_budget(self, budget_id: UUID, owner_id: int) -> None:
        if not self._store.delete(budget_id, owner_id):
            raise BudgetNotFoundError(str(budget_id))
        logger.info(
            "budget_deleted",
            extra={"budget_id": str(budget_id), "owner_id": owner_id},
        )

    def delete_all_for_owner(self, owner_id: int) -> int:
        deleted = self._store.delete_all_for_owner(owner_id)
        logger.info(
            "budgets_deleted_for_owner",
            extra={"owner_id": owner_id, "deleted_count": deleted},
        )
        return deleted

    def deactivate_expired(self) -> int:
        """Deactivate every active budget whose window ended before today."""
        today = self._clock.today()
        count = self._store.deactivate_expired(today)
        logger.info(
            "expired_budgets_deactivated",
            extra={"as_of": today, "deactivated_count": count},
        )
        return count

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _reject_overlap(
        self, owner_id: int, category_key: str, result: OverlapResult,
    ) -> None:
        if result.ok:
            return
        logger.warning(
            "budget_write_rejected_overlap",
            extra={
                "owner_id": owner_id,
                "category_key": category_key,
                "existing_budget_id": str(result.conflict.id),
            },
        )
        raise DuplicateBudgetPeriodError(
            owner_id=owner_id,
            category_key=category_key,
            existing_budget_id=str(result.conflict.id),
            overlap_start=result.overlap_start.isoformat(),
            overlap_end=result.overlap_end.isoformat(),
        )


def _validate_shape(start, end, amount) -> None:
    if end < start:
        raise InvalidPeriodError(
            "end_date is before start_date",
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )
    amount = Decimal(str(amount))
    if not amount.is_finite() or amount <= 0:
        raise InvalidPeriodError(
            "amount must be a positive number",
            amount=str(amount),
        )
