"""
OverlapValidator -- reject a budget window that collides with an active one.

Responsibility:
    Decide whether ``[start, end]`` for (owner, category) shares a day with
    any other *active* budget of the same owner and category.

Architecture position:
    Services -- reads through the ``BudgetStore`` protocol, performs no
    mutation.  BudgetService calls it synchronously before every create,
    update and re-activation.

Invariants enforced:
    - Inclusive windows: a budget ending on the day another starts is a
      conflict.
    - On edit the budget being edited is excluded from the candidates.
    - Inactive budgets never conflict.

Failure modes:
    None of its own.  The check-then-write sequence is not atomic; the
    store-level exclusion constraint backstops concurrent writers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from budget_kernel.domain.dtos import Budget
from budget_kernel.domain.protocols import BudgetStore
from budget_kernel.logging_config import get_logger
from budget_engines.period_math import intervals_overlap, overlap_window

logger = get_logger("services.overlap_validator")


@dataclass(frozen=True)
class OverlapResult:
    """Outcome of an overlap check: ok, or the first conflicting budget."""

    conflict: Budget | None = None
    overlap_start: date | None = None
    overlap_end: date | None = None

    @property
    def ok(self) -> bool:
        return self.conflict is None


class OverlapValidator:
    """Checks candidate windows against the owner's active budgets."""

    def __init__(self, store: BudgetStore):
        self._store = store

    def validate(
        self,
        owner_id: int,
        category_key: str,
        start: date,
        end: date,
        exclude_budget_id: UUID | None = None,
    ) -> OverlapResult:
        candidates = self._store.list_active(owner_id, category_key)
        for existing in candidates:
            if exclude_budget_id is not None and existing.id == exclude_budget_id:
                continue
            if not existing.is_active:
                continue
            if intervals_overlap(start, end, existing.start_date, existing.end_date):
                shared = overlap_window(
                    start, end, existing.start_date, existing.end_date,
                )
                logger.info(
                    "budget_overlap_detected",
                    extra={
                        "owner_id": owner_id,
                        "category_key": category_key,
                        "existing_budget_id": str(existing.id),
                        "overlap_start": shared[0],
                        "overlap_end": shared[1],
                    },
                )
                return OverlapResult(
                    conflict=existing,
                    overlap_start=shared[0],
                    overlap_end=shared[1],
                )
        return OverlapResult()
