"""
Collaborator protocols consumed by the budget engine.

Responsibility:
    Narrow, typed interfaces for the three external collaborators: the
    Budget Store, the Transaction Store and the Notification Sink.  The
    services and the scan depend only on these shapes, never on the ORM.

Architecture position:
    Kernel > Domain -- pure declarations, zero I/O.  SQLAlchemy-backed
    implementations live in ``budget_kernel.services`` and
    ``budget_kernel.selectors``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence, runtime_checkable
from uuid import UUID

from budget_kernel.domain.dtos import Alert, Budget, BudgetPatch, NewBudget


@runtime_checkable
class BudgetStore(Protocol):
    """Persistence port for budgets.

    Contract:
        - Every lookup is scoped by ``owner_id``; a budget owned by someone
          else is indistinguishable from a missing one.
        - Implementations flush but do not commit.
    """

    def list_active(
        self, owner_id: int, category_key: str | None = None,
    ) -> list[Budget]:
        ...

    def owner_ids_with_active_budgets(self) -> list[int]:
        ...

    def list_overlapping(
        self, owner_id: int, date_from: date, date_to: date,
    ) -> list[Budget]:
        """Active or inactive budgets intersecting the inclusive range."""
        ...

    def get(self, budget_id: UUID, owner_id: int) -> Budget | None:
        ...

    def create(self, data: NewBudget) -> Budget:
        ...

    def update(
        self, budget_id: UUID, owner_id: int, patch: BudgetPatch,
    ) -> Budget | None:
        ...

    def delete(self, budget_id: UUID, owner_id: int) -> bool:
        ...

    def delete_all_for_owner(self, owner_id: int) -> int:
        ...

    def deactivate_expired(self, today: date) -> int:
        ...

    def history(
        self, owner_id: int, category_key: str, limit: int = 10,
    ) -> Sequence[Budget]:
        ...


@runtime_checkable
class TransactionStore(Protocol):
    """Read-only aggregation port over transactions."""

    def sum_expenses(
        self,
        owner_id: int,
        category_key: str,
        date_from: date,
        date_to: date,
    ) -> Decimal:
        """Sum of expense amounts within the inclusive date range."""
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Fire-and-forget alert delivery; delivery guarantees are the sink's."""

    def send(self, alert: Alert) -> None:
        ...
