"""
TransactionSelector -- the SQL Transaction Store.

Responsibility:
    Aggregates expense transactions for one owner and category over an
    inclusive date range.  Income rows never count towards a budget.

Architecture position:
    Kernel > Selectors.  Implements the ``TransactionStore`` protocol.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select

from budget_kernel.domain.dtos import TransactionType
from budget_kernel.models.transaction import TransactionModel
from budget_kernel.selectors.base import BaseSelector


class TransactionSelector(BaseSelector[TransactionModel]):
    """Read-only aggregation over transactions."""

    def sum_expenses(
        self,
        owner_id: int,
        category_key: str,
        date_from: date,
        date_to: date,
    ) -> Decimal:
        """Sum of expense amounts in ``[date_from, date_to]``; 0 when none."""
        total = self.session.execute(
            select(func.coalesce(func.sum(TransactionModel.amount), 0)).where(
                TransactionModel.owner_id == owner_id,
                TransactionModel.category_key == category_key,
                TransactionModel.transaction_type == TransactionType.EXPENSE.value,
                TransactionModel.transaction_date >= date_from,
                TransactionModel.transaction_date <= date_to,
            )
        ).scalar_one()
        return Decimal(str(total))
