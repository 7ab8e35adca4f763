"""
Tests for budget_services.BudgetService and OverlapValidator.

Runs against the SQL Budget Store on in-memory SQLite.  SQLite has no
exclusion constraint, so every overlap rejection here comes from the
service-level validator.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.dtos import BudgetPatch
from budget_kernel.exceptions import (
    BudgetNotFoundError,
    DuplicateBudgetPeriodError,
    InvalidPeriodError,
)
from budget_services.budget_service import BudgetService
from budget_services.overlap_validator import OverlapValidator


@pytest.fixture
def service(budget_store, clock):
    return BudgetService(budget_store, clock=clock)


# =============================================================================
# OverlapValidator
# =============================================================================


class TestOverlapValidator:
    def test_no_budgets_is_ok(self, budget_store):
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 8, 1), date(2025, 8, 31),
        )
        assert result.ok
        assert result.conflict is None

    def test_abutting_window_conflicts(self, budget_store, new_budget):
        existing = budget_store.create(
            new_budget(start=date(2025, 1, 1), end=date(2025, 1, 31)),
        )
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 1, 31), date(2025, 2, 28),
        )
        assert not result.ok
        assert result.conflict.id == existing.id
        assert (result.overlap_start, result.overlap_end) == (
            date(2025, 1, 31), date(2025, 1, 31),
        )

    def test_adjacent_window_is_ok(self, budget_store, new_budget):
        budget_store.create(new_budget(start=date(2025, 1, 1), end=date(2025, 1, 30)))
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 1, 31), date(2025, 2, 28),
        )
        assert result.ok

    def test_other_category_and_owner_ignored(self, budget_store, new_budget):
        budget_store.create(new_budget(category_key="rent"))
        budget_store.create(new_budget(owner_id=2))
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 8, 1), date(2025, 8, 31),
        )
        assert result.ok

    def test_inactive_budget_ignored(self, budget_store, new_budget):
        budget_store.create(new_budget(is_active=False))
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 8, 1), date(2025, 8, 31),
        )
        assert result.ok

    def test_excluded_budget_ignored(self, budget_store, new_budget):
        existing = budget_store.create(new_budget())
        result = OverlapValidator(budget_store).validate(
            1, "food", date(2025, 8, 10), date(2025, 8, 20),
            exclude_budget_id=existing.id,
        )
        assert result.ok


# =============================================================================
# create_budget
# =============================================================================


class TestCreateBudget:
    def test_creates(self, service, new_budget):
        budget = service.create_budget(new_budget())
        assert budget.amount == Decimal("500000")
        assert service.get_budget(budget.id, 1) == budget

    def test_duplicate_rejected_and_existing_unchanged(self, service, new_budget):
        first = service.create_budget(new_budget())

        with pytest.raises(DuplicateBudgetPeriodError) as exc_info:
            service.create_budget(new_budget(amount="999"))

        err = exc_info.value
        assert err.code == "DUPLICATE_BUDGET_PERIOD"
        assert err.existing_budget_id == str(first.id)
        assert err.overlap_start == "2025-08-01"
        assert err.overlap_end == "2025-08-31"
        assert service.list_budgets(1) == [first]

    def test_end_before_start_rejected(self, service, new_budget, budget_store):
        with pytest.raises(InvalidPeriodError) as exc_info:
            service.create_budget(new_budget(start=date(2025, 8, 31), end=date(2025, 8, 1)))
        assert exc_info.value.code == "INVALID_PERIOD"
        assert budget_store.list_active(1) == []

    def test_single_day_window_allowed(self, service, new_budget):
        budget = service.create_budget(new_budget(start=date(2025, 8, 5), end=date(2025, 8, 5)))
        assert budget.start_date == budget.end_date

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_non_positive_amount_rejected(self, service, new_budget, amount):
        with pytest.raises(InvalidPeriodError):
            service.create_budget(new_budget(amount=amount))

    def test_inactive_budget_skips_overlap_check(self, service, new_budget):
        service.create_budget(new_budget())
        inactive = service.create_budget(new_budget(is_active=False))
        assert inactive.is_active is False

    def test_logs_creation(self, service, new_budget, captured_logs):
        budget = service.create_budget(new_budget())
        records = [r for r in captured_logs() if r["message"] == "budget_created"]
        assert records[0]["budget_id"] == str(budget.id)


# =============================================================================
# update / activate / deactivate
# =============================================================================


class TestUpdateBudget:
    def test_update_amount(self, service, new_budget):
        budget = service.create_budget(new_budget())
        updated = service.update_budget(budget.id, 1, BudgetPatch(amount=Decimal("600000")))
        assert updated.amount == Decimal("600000")

    def test_moving_own_window_is_not_a_conflict(self, service, new_budget):
        budget = service.create_budget(new_budget())
        updated = service.update_budget(
            budget.id, 1, BudgetPatch(end_date=date(2025, 9, 15)),
        )
        assert updated.end_date == date(2025, 9, 15)

    def test_update_into_other_window_rejected(self, service, new_budget):
        service.create_budget(new_budget())
        september = service.create_budget(
            new_budget(start=date(2025, 9, 1), end=date(2025, 9, 30)),
        )
        with pytest.raises(DuplicateBudgetPeriodError):
            service.update_budget(
                september.id, 1, BudgetPatch(start_date=date(2025, 8, 31)),
            )
        assert service.get_budget(september.id, 1).start_date == date(2025, 9, 1)

    def test_merged_window_validated(self, service, new_budget):
        budget = service.create_budget(new_budget())
        with pytest.raises(InvalidPeriodError):
            service.update_budget(budget.id, 1, BudgetPatch(end_date=date(2025, 7, 1)))

    def test_empty_patch_returns_current(self, service, new_budget):
        budget = service.create_budget(new_budget())
        assert service.update_budget(budget.id, 1, BudgetPatch()) == budget

    def test_wrong_owner_is_not_found(self, service, new_budget):
        budget = service.create_budget(new_budget())
        with pytest.raises(BudgetNotFoundError):
            service.update_budget(budget.id, 2, BudgetPatch(amount=Decimal("1")))

    def test_unknown_id_is_not_found(self, service):
        with pytest.raises(BudgetNotFoundError) as exc_info:
            service.get_budget(uuid4(), 1)
        assert exc_info.value.code == "BUDGET_NOT_FOUND"

    def test_deactivate_then_reactivate(self, service, new_budget):
        budget = service.create_budget(new_budget())
        assert service.deactivate_budget(budget.id, 1).is_active is False
        assert service.list_budgets(1) == []
        assert service.activate_budget(budget.id, 1).is_active is True

    def test_reactivation_checks_overlap(self, service, new_budget):
        old = service.create_budget(new_budget())
        service.deactivate_budget(old.id, 1)
        service.create_budget(new_budget(amount="100"))

        with pytest.raises(DuplicateBudgetPeriodError):
            service.activate_budget(old.id, 1)


# =============================================================================
# delete / bulk
# =============================================================================


class TestDeleteAndBulk:
    def test_delete(self, service, new_budget):
        budget = service.create_budget(new_budget())
        service.delete_budget(budget.id, 1)
        with pytest.raises(BudgetNotFoundError):
            service.get_budget(budget.id, 1)

    def test_delete_wrong_owner(self, service, new_budget):
        budget = service.create_budget(new_budget())
        with pytest.raises(BudgetNotFoundError):
            service.delete_budget(budget.id, 99)
        assert service.get_budget(budget.id, 1) == budget

    def test_delete_all_for_owner(self, service, new_budget):
        service.create_budget(new_budget())
        service.create_budget(new_budget(category_key="rent"))
        service.create_budget(new_budget(owner_id=2))
        assert service.delete_all_for_owner(1) == 2
        assert service.list_budgets(1) == []
        assert len(service.list_budgets(2)) == 1

    def test_deactivate_expired_uses_clock(self, budget_store, new_budget):
        clock = DeterministicClock.on_day(date(2025, 9, 1))
        service = BudgetService(budget_store, clock=clock)
        july = service.create_budget(new_budget(start=date(2025, 7, 1), end=date(2025, 7, 31)))
        august = service.create_budget(new_budget())

        assert service.deactivate_expired() == 1
        assert service.get_budget(july.id, 1).is_active is False
        assert service.get_budget(august.id, 1).is_active is True

    def test_history_newest_first(self, service, new_budget):
        june = service.create_budget(new_budget(start=date(2025, 6, 1), end=date(2025, 6, 30)))
        july = service.create_budget(new_budget(start=date(2025, 7, 1), end=date(2025, 7, 31)))
        history = service.history(1, "food")
        assert [b.id for b in history] == [july.id, june.id]
