"""
Tests for budget_engines.progress.ProgressCalculator.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from budget_engines.progress import ProgressCalculator
from budget_kernel.domain.dtos import Budget, PeriodKind
from budget_kernel.exceptions import ComputationDegenerateError

NOW = date(2025, 8, 16)

REFERENCE_BUDGET = Budget(
    id=uuid4(),
    owner_id=1,
    category_key="food",
    amount=Decimal("500000"),
    period_kind=PeriodKind.MONTHLY,
    start_date=date(2025, 8, 1),
    end_date=date(2025, 8, 31),
)


@pytest.fixture
def calculator():
    return ProgressCalculator()


class TestReferenceScenario:
    """Amount 500000 for August 2025, 300000 spent by the 16th."""

    def test_figures(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(), Decimal("300000"), NOW)

        assert progress.spent_amount == Decimal("300000")
        assert progress.remaining_amount == Decimal("200000")
        assert progress.percentage_used == Decimal("60")
        assert progress.days_elapsed == 16
        assert progress.days_remaining == 15
        assert progress.daily_average_spending == Decimal("18750")
        assert progress.projected_spending == Decimal("581250")
        assert progress.is_over_budget is False
        assert progress.is_on_track is False

    def test_keeps_budget(self, calculator, make_budget):
        budget = make_budget()
        assert calculator.calculate(budget, Decimal("0"), NOW).budget is budget


class TestEdgeCases:
    def test_zero_amount_reports_zero_percent(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(amount="0"), Decimal("120"), NOW)
        assert progress.percentage_used == Decimal("0")
        assert progress.is_over_budget is True

    def test_nothing_spent(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(), Decimal("0"), NOW)
        assert progress.percentage_used == 0
        assert progress.projected_spending == 0
        assert progress.is_on_track is True

    def test_overspent_has_negative_remaining(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(amount="100"), Decimal("150"), NOW)
        assert progress.remaining_amount == Decimal("-50")
        assert progress.is_over_budget is True
        assert progress.percentage_used == Decimal("150")

    def test_spent_equal_to_amount_is_not_over(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(amount="100"), Decimal("100"), NOW)
        assert progress.is_over_budget is False

    def test_before_window_starts(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(), Decimal("10"), date(2025, 7, 20))
        assert progress.days_elapsed == 1
        assert progress.daily_average_spending == Decimal("10")

    def test_after_window_ends(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(), Decimal("310"), date(2025, 9, 10))
        assert progress.days_remaining == 0
        assert progress.days_elapsed == 41


class TestDegenerate:
    @pytest.mark.parametrize("spent", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_spent(self, calculator, make_budget, spent):
        with pytest.raises(ComputationDegenerateError) as exc_info:
            calculator.calculate(make_budget(), Decimal(spent), NOW)
        assert exc_info.value.field_name == "spent_amount"
        assert exc_info.value.code == "COMPUTATION_DEGENERATE"

    def test_non_finite_amount(self, calculator, make_budget):
        with pytest.raises(ComputationDegenerateError) as exc_info:
            calculator.calculate(make_budget(amount="NaN"), Decimal("1"), NOW)
        assert exc_info.value.field_name == "amount"

    def test_degenerate_is_logged(self, calculator, make_budget, captured_logs):
        with pytest.raises(ComputationDegenerateError):
            calculator.calculate(make_budget(), Decimal("NaN"), NOW)
        records = [r for r in captured_logs() if r["message"] == "progress_computation_degenerate"]
        assert len(records) == 1
        assert records[0]["field"] == "spent_amount"

    def test_overflow_on_finite_inputs(self, calculator, make_budget):
        with pytest.raises(ComputationDegenerateError) as exc_info:
            calculator.calculate(
                make_budget(amount="1E-999999"), Decimal("1E+999999"), NOW,
            )
        assert exc_info.value.field_name == "percentage_used"

    def test_extreme_but_representable_ratio(self, calculator, make_budget):
        progress = calculator.calculate(make_budget(amount="1"), Decimal("1E+26"), NOW)
        assert progress.percentage_used == Decimal("1E+28")
        assert progress.is_over_budget


class TestProperties:
    @given(
        low=st.decimals(min_value=0, max_value=10**9, places=2, allow_nan=False, allow_infinity=False),
        extra=st.decimals(min_value=0, max_value=10**9, places=2, allow_nan=False, allow_infinity=False),
    )
    @settings(max_examples=200)
    def test_on_track_is_monotone_in_spent(self, low, extra):
        calculator = ProgressCalculator()
        budget = REFERENCE_BUDGET
        at_low = calculator.calculate(budget, low, NOW)
        at_high = calculator.calculate(budget, low + extra, NOW)
        # Spending more can never put a budget back on track
        if not at_low.is_on_track:
            assert not at_high.is_on_track
