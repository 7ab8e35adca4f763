"""
Tests for budget_engines.performance and month shifting in period_math.
"""

from datetime import date
from decimal import Decimal

import pytest

from budget_engines.performance import category_performance
from budget_engines.period_math import shift_months


class TestCategoryPerformance:
    def test_grouped_and_ordered_by_total_budget(self, make_budget):
        outcomes = [
            (make_budget(category_key="food", amount="500", start=date(2025, 6, 1), end=date(2025, 6, 30)), Decimal("400")),
            (make_budget(category_key="food", amount="500", start=date(2025, 7, 1), end=date(2025, 7, 31)), Decimal("700")),
            (make_budget(category_key="rent", amount="2000"), Decimal("2000")),
            (make_budget(category_key="fun", amount="100"), Decimal("0")),
        ]

        rows = category_performance(outcomes)

        assert [r.category_key for r in rows] == ["rent", "food", "fun"]
        food = rows[1]
        assert food.budget_count == 2
        assert food.successful_budgets == 1
        assert food.total_budget == Decimal("1000")
        assert food.total_spent == Decimal("1100")
        assert food.success_rate == Decimal("50")
        assert food.utilization == Decimal("110")

    def test_spend_equal_to_amount_is_successful(self, make_budget):
        [row] = category_performance([(make_budget(amount="2000"), Decimal("2000"))])
        assert row.success_rate == Decimal("100")
        assert row.utilization == Decimal("100")

    def test_ties_broken_by_category(self, make_budget):
        rows = category_performance([
            (make_budget(category_key="travel", amount="100"), Decimal("1")),
            (make_budget(category_key="books", amount="100"), Decimal("1")),
        ])
        assert [r.category_key for r in rows] == ["books", "travel"]

    def test_zero_amount_category(self, make_budget):
        [row] = category_performance([(make_budget(amount="0"), Decimal("10"))])
        assert row.utilization == 0
        assert row.successful_budgets == 0

    def test_empty(self):
        assert category_performance([]) == []

    def test_trace_emitted(self, captured_logs, make_budget):
        category_performance([(make_budget(), Decimal("1"))])
        names = [
            r["engine_name"]
            for r in captured_logs()
            if r["message"] == "BUDGET_ENGINE_TRACE"
        ]
        assert names == ["category_performance"]


class TestShiftMonths:
    @pytest.mark.parametrize(
        "day, months, expected",
        [
            (date(2025, 8, 16), -6, date(2025, 2, 16)),
            (date(2025, 8, 31), -6, date(2025, 2, 28)),
            (date(2024, 8, 31), -6, date(2024, 2, 29)),
            (date(2025, 1, 15), -1, date(2024, 12, 15)),
            (date(2025, 11, 30), 3, date(2026, 2, 28)),
            (date(2025, 8, 16), 0, date(2025, 8, 16)),
            (date(2025, 3, 10), -27, date(2022, 12, 10)),
        ],
    )
    def test_shift(self, day, months, expected):
        assert shift_months(day, months) == expected
