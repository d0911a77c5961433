"""Tests for tally.domain.aggregate pure functions."""

import pytest

from tally.domain.aggregate import (
    MonthlyTotals,
    balance,
    category_totals,
    monthly_series,
    net_savings,
    savings_progress_percent,
    total_expense,
    total_income,
)
from tally.domain.transactions import Transaction


def make_txn(txn_id: int, txn_type: str, amount: float, date: str, category: str | None = None) -> Transaction:
    return Transaction(
        id=txn_id,
        type=txn_type,
        description=f"txn {txn_id}",
        amount=amount,
        category=category,
        date=date,
    )


@pytest.fixture
def scenario() -> list[Transaction]:
    """Salary plus one grocery run, newest first."""
    return [
        make_txn(2, "expense", -200.0, "2024-01-20", "food"),
        make_txn(1, "income", 1000.0, "2024-01-15", "work"),
    ]


class TestTotals:
    """Tests for balance and income/expense totals."""

    def test_scenario_balance(self, scenario: list[Transaction]) -> None:
        """Should sum signed amounts."""
        assert balance(scenario) == 800.0

    def test_income_and_expense_totals(self, scenario: list[Transaction]) -> None:
        """Should sum absolute amounts by type."""
        assert total_income(scenario) == 1000.0
        assert total_expense(scenario) == 200.0
        assert net_savings(scenario) == 800.0

    def test_balance_equals_income_minus_expense(self) -> None:
        """Should agree with income minus expense for well-formed transactions."""
        txns = [
            make_txn(1, "income", 120.5, "2024-02-01"),
            make_txn(2, "expense", -30.25, "2024-02-03"),
            make_txn(3, "expense", -99.0, "2024-03-10"),
            make_txn(4, "income", 10.0, "2024-03-11"),
            make_txn(5, "expense", 0.0, "2024-03-12"),
        ]

        assert balance(txns) == pytest.approx(total_income(txns) - total_expense(txns))

    def test_empty_collection(self) -> None:
        """Should return zero for no transactions."""
        assert balance([]) == 0.0
        assert total_income([]) == 0.0
        assert total_expense([]) == 0.0


class TestSavingsProgressPercent:
    """Tests for savings_progress_percent."""

    def test_no_goal_is_zero(self, scenario: list[Transaction]) -> None:
        """Should return 0 when no goal is set, regardless of transactions."""
        assert savings_progress_percent(0, scenario) == 0.0
        assert savings_progress_percent(0, []) == 0.0

    def test_half_way(self) -> None:
        """Should report 50% for 250 saved of 500."""
        txns = [
            make_txn(1, "income", 400.0, "2024-01-01"),
            make_txn(2, "expense", -150.0, "2024-01-02"),
        ]

        assert savings_progress_percent(500, txns) == 50.0

    def test_not_clamped_above_100(self, scenario: list[Transaction]) -> None:
        """Should allow progress above 100%."""
        assert savings_progress_percent(400, scenario) == 200.0

    def test_not_clamped_below_zero(self) -> None:
        """Should allow negative progress when spending exceeds income."""
        txns = [make_txn(1, "expense", -100.0, "2024-01-01")]

        assert savings_progress_percent(200, txns) == -50.0


class TestMonthlySeries:
    """Tests for monthly_series."""

    def test_scenario_single_month(self, scenario: list[Transaction]) -> None:
        """Should group both transactions into January."""
        assert monthly_series(scenario) == [MonthlyTotals(month="2024-01", income=1000.0, expense=200.0)]

    def test_months_sorted_ascending(self) -> None:
        """Should return months in chronological order regardless of input order."""
        txns = [
            make_txn(3, "expense", -5.0, "2024-03-01"),
            make_txn(2, "income", 50.0, "2023-12-31"),
            make_txn(1, "expense", -7.0, "2024-01-10"),
        ]

        assert [totals.month for totals in monthly_series(txns)] == ["2023-12", "2024-01", "2024-03"]

    def test_groups_by_sign(self) -> None:
        """Should treat positive amounts as income and the rest as expense."""
        txns = [
            make_txn(1, "income", 100.0, "2024-05-01"),
            make_txn(2, "income", 50.0, "2024-05-02"),
            make_txn(3, "expense", -20.0, "2024-05-03"),
        ]

        assert monthly_series(txns) == [MonthlyTotals(month="2024-05", income=150.0, expense=20.0)]

    def test_malformed_date_uses_prefix(self) -> None:
        """Should group non-ISO dates under their first seven characters."""
        txns = [make_txn(1, "expense", -10.0, "15/01/2024")]

        assert monthly_series(txns)[0].month == "15/01/2"

    def test_empty(self) -> None:
        """Should return an empty series."""
        assert monthly_series([]) == []


class TestCategoryTotals:
    """Tests for category_totals."""

    def test_scenario(self, scenario: list[Transaction]) -> None:
        """Should only count expenses."""
        assert category_totals(scenario) == {"food": 200.0}

    def test_sums_per_category(self) -> None:
        """Should add up expenses in the same category."""
        txns = [
            make_txn(1, "expense", -10.0, "2024-01-01", "food"),
            make_txn(2, "expense", -5.5, "2024-01-02", "food"),
            make_txn(3, "expense", -40.0, "2024-01-03", "rent"),
        ]

        assert category_totals(txns) == {"food": 15.5, "rent": 40.0}

    def test_first_seen_order(self) -> None:
        """Should keep categories in the order they first appear."""
        txns = [
            make_txn(1, "expense", -1.0, "2024-01-01", "zoo"),
            make_txn(2, "expense", -1.0, "2024-01-01", "apples"),
        ]

        assert list(category_totals(txns)) == ["zoo", "apples"]

    def test_missing_and_empty_categories_stay_separate(self) -> None:
        """Should not fold missing or empty categories together."""
        txns = [
            make_txn(1, "expense", -10.0, "2024-01-01", None),
            make_txn(2, "expense", -20.0, "2024-01-01", ""),
        ]

        assert category_totals(txns) == {None: 10.0, "": 20.0}

    def test_category_match_is_exact(self) -> None:
        """Should treat differently cased categories as different groups."""
        txns = [
            make_txn(1, "expense", -1.0, "2024-01-01", "Food"),
            make_txn(2, "expense", -2.0, "2024-01-01", "food"),
        ]

        assert category_totals(txns) == {"Food": 1.0, "food": 2.0}
