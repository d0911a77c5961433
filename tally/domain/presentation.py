"""Pure functions mapping state and aggregations to display-ready view models.

Nothing here renders: the CLI (or any other surface) consumes these
structures. Chart series carry the labels/datasets shape a charting
library expects.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from tally.domain.aggregate import (
    MonthlyTotals,
    balance,
    category_totals,
    monthly_series,
    net_savings,
    savings_progress_percent,
)
from tally.domain.currency import RateTable, convert, format_currency
from tally.domain.filters import TransactionFilters, apply_filters, available_categories
from tally.domain.models import BASE_CURRENCY, CategoryName
from tally.domain.state import SavingsGoal, TrackerState
from tally.domain.transactions import Transaction

INCOME_COLOR = "#28a745"
INCOME_FILL = "rgba(40, 167, 69, 0.1)"
EXPENSE_COLOR = "#dc3545"
EXPENSE_FILL = "rgba(220, 53, 69, 0.1)"

CATEGORY_PALETTE = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#FF6384",
    "#C9CBCF",
)

MONTHLY_CHART_TITLE = "Monthly Income vs Expenses"
CATEGORY_CHART_TITLE = "Expenses by Category"


@dataclass(frozen=True)
class TransactionRow:
    """Immutable list row for one transaction."""

    id: Any
    date: str
    date_display: str
    description: str
    category: str
    type: str
    amount: float  # absolute, in the display currency
    display: str  # sign-prefixed, formatted
    is_income: bool


@dataclass(frozen=True)
class ChartDataset:
    """Immutable data series for a chart."""

    label: str
    data: list[float]
    border_color: str | None = None
    background_color: str | list[str] | None = None
    fill: bool = False


@dataclass(frozen=True)
class ChartSeries:
    """Immutable chart-ready series: ordered labels plus parallel datasets."""

    kind: str
    title: str
    labels: list[str]
    datasets: list[ChartDataset]


@dataclass(frozen=True)
class BalanceView:
    """Immutable balance summary in base and display currency."""

    base: float
    base_display: str
    converted: float
    converted_display: str
    currency: str


@dataclass(frozen=True)
class SavingsView:
    """Immutable savings goal progress."""

    goal: float
    goal_display: str
    period: str
    current: float
    current_display: str
    saved_display: str
    remaining: float
    remaining_display: str
    percent: float  # clamped to 0-100
    percent_text: str
    is_set: bool


@dataclass(frozen=True)
class DashboardView:
    """Immutable view model of the whole tracker."""

    balance: BalanceView
    savings: SavingsView
    rows: list[TransactionRow]
    categories: list[str]
    spending_chart: ChartSeries
    category_chart: ChartSeries


def format_display_date(value: str) -> str:
    """Format an ISO date for the transaction list (e.g., "1/15/2024").

    Args:
        value: Date string, normally YYYY-MM-DD.

    Returns:
        Month/day/year without zero padding, or the raw string if it is not an ISO date.
    """
    try:
        dt = datetime.strptime(value[:10], "%Y-%m-%d")
    except (TypeError, ValueError):
        return value
    return f"{dt.month}/{dt.day}/{dt.year}"


def category_label(category: CategoryName | None) -> str:
    """Label for a category bucket. Missing and empty categories stay distinguishable."""
    if category is None:
        return "(none)"
    if category == "":
        return "(blank)"
    return category


def clamp_percent(percent: float) -> float:
    """Clamp a raw progress percentage to 0-100 for display."""
    return min(max(percent, 0.0), 100.0)


def build_row(txn: Transaction, currency: str, rates: RateTable) -> TransactionRow:
    """Build a list row with the amount converted to the display currency.

    Args:
        txn: Transaction to display.
        currency: Display currency code.
        rates: Rate table relative to USD.

    Returns:
        TransactionRow.
    """
    converted = convert(abs(txn.amount), txn.currency or BASE_CURRENCY, currency, rates)
    is_income = txn.amount > 0
    sign = "+" if is_income else "-"

    return TransactionRow(
        id=txn.id,
        date=txn.date,
        date_display=format_display_date(txn.date),
        description=txn.description,
        category=txn.category or "",
        type=txn.type,
        amount=converted,
        display=f"{sign}{format_currency(converted, currency)}",
        is_income=is_income,
    )


def build_rows(transactions: Sequence[Transaction], currency: str, rates: RateTable) -> list[TransactionRow]:
    """Build list rows, preserving order."""
    return [build_row(txn, currency, rates) for txn in transactions]


def build_spending_chart(series: Sequence[MonthlyTotals]) -> ChartSeries:
    """Map monthly totals to the income/expense trend chart."""
    return ChartSeries(
        kind="line",
        title=MONTHLY_CHART_TITLE,
        labels=[totals.month for totals in series],
        datasets=[
            ChartDataset(
                label="Income",
                data=[totals.income for totals in series],
                border_color=INCOME_COLOR,
                background_color=INCOME_FILL,
                fill=True,
            ),
            ChartDataset(
                label="Expenses",
                data=[totals.expense for totals in series],
                border_color=EXPENSE_COLOR,
                background_color=EXPENSE_FILL,
                fill=True,
            ),
        ],
    )


def build_category_chart(totals: dict[CategoryName | None, float]) -> ChartSeries:
    """Map category expense totals to the breakdown chart."""
    colors = [CATEGORY_PALETTE[i % len(CATEGORY_PALETTE)] for i in range(len(totals))]

    return ChartSeries(
        kind="doughnut",
        title=CATEGORY_CHART_TITLE,
        labels=[category_label(category) for category in totals],
        datasets=[ChartDataset(label="Expenses", data=list(totals.values()), background_color=colors)],
    )


def build_balance(transactions: Sequence[Transaction], currency: str, rates: RateTable) -> BalanceView:
    """Balance in the base currency and converted to the display currency."""
    base = balance(transactions)
    converted = convert(base, BASE_CURRENCY, currency, rates)

    return BalanceView(
        base=base,
        base_display=format_currency(base, BASE_CURRENCY),
        converted=converted,
        converted_display=format_currency(converted, currency),
        currency=currency,
    )


def build_savings(goal: SavingsGoal, transactions: Sequence[Transaction]) -> SavingsView:
    """Savings progress view. Amounts are shown in the base currency."""
    savings = net_savings(transactions)
    percent = clamp_percent(savings_progress_percent(goal.target_amount, transactions))
    remaining = max(goal.target_amount - savings, 0.0)

    return SavingsView(
        goal=goal.target_amount,
        goal_display=format_currency(goal.target_amount, BASE_CURRENCY),
        period=goal.period or "One-time",
        current=savings,
        current_display=format_currency(savings, BASE_CURRENCY),
        saved_display=format_currency(max(savings, 0.0), BASE_CURRENCY),
        remaining=remaining,
        remaining_display=format_currency(remaining, BASE_CURRENCY),
        percent=percent,
        percent_text=f"{percent:.1f}%",
        is_set=goal.is_set,
    )


def build_dashboard(state: TrackerState, filters: TransactionFilters, rates: RateTable) -> DashboardView:
    """Derive every view from the state in one pass.

    Args:
        state: Tracker snapshot.
        filters: List filters. Charts and totals ignore them.
        rates: Rate table relative to USD.

    Returns:
        DashboardView.
    """
    transactions = state.transactions
    currency = state.selected_currency

    return DashboardView(
        balance=build_balance(transactions, currency, rates),
        savings=build_savings(state.savings_goal, transactions),
        rows=build_rows(apply_filters(transactions, filters), currency, rates),
        categories=available_categories(transactions),
        spending_chart=build_spending_chart(monthly_series(transactions)),
        category_chart=build_category_chart(category_totals(transactions)),
    )


def chart_payload(series: ChartSeries) -> dict[str, Any]:
    """JSON payload for an external charting library.

    Args:
        series: Chart series.

    Returns:
        Dictionary with type, data (labels and datasets) and options.
    """
    datasets = []
    for dataset in series.datasets:
        payload: dict[str, Any] = {"label": dataset.label, "data": list(dataset.data)}
        if dataset.border_color is not None:
            payload["borderColor"] = dataset.border_color
        if dataset.background_color is not None:
            payload["backgroundColor"] = dataset.background_color
        if dataset.fill:
            payload["fill"] = True
        datasets.append(payload)

    return {
        "type": series.kind,
        "data": {"labels": list(series.labels), "datasets": datasets},
        "options": {
            "responsive": True,
            "plugins": {"title": {"display": True, "text": series.title}},
        },
    }


def histogram_bar_length(amount: float, max_amount: float, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
