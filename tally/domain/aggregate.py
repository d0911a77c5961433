"""Pure functions for balance, savings and chart aggregations.

This module contains the functional core for reporting:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Every function takes a transaction snapshot and scans it once.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from tally.domain.models import CategoryName, Month
from tally.domain.transactions import Transaction


@dataclass(frozen=True)
class MonthlyTotals:
    """Immutable income and expense totals for one month."""

    month: Month
    income: float
    expense: float


def balance(transactions: Sequence[Transaction]) -> float:
    """Sum of all signed amounts."""
    return sum((txn.amount for txn in transactions), 0.0)


def total_income(transactions: Sequence[Transaction]) -> float:
    """Sum of absolute amounts of income transactions."""
    return sum((abs(txn.amount) for txn in transactions if txn.type == "income"), 0.0)


def total_expense(transactions: Sequence[Transaction]) -> float:
    """Sum of absolute amounts of expense transactions."""
    return sum((abs(txn.amount) for txn in transactions if txn.type == "expense"), 0.0)


def net_savings(transactions: Sequence[Transaction]) -> float:
    """Total income minus total expense."""
    return total_income(transactions) - total_expense(transactions)


def savings_progress_percent(goal: float, transactions: Sequence[Transaction]) -> float:
    """Calculate progress towards a savings goal.

    Args:
        goal: Target amount. 0 (or less) means no goal.
        transactions: Transaction snapshot.

    Returns:
        Percentage of the goal saved. Not clamped: may be negative or exceed 100.
    """
    if goal <= 0:
        return 0.0
    return net_savings(transactions) / goal * 100


def monthly_series(transactions: Sequence[Transaction]) -> list[MonthlyTotals]:
    """Group income and expense totals by month.

    The month is the first seven characters of the date string. Dates that
    are not ISO formatted are grouped under whatever that slice yields.

    Args:
        transactions: Transaction snapshot.

    Returns:
        MonthlyTotals in ascending month order.
    """
    grouped: dict[str, list[float]] = {}

    for txn in transactions:
        month = txn.date[:7]
        totals = grouped.setdefault(month, [0.0, 0.0])
        if txn.amount > 0:
            totals[0] += txn.amount
        else:
            totals[1] += abs(txn.amount)

    return [
        MonthlyTotals(month=Month(month), income=income, expense=expense)
        for month, (income, expense) in sorted(grouped.items())
    ]


def category_totals(transactions: Sequence[Transaction]) -> dict[CategoryName | None, float]:
    """Sum expense amounts per category.

    Categories are used exactly as stored: a missing category and an empty
    one are separate groups.

    Args:
        transactions: Transaction snapshot.

    Returns:
        Dictionary of category to absolute expense total, in first-seen order.
    """
    totals: dict[CategoryName | None, float] = {}

    for txn in transactions:
        if txn.type != "expense":
            continue
        totals[txn.category] = totals.get(txn.category, 0.0) + abs(txn.amount)

    return totals
