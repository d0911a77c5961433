"""Pure functions for filtering the transaction list."""

from collections.abc import Sequence
from dataclasses import dataclass

from tally.domain.transactions import Transaction


@dataclass(frozen=True)
class TransactionFilters:
    """Immutable filter settings. Empty values match everything."""

    search_term: str = ""
    category: str = ""
    type: str = ""


def matches_filters(txn: Transaction, search_term: str, category: str, txn_type: str) -> bool:
    """Check a single transaction against the filters.

    Args:
        txn: Transaction to check.
        search_term: Case-insensitive substring of the description.
        category: Exact category, or empty for any.
        txn_type: Exact type, or empty for any.

    Returns:
        True if the transaction passes all three filters.
    """
    description = (txn.description or "").lower()
    if (search_term or "").lower() not in description:
        return False

    if category and txn.category != category:
        return False

    if txn_type and txn.type != txn_type:
        return False

    return True


def filter_transactions(
    transactions: Sequence[Transaction],
    search_term: str = "",
    category: str = "",
    txn_type: str = "",
) -> list[Transaction]:
    """Filter transactions, preserving their order.

    Args:
        transactions: Transaction snapshot (newest first).
        search_term: Case-insensitive substring of the description.
        category: Exact, case-sensitive category match. Empty for any.
        txn_type: Exact type match. Empty for any.

    Returns:
        Matching transactions in input order.
    """
    return [txn for txn in transactions if matches_filters(txn, search_term, category, txn_type)]


def apply_filters(transactions: Sequence[Transaction], filters: TransactionFilters) -> list[Transaction]:
    """Filter transactions using a TransactionFilters bundle."""
    return filter_transactions(transactions, filters.search_term, filters.category, filters.type)


def available_categories(transactions: Sequence[Transaction]) -> list[str]:
    """Distinct non-empty categories, sorted, for the category filter choices."""
    return sorted({txn.category for txn in transactions if txn.category})
