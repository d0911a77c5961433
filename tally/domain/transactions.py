"""Pure functions for building and (de)serializing transactions.

This module contains the functional core for transaction records:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Amounts are stored pre-signed in the base currency (Amount type).
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, TypedDict

from tally.domain.models import BASE_CURRENCY, Amount, CategoryName, CurrencyCode, Description

TRANSACTION_TYPES: tuple[str, ...] = ("income", "expense")


class TransactionEntry(TypedDict):
    """User input for a new transaction, as entered on the form."""

    type: str
    description: str
    amount: Any  # raw input, parsed leniently
    category: str | None
    date: str


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    id: Any
    type: str
    description: Description
    amount: Amount
    category: CategoryName | None
    date: str
    currency: CurrencyCode = BASE_CURRENCY


def parse_amount(raw: Any) -> Amount:
    """Parse a raw amount, coercing anything unusable to zero.

    Args:
        raw: Number or numeric string.

    Returns:
        Parsed amount, or 0.0 if missing, unparseable or not finite.
    """
    if isinstance(raw, bool) or raw is None:
        return Amount(0.0)

    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip().replace(",", ""))
        except ValueError:
            return Amount(0.0)
    else:
        return Amount(0.0)

    if not math.isfinite(value):
        return Amount(0.0)
    return Amount(value)


def signed_amount(txn_type: str, amount: float) -> Amount:
    """Apply the sign convention: income positive, everything else negative.

    Args:
        txn_type: Transaction type ("income" or "expense").
        amount: Unsigned amount.

    Returns:
        Signed amount.
    """
    if txn_type == "income":
        return Amount(abs(amount))
    return Amount(-abs(amount))


def next_transaction_id(existing_ids: Iterable[Any], now_ms: int) -> int:
    """Pick a creation-time based id that does not collide with existing ones.

    Args:
        existing_ids: Ids already in the collection.
        now_ms: Current time in milliseconds since the epoch.

    Returns:
        now_ms, or one past the largest integer id when the clock has not moved on.
    """
    numeric_ids = [i for i in existing_ids if isinstance(i, int) and not isinstance(i, bool)]
    if numeric_ids:
        highest = max(numeric_ids)
        if now_ms <= highest:
            return highest + 1
    return now_ms


def build_transaction(entry: TransactionEntry, txn_id: int) -> Transaction:
    """Build a transaction from form input.

    Args:
        entry: Raw form input.
        txn_id: Id to assign.

    Returns:
        Transaction in the base currency with its amount signed by type.
    """
    amount = signed_amount(entry["type"], parse_amount(entry["amount"]))

    return Transaction(
        id=txn_id,
        type=entry["type"],
        description=Description(entry.get("description") or ""),
        amount=amount,
        category=CategoryName(entry["category"]) if entry.get("category") is not None else None,
        date=entry["date"],
        currency=BASE_CURRENCY,
    )


def to_record(txn: Transaction) -> dict[str, Any]:
    """Convert a transaction to its JSON record form."""
    return {
        "id": txn.id,
        "type": txn.type,
        "description": txn.description,
        "amount": txn.amount,
        "category": txn.category,
        "date": txn.date,
        "currency": txn.currency,
    }


def from_record(record: dict[str, Any]) -> Transaction:
    """Build a transaction from a stored or imported JSON record.

    Never raises: missing fields fall back to empty values and a non-numeric
    amount becomes 0. The amount sign is kept as stored.

    Args:
        record: JSON object.

    Returns:
        Transaction.
    """
    category = record.get("category")
    date = record.get("date")
    currency = record.get("currency")

    return Transaction(
        id=record.get("id"),
        type=str(record.get("type") or ""),
        description=Description(str(record.get("description") or "")),
        amount=parse_amount(record.get("amount")),
        category=CategoryName(category) if isinstance(category, str) else None,
        date=str(date) if date is not None else "",
        currency=CurrencyCode(currency) if isinstance(currency, str) and currency else BASE_CURRENCY,
    )
