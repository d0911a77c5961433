"""Stateful stores for transactions and user preferences.

Both keep their data in memory and mirror it to a KeyValueStore. Every
persist writes the whole value for a key at once.
"""

import json
import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from tally.domain.models import BASE_CURRENCY, DEFAULT_PERIOD, CurrencyCode
from tally.domain.state import SavingsGoal
from tally.domain.transactions import (
    Transaction,
    TransactionEntry,
    build_transaction,
    from_record,
    next_transaction_id,
    to_record,
)
from tally.store.kv import KeyValueStore

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "transactions"
SAVINGS_GOAL_KEY = "savingsGoal"
SAVINGS_PERIOD_KEY = "savingsPeriod"
SELECTED_CURRENCY_KEY = "selectedCurrency"


@dataclass
class RestoreReport:
    """Keys whose stored value was unreadable and fell back to defaults."""

    corrupt_keys: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.corrupt_keys


def _load_json(kv: KeyValueStore, key: str, report: RestoreReport) -> tuple[bool, Any]:
    """Read and decode a JSON value.

    Returns:
        Tuple of (found, value). Corrupt values are recorded in the report
        and returned as not found.
    """
    raw = kv.get(key)
    if raw is None:
        return False, None

    try:
        return True, json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored value for '%s' is not valid JSON, using default", key)
        report.corrupt_keys.append(key)
        return False, None


class TransactionStore:
    """Ordered in-memory transaction collection, newest first."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv
        self._transactions: list[Transaction] = []

    def list(self) -> tuple[Transaction, ...]:
        """Read-only snapshot in storage order (newest first)."""
        return tuple(self._transactions)

    def add(self, entry: TransactionEntry, now_ms: int | None = None) -> Transaction:
        """Create a transaction from form input and put it at the front.

        Args:
            entry: Raw form input. An unparseable amount becomes 0.
            now_ms: Creation time in milliseconds. Defaults to the current time.

        Returns:
            The created transaction.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        txn_id = next_transaction_id((txn.id for txn in self._transactions), now_ms)
        txn = build_transaction(entry, txn_id)

        self._transactions.insert(0, txn)
        self.persist()
        logger.debug("Added transaction %s (%s %.2f)", txn.id, txn.type, txn.amount)
        return txn

    def remove(self, txn_id: Any) -> bool:
        """Remove the transaction with the given id.

        Args:
            txn_id: Id to remove. An id that is not present is a no-op.

        Returns:
            True if a transaction was removed.
        """
        before = len(self._transactions)
        self._transactions = [txn for txn in self._transactions if txn.id != txn_id]
        self.persist()

        removed = len(self._transactions) != before
        logger.debug("Remove transaction %s: %s", txn_id, "removed" if removed else "not found")
        return removed

    def replace_all(self, transactions: Sequence[Transaction]) -> None:
        """Replace the whole collection (used by import)."""
        self._transactions = list(transactions)
        self.persist()

    def persist(self) -> None:
        """Write the collection to the key-value store."""
        records = [to_record(txn) for txn in self._transactions]
        self.kv.set(TRANSACTIONS_KEY, json.dumps(records))

    def restore(self) -> RestoreReport:
        """Load the collection from the key-value store.

        Missing or corrupt data yields an empty collection. Entries that are
        not objects are dropped and the key is reported as corrupt.

        Returns:
            RestoreReport.
        """
        report = RestoreReport()
        found, value = _load_json(self.kv, TRANSACTIONS_KEY, report)

        if not found:
            self._transactions = []
            return report

        if not isinstance(value, list):
            logger.warning("Stored transactions are not a list, starting empty")
            report.corrupt_keys.append(TRANSACTIONS_KEY)
            self._transactions = []
            return report

        records = [record for record in value if isinstance(record, dict)]
        skipped = len(value) - len(records)
        if skipped:
            logger.warning("Dropped %d stored transactions that are not objects", skipped)
            report.corrupt_keys.append(TRANSACTIONS_KEY)

        self._transactions = [from_record(record) for record in records]
        return report


class PreferencesStore:
    """Savings goal and selected display currency."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv
        self.savings_goal = SavingsGoal()
        self.selected_currency: CurrencyCode = BASE_CURRENCY

    def set_goal(self, goal: SavingsGoal) -> None:
        """Replace the savings goal and persist it."""
        self.savings_goal = goal
        self.kv.set(SAVINGS_GOAL_KEY, json.dumps(goal.target_amount))
        self.kv.set(SAVINGS_PERIOD_KEY, json.dumps(goal.period))

    def set_goal_amount(self, target_amount: float) -> None:
        """Replace only the goal amount, keeping the period (used by import)."""
        self.savings_goal = SavingsGoal(target_amount=target_amount, period=self.savings_goal.period)
        self.kv.set(SAVINGS_GOAL_KEY, json.dumps(target_amount))

    def clear_goal(self) -> None:
        """Reset the goal to defaults and remove both persisted entries."""
        self.savings_goal = SavingsGoal()
        self.kv.remove(SAVINGS_GOAL_KEY)
        self.kv.remove(SAVINGS_PERIOD_KEY)

    def set_currency(self, currency: str) -> None:
        """Select and persist the display currency."""
        self.selected_currency = CurrencyCode(currency)
        self.kv.set(SELECTED_CURRENCY_KEY, json.dumps(currency))

    def persist(self) -> None:
        """Write all preferences to the key-value store."""
        self.kv.set(SAVINGS_GOAL_KEY, json.dumps(self.savings_goal.target_amount))
        self.kv.set(SAVINGS_PERIOD_KEY, json.dumps(self.savings_goal.period))
        self.kv.set(SELECTED_CURRENCY_KEY, json.dumps(self.selected_currency))

    def restore(self) -> RestoreReport:
        """Load preferences, using defaults for anything missing or corrupt.

        Returns:
            RestoreReport.
        """
        report = RestoreReport()

        target = 0.0
        found, value = _load_json(self.kv, SAVINGS_GOAL_KEY, report)
        if found:
            if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value) and value >= 0:
                target = float(value)
            else:
                report.corrupt_keys.append(SAVINGS_GOAL_KEY)

        period = DEFAULT_PERIOD
        found, value = _load_json(self.kv, SAVINGS_PERIOD_KEY, report)
        if found:
            if isinstance(value, str) and value:
                period = value
            else:
                report.corrupt_keys.append(SAVINGS_PERIOD_KEY)

        currency = BASE_CURRENCY
        found, value = _load_json(self.kv, SELECTED_CURRENCY_KEY, report)
        if found:
            if isinstance(value, str) and value:
                currency = CurrencyCode(value)
            else:
                report.corrupt_keys.append(SELECTED_CURRENCY_KEY)

        self.savings_goal = SavingsGoal(target_amount=target, period=period)
        self.selected_currency = currency
        return report
