"""The tracker: the single object that owns application state.

Commands build one Tracker per process, mutate it through its methods and
read everything else through the pure domain functions.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from tally.config import Settings
from tally.domain.codec import ImportResult, export_document, parse_import
from tally.domain.currency import RateTable
from tally.domain.filters import TransactionFilters
from tally.domain.presentation import DashboardView, build_dashboard
from tally.domain.state import SavingsGoal, TrackerState, parse_goal_amount
from tally.domain.transactions import Transaction, TransactionEntry
from tally.rates import RateLoad, load_rates
from tally.store.kv import KeyValueStore, SqliteStore
from tally.store.transactions import PreferencesStore, RestoreReport, TransactionStore

logger = logging.getLogger(__name__)


class Tracker:
    """Owns the transaction store, preferences and the rate table."""

    def __init__(self, kv: KeyValueStore, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.transactions = TransactionStore(kv)
        self.preferences = PreferencesStore(kv)
        self._rate_load: RateLoad | None = None

    def restore(self) -> RestoreReport:
        """Load persisted state. Corrupt entries fall back to defaults."""
        report = self.transactions.restore()
        report.corrupt_keys.extend(self.preferences.restore().corrupt_keys)
        return report

    @property
    def rate_load(self) -> RateLoad:
        """Rate table load result, fetched once on first use."""
        if self._rate_load is None:
            self._rate_load = load_rates(
                self.settings.rates_url,
                self.settings.rates_timeout,
                offline=self.settings.offline,
            )
        return self._rate_load

    @property
    def rates(self) -> RateTable:
        return self.rate_load.rates

    @property
    def state(self) -> TrackerState:
        """Read-only snapshot of the current state."""
        return TrackerState(
            transactions=self.transactions.list(),
            savings_goal=self.preferences.savings_goal,
            selected_currency=self.preferences.selected_currency,
        )

    def add_transaction(self, entry: TransactionEntry) -> Transaction:
        return self.transactions.add(entry)

    def delete_transaction(self, txn_id: Any) -> bool:
        return self.transactions.remove(txn_id)

    def set_savings_goal(self, raw_amount: Any, period: str | None = None) -> str | None:
        """Validate and store a savings goal.

        Args:
            raw_amount: Amount as entered.
            period: Goal timeframe label. Defaults to "one-time".

        Returns:
            Error message if the amount is invalid (state unchanged), else None.
        """
        amount, error = parse_goal_amount(raw_amount)
        if error is not None or amount is None:
            return error

        self.preferences.set_goal(SavingsGoal(target_amount=amount, period=period or "one-time"))
        return None

    def edit_savings_goal(self) -> SavingsGoal:
        """Current goal, for pre-filling an edit form."""
        return self.preferences.savings_goal

    def clear_savings_goal(self) -> None:
        self.preferences.clear_goal()

    def set_currency(self, currency: str) -> None:
        self.preferences.set_currency(currency.upper())

    def export_document(self, now: datetime | None = None) -> dict[str, Any]:
        """Export document for the current state."""
        return export_document(self.state, now or datetime.now(timezone.utc))

    def import_document(self, text: str) -> ImportResult:
        """Parse an import file and, only if it is valid, replace state.

        Args:
            text: Full file contents.

        Returns:
            ImportResult describing what happened.
        """
        result = parse_import(text)
        if not result.ok:
            logger.warning("Import rejected: %s", "; ".join(result.details))
            return result

        self.transactions.replace_all(result.transactions)
        if result.savings_goal is not None:
            self.preferences.set_goal_amount(result.savings_goal)

        for detail in result.details:
            logger.warning("Import: %s", detail)
        logger.debug("Imported %d transactions", len(result.transactions))
        return result

    def dashboard(self, filters: TransactionFilters | None = None) -> DashboardView:
        """Derive every view from the current state."""
        return build_dashboard(self.state, filters or TransactionFilters(), self.rates)


def open_tracker(settings: Settings, kv: KeyValueStore | None = None) -> Tracker:
    """Build a tracker over the default database and restore its state.

    Args:
        settings: Loaded settings.
        kv: Storage backend. Defaults to the sqlite database.

    Returns:
        Restored Tracker.

    Raises:
        sqlite3.Error: If the database cannot be opened.
    """
    tracker = Tracker(kv if kv is not None else SqliteStore(), settings)
    report = tracker.restore()
    if not report.clean:
        logger.warning("Reset corrupt stored values: %s", ", ".join(report.corrupt_keys))
    return tracker
