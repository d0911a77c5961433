"""Tests for tally.tracker."""

import json
from datetime import datetime, timezone
from typing import Any

import pytest

from tally import tracker as tracker_module
from tally.config import Settings
from tally.domain.codec import dump_document
from tally.domain.currency import FALLBACK_RATES, fallback_rates
from tally.domain.filters import TransactionFilters
from tally.domain.state import SavingsGoal
from tally.domain.transactions import TransactionEntry
from tally.rates import RateLoad
from tally.store import TRANSACTIONS_KEY, MemoryStore
from tally.tracker import Tracker, open_tracker

NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


def entry(txn_type: str, amount: Any, date: str, category: str | None = None, description: str = "") -> TransactionEntry:
    return TransactionEntry(type=txn_type, description=description, amount=amount, category=category, date=date)


@pytest.fixture
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def tracker(kv: MemoryStore) -> Tracker:
    tracker = Tracker(kv, Settings(offline=True))
    tracker.add_transaction(entry("income", "1000", "2024-01-15", "work", "Salary"))
    tracker.add_transaction(entry("expense", "200", "2024-01-20", "food", "Groceries"))
    return tracker


class TestTrackerMutations:
    """Tests for add, delete and goal changes."""

    def test_scenario_dashboard(self, tracker: Tracker) -> None:
        """Should derive balance, charts and rows from the transactions."""
        view = tracker.dashboard()

        assert view.balance.base == 800.0
        assert view.spending_chart.labels == ["2024-01"]
        assert view.spending_chart.datasets[0].data == [1000.0]
        assert view.spending_chart.datasets[1].data == [200.0]
        assert view.category_chart.labels == ["food"]
        assert [row.description for row in view.rows] == ["Groceries", "Salary"]

    def test_delete(self, tracker: Tracker) -> None:
        """Should delete by id."""
        groceries = tracker.state.transactions[0]

        assert tracker.delete_transaction(groceries.id)
        assert [txn.description for txn in tracker.state.transactions] == ["Salary"]

    def test_delete_unknown_id(self, tracker: Tracker) -> None:
        """Should leave state alone for an unknown id."""
        before = tracker.state

        assert not tracker.delete_transaction(-1)
        assert tracker.state == before

    def test_set_goal(self, tracker: Tracker) -> None:
        """Should store a valid goal and report progress against it."""
        assert tracker.set_savings_goal("1600", "monthly") is None
        assert tracker.state.savings_goal == SavingsGoal(1600.0, "monthly")
        assert tracker.dashboard().savings.percent_text == "50.0%"

    def test_set_goal_defaults_period(self, tracker: Tracker) -> None:
        """Should use one-time when no period is given."""
        tracker.set_savings_goal("100")

        assert tracker.state.savings_goal.period == "one-time"

    def test_invalid_goal_is_rejected(self, tracker: Tracker) -> None:
        """Should return an error and keep the previous goal."""
        tracker.set_savings_goal("500")

        assert tracker.set_savings_goal("-5") == "Please enter a valid savings goal amount"
        assert tracker.set_savings_goal("abc") is not None
        assert tracker.state.savings_goal.target_amount == 500.0

    def test_edit_returns_current_goal(self, tracker: Tracker) -> None:
        """Should return the current values for pre-filling."""
        tracker.set_savings_goal("250", "monthly")

        assert tracker.edit_savings_goal() == SavingsGoal(250.0, "monthly")

    def test_clear_goal(self, tracker: Tracker) -> None:
        """Should reset the goal."""
        tracker.set_savings_goal("500", "monthly")
        tracker.clear_savings_goal()

        assert tracker.state.savings_goal == SavingsGoal()

    def test_set_currency(self, tracker: Tracker) -> None:
        """Should uppercase and apply the display currency."""
        tracker.set_currency("eur")

        assert tracker.state.selected_currency == "EUR"
        assert tracker.dashboard().rows[0].display == "-€170.00"

    def test_filters(self, tracker: Tracker) -> None:
        """Should filter rows."""
        view = tracker.dashboard(TransactionFilters(search_term="sal"))

        assert [row.description for row in view.rows] == ["Salary"]


class TestTrackerImportExport:
    """Tests for import and export through the tracker."""

    def test_round_trip(self, tracker: Tracker) -> None:
        """Should restore the same transactions and goal into a fresh tracker."""
        tracker.set_savings_goal("500")
        text = dump_document(tracker.export_document(NOW))

        fresh = Tracker(MemoryStore(), Settings(offline=True))
        result = fresh.import_document(text)

        assert result.ok
        assert fresh.state.transactions == tracker.state.transactions
        assert fresh.state.savings_goal.target_amount == 500.0

    def test_failed_import_leaves_state(self, tracker: Tracker, kv: MemoryStore) -> None:
        """Should not touch state or storage when the import is invalid."""
        before = tracker.state
        stored = kv.get(TRANSACTIONS_KEY)

        result = tracker.import_document('{"transactions": "not-a-list"}')

        assert not result.ok
        assert tracker.state == before
        assert kv.get(TRANSACTIONS_KEY) == stored

    def test_import_replaces_and_persists(self, tracker: Tracker, kv: MemoryStore) -> None:
        """Should replace transactions and persist them."""
        tracker.import_document(json.dumps({"transactions": [{"id": 7, "type": "income", "amount": 5}]}))

        assert [txn.id for txn in tracker.state.transactions] == [7]
        assert [record["id"] for record in json.loads(kv.get(TRANSACTIONS_KEY) or "[]")] == [7]

    def test_import_goal_keeps_period(self, tracker: Tracker) -> None:
        """Should replace the goal amount but keep the period."""
        tracker.set_savings_goal("100", "monthly")
        tracker.import_document('{"transactions": [], "savingsGoal": 900}')

        assert tracker.state.savings_goal == SavingsGoal(900.0, "monthly")

    def test_import_without_goal_keeps_goal(self, tracker: Tracker) -> None:
        """Should keep the goal when the document has none."""
        tracker.set_savings_goal("100")
        tracker.import_document('{"transactions": []}')

        assert tracker.state.savings_goal.target_amount == 100.0


class TestRates:
    """Tests for lazy rate loading."""

    def test_offline_uses_fallback(self, tracker: Tracker) -> None:
        """Should use the fallback table offline."""
        assert tracker.rates == FALLBACK_RATES
        assert not tracker.rate_load.live

    def test_loaded_once(self, kv: MemoryStore, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should load rates on first use only."""
        calls = []

        def fake_load_rates(url: str, timeout: float | None, offline: bool = False) -> RateLoad:
            calls.append(url)
            return RateLoad(rates={"USD": 1.0, "EUR": 0.5}, live=True)

        monkeypatch.setattr(tracker_module, "load_rates", fake_load_rates)
        tracker = Tracker(kv, Settings())

        assert calls == []
        assert tracker.rates["EUR"] == 0.5
        assert tracker.rates["EUR"] == 0.5
        assert len(calls) == 1


class TestOpenTracker:
    """Tests for open_tracker."""

    def test_restores_state(self, tracker: Tracker, kv: MemoryStore) -> None:
        """Should restore what an earlier tracker persisted."""
        tracker.set_savings_goal("500", "monthly")
        tracker.set_currency("GBP")

        reopened = open_tracker(Settings(offline=True), kv)

        assert reopened.state == tracker.state

    def test_corrupt_storage_starts_clean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should start from defaults when stored data is corrupt."""
        monkeypatch.setattr(tracker_module, "load_rates", lambda *args, **kwargs: RateLoad(fallback_rates(), False))
        reopened = open_tracker(Settings(), MemoryStore({TRANSACTIONS_KEY: "not json"}))

        assert reopened.state.transactions == ()
