"""Store layer - provides persistence for the application.

This module re-exports the public storage classes for easy importing.
"""

from tally.store.kv import KeyValueStore, MemoryStore, SqliteStore
from tally.store.schema import database_exists, get_db_path, init_database
from tally.store.transactions import (
    SAVINGS_GOAL_KEY,
    SAVINGS_PERIOD_KEY,
    SELECTED_CURRENCY_KEY,
    TRANSACTIONS_KEY,
    PreferencesStore,
    RestoreReport,
    TransactionStore,
)

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Backends
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    # Stores
    "PreferencesStore",
    "RestoreReport",
    "TransactionStore",
    # Keys
    "SAVINGS_GOAL_KEY",
    "SAVINGS_PERIOD_KEY",
    "SELECTED_CURRENCY_KEY",
    "TRANSACTIONS_KEY",
]
