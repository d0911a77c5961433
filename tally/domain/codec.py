"""Pure functions for exporting and importing the tracker state as JSON.

The export document is {transactions, savingsGoal, exportDate}. Imports
only require a "transactions" array; individual records are not validated
beyond being JSON objects.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from tally.domain.state import TrackerState
from tally.domain.transactions import Transaction, from_record, parse_amount, to_record

IMPORT_ERROR_MESSAGE = "Error importing data. Please check the file format."
IMPORT_SUCCESS_MESSAGE = "Data imported successfully!"


@dataclass(frozen=True)
class ImportResult:
    """Immutable outcome of parsing an import document.

    On failure, transactions is empty, savings_goal is None and error holds
    the message to show the user.
    """

    ok: bool
    transactions: tuple[Transaction, ...] = ()
    savings_goal: float | None = None
    skipped: int = 0
    error: str | None = None
    details: list[str] = field(default_factory=list)


def format_export_date(now: datetime) -> str:
    """ISO 8601 UTC timestamp with milliseconds (e.g., "2025-01-15T10:30:00.000Z")."""
    utc = now.astimezone(timezone.utc) if now.tzinfo else now
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def export_filename(now: datetime) -> str:
    """Export file name for the given instant."""
    return f"expense-tracker-export-{format_export_date(now)[:10]}.json"


def export_document(state: TrackerState, now: datetime) -> dict[str, Any]:
    """Build the export document for the current state.

    Args:
        state: Tracker snapshot.
        now: Export instant.

    Returns:
        Dictionary with transactions, savingsGoal and exportDate.
    """
    return {
        "transactions": [to_record(txn) for txn in state.transactions],
        "savingsGoal": state.savings_goal.target_amount,
        "exportDate": format_export_date(now),
    }


def dump_document(document: dict[str, Any]) -> str:
    """Serialize a document as indented JSON."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def _import_failure(detail: str) -> ImportResult:
    return ImportResult(ok=False, error=IMPORT_ERROR_MESSAGE, details=[detail])


def parse_import(text: str) -> ImportResult:
    """Parse and validate an import document.

    Args:
        text: Full file contents.

    Returns:
        ImportResult. The caller applies it only when ok is True, so a
        failed import never changes state.
    """
    try:
        document = json.loads(text.removeprefix("\ufeff"))
    except (json.JSONDecodeError, TypeError) as e:
        return _import_failure(f"Invalid JSON: {e}")

    if not isinstance(document, dict):
        return _import_failure("Document is not a JSON object")

    raw_transactions = document.get("transactions")
    if not isinstance(raw_transactions, list):
        return _import_failure("'transactions' is missing or is not a list")

    transactions: list[Transaction] = []
    skipped = 0
    for record in raw_transactions:
        if isinstance(record, dict):
            transactions.append(from_record(record))
        else:
            skipped += 1

    details = []
    if skipped:
        details.append(f"Skipped {skipped} entries that are not JSON objects")

    savings_goal = None
    raw_goal = document.get("savingsGoal")
    if raw_goal:
        goal = parse_amount(raw_goal)
        if goal > 0:
            savings_goal = float(goal)
        else:
            details.append(f"Ignored invalid savingsGoal {raw_goal!r}")

    return ImportResult(
        ok=True,
        transactions=tuple(transactions),
        savings_goal=savings_goal,
        skipped=skipped,
        details=details,
    )
