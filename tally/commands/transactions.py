"""Transaction management commands (add, delete, list)."""

import sqlite3
import sys
import tomllib

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tally.config import load_settings
from tally.dates import normalize_date, today
from tally.domain.filters import TransactionFilters
from tally.domain.transactions import TRANSACTION_TYPES, TransactionEntry
from tally.tracker import Tracker, open_tracker

console = Console()


def load_tracker() -> Tracker:
    """Open the tracker, exiting with a message if storage or config is broken."""
    try:
        return open_tracker(load_settings())
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file: {e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def add_command(
    txn_type: str,
    amount: str,
    description: str = "",
    category: str | None = None,
    date: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        txn_type: "income" or "expense".
        amount: Amount as entered. Unparseable input is recorded as 0.
        description: Transaction description.
        category: Optional category name.
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats). Defaults to today.
    """
    txn_type = txn_type.lower()
    if txn_type not in TRANSACTION_TYPES:
        console.print(f"[red]Invalid type '{escape(txn_type)}'. Use 'income' or 'expense'.[/red]")
        sys.exit(1)

    try:
        normalized_date = normalize_date(date) if date else today()
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    tracker = load_tracker()

    entry = TransactionEntry(
        type=txn_type,
        description=description,
        amount=amount,
        category=category,
        date=normalized_date,
    )

    try:
        txn = tracker.add_transaction(entry)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    row = tracker.dashboard(TransactionFilters()).rows[0]
    color = "green" if row.is_income else "red"

    console.print("[green]✓[/green] Transaction added:")
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date}")
    console.print(f"  Description: {escape(txn.description) or '-'}")
    console.print(f"  Amount: [{color}]{row.display}[/{color}]")
    if txn.category:
        console.print(f"  Category: {escape(txn.category)}")


def delete_command(transaction_id: int) -> None:
    """Delete a transaction by id.

    Args:
        transaction_id: Transaction ID (from 'tally list').
    """
    tracker = load_tracker()

    try:
        removed = tracker.delete_transaction(transaction_id)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if removed:
        console.print(f"[green]✓[/green] Deleted transaction {transaction_id}")
    else:
        console.print(f"[yellow]No transaction with ID {transaction_id}[/yellow]")


def list_command(
    search: str = "",
    category: str = "",
    txn_type: str = "",
) -> None:
    """List transactions, newest first, in the selected currency.

    Args:
        search: Case-insensitive description substring.
        category: Exact category.
        txn_type: "income" or "expense".
    """
    tracker = load_tracker()
    filters = TransactionFilters(search_term=search, category=category, type=txn_type)
    view = tracker.dashboard(filters)

    if not view.rows:
        console.print("[yellow]No transactions found[/yellow]")
        if view.categories and category and category not in view.categories:
            console.print(f"[dim]Known categories: {escape(', '.join(view.categories))}[/dim]")
        return

    total = len(tracker.state.transactions)
    title = f"Transactions ({len(view.rows)} of {total}, {view.balance.currency})"
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for row in view.rows:
        color = "green" if row.is_income else "red"
        table.add_row(
            str(row.id),
            row.date_display,
            escape(row.description),
            escape(row.category) or "[dim]-[/dim]",
            f"[{color}]{row.display}[/{color}]",
        )

    console.print(table)
