"""Savings goal commands (set, show, clear)."""

import sqlite3
import sys

from rich.console import Console
from rich.markup import escape

from tally.commands.transactions import load_tracker
from tally.domain.currency import format_currency
from tally.domain.models import BASE_CURRENCY

console = Console()


def goal_set_command(amount: str, period: str = "one-time") -> None:
    """Set the savings goal.

    Args:
        amount: Target amount in USD. Must be a non-negative number.
        period: Timeframe label (e.g., one-time, monthly).
    """
    tracker = load_tracker()

    try:
        error = tracker.set_savings_goal(amount, period)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if error:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    goal = tracker.preferences.savings_goal
    console.print(
        f"[green]✓[/green] Savings goal set: {format_currency(goal.target_amount, BASE_CURRENCY)} ({escape(goal.period)})"
    )


def goal_show_command() -> None:
    """Show the current savings goal values."""
    tracker = load_tracker()
    goal = tracker.edit_savings_goal()

    if not goal.is_set:
        console.print("[dim]No savings goal set[/dim]")
        return

    console.print(f"Amount: {goal.target_amount:g}")
    console.print(f"Period: {escape(goal.period)}")


def goal_clear_command() -> None:
    """Clear the savings goal."""
    tracker = load_tracker()

    try:
        tracker.clear_savings_goal()
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Savings goal cleared")
