"""Display currency and exchange rate commands."""

import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from tally.commands.transactions import load_tracker
from tally.domain.models import BASE_CURRENCY

console = Console()


def currency_command(code: str | None = None) -> None:
    """Show or set the display currency.

    Args:
        code: Currency code to select. If None, shows the current one.
    """
    tracker = load_tracker()

    if code is None:
        console.print(f"Display currency: [bold]{tracker.preferences.selected_currency}[/bold]")
        return

    try:
        tracker.set_currency(code)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    selected = tracker.preferences.selected_currency
    console.print(f"[green]✓[/green] Display currency set to {selected}")

    if selected not in tracker.rates:
        console.print(f"[yellow]No exchange rate for {selected}; amounts will be shown unconverted[/yellow]")


def rates_command() -> None:
    """Show the active exchange rate table."""
    tracker = load_tracker()
    load = tracker.rate_load

    source = "live" if load.live else "fallback"
    table = Table(title=f"Exchange rates per 1 {BASE_CURRENCY} ({source})")
    table.add_column("Currency", style="cyan")
    table.add_column("Rate", justify="right")

    selected = tracker.preferences.selected_currency
    for code, rate in sorted(load.rates.items()):
        marker = " [bold]*[/bold]" if code == selected else ""
        table.add_row(f"{code}{marker}", f"{rate:,.4f}")

    console.print(table)

    if load.error and load.error != "offline":
        console.print(f"[dim]Live rates unavailable: {load.error}[/dim]")
