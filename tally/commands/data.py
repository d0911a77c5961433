"""Export and import commands."""

import sqlite3
import sys
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from tally.commands.transactions import load_tracker
from tally.domain.codec import IMPORT_SUCCESS_MESSAGE, dump_document, export_filename

console = Console()


def export_command(output_dir: str | None = None) -> None:
    """Export transactions and savings goal to a JSON file.

    Args:
        output_dir: Directory to write to. Defaults to the current directory.
    """
    tracker = load_tracker()
    now = datetime.now(timezone.utc)

    target_dir = Path(output_dir).expanduser() if output_dir else Path.cwd()
    export_path = target_dir / export_filename(now)

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        export_path.write_text(dump_document(tracker.export_document(now)), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    count = len(tracker.state.transactions)
    console.print(f"[green]✓[/green] Exported {count} transactions to: {export_path}")


def import_command(file_path: str) -> None:
    """Replace all transactions with the contents of an export file.

    Args:
        file_path: Path to a JSON export file.
    """
    path = Path(file_path).expanduser()

    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Could not read {path}: {e}[/red]", style="bold")
        sys.exit(1)

    tracker = load_tracker()

    try:
        result = tracker.import_document(text)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not result.ok:
        console.print(f"[red]{result.error}[/red]")
        for detail in result.details:
            console.print(f"[dim]{escape(detail)}[/dim]")
        sys.exit(1)

    console.print(f"[green]✓[/green] {IMPORT_SUCCESS_MESSAGE}")
    console.print(f"  Transactions: {len(result.transactions)}")
    if result.savings_goal is not None:
        console.print(f"  Savings goal: {result.savings_goal:g}")
    for detail in result.details:
        console.print(f"  [yellow]{escape(detail)}[/yellow]")
