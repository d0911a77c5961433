"""CLI entry point for tally."""

import typer

from tally.commands.admin import init_command
from tally.commands.currency import currency_command, rates_command
from tally.commands.data import export_command, import_command
from tally.commands.goal import goal_clear_command, goal_set_command, goal_show_command
from tally.commands.report import charts_command, summary_command
from tally.commands.transactions import add_command, delete_command, list_command
from tally.log import configure_logging

app = typer.Typer(
    name="tally",
    help="Tally - a personal expense tracker",
    add_completion=False,
)

goal_app = typer.Typer(help="Manage your savings goal.")
app.add_typer(goal_app, name="goal")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Tally - a personal expense tracker."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize tally database and configuration."""
    init_command(force)


@app.command()
def add(
    txn_type: str = typer.Argument(..., metavar="TYPE", help="'income' or 'expense'"),
    amount: str = typer.Argument(..., help="Amount in USD"),
    description: str = typer.Option("", "--description", "-d", help="What it was for"),
    category: str = typer.Option(None, "--category", "-c", help="Category name"),
    date: str = typer.Option(None, "--date", help="Transaction date (default: today)"),
) -> None:
    """Add an income or expense transaction."""
    add_command(txn_type, amount, description, category, date)


@app.command()
def delete(
    transaction_id: int = typer.Argument(..., metavar="ID", help="Transaction ID from 'tally list'"),
) -> None:
    """Delete a transaction."""
    delete_command(transaction_id)


@app.command(name="list")
def list_transactions(
    search: str = typer.Option("", "--search", "-s", help="Search descriptions"),
    category: str = typer.Option("", "--category", "-c", help="Only this category"),
    txn_type: str = typer.Option("", "--type", "-t", help="Only 'income' or 'expense'"),
) -> None:
    """List your transactions."""
    list_command(search, category, txn_type)


@app.command()
def summary() -> None:
    """Show your balance and savings goal progress."""
    summary_command()


@app.command()
def charts(
    json_output: bool = typer.Option(False, "--json", help="Print chart data as JSON"),
) -> None:
    """Show monthly income vs expenses and expenses by category."""
    charts_command(json_output)


@app.command()
def currency(
    code: str = typer.Argument(None, help="Currency code to display amounts in (e.g., EUR)"),
) -> None:
    """Show or set your display currency."""
    currency_command(code)


@app.command()
def rates() -> None:
    """Show the exchange rates in use."""
    rates_command()


@app.command(name="export")
def export(
    output_dir: str = typer.Option(None, "--output", "-o", help="Directory to write to (default: current)"),
) -> None:
    """Export your data to a JSON file."""
    export_command(output_dir)


@app.command(name="import")
def import_(
    file_path: str = typer.Argument(..., metavar="FILE", help="JSON export file"),
) -> None:
    """Import data from a JSON export, replacing your transactions."""
    import_command(file_path)


@goal_app.command(name="set")
def goal_set(
    amount: str = typer.Argument(..., help="Target amount in USD"),
    period: str = typer.Option("one-time", "--period", "-p", help="Timeframe (e.g., one-time, monthly)"),
) -> None:
    """Set your savings goal."""
    goal_set_command(amount, period)


@goal_app.command(name="show")
def goal_show() -> None:
    """Show your savings goal."""
    goal_show_command()


@goal_app.command(name="clear")
def goal_clear() -> None:
    """Clear your savings goal."""
    goal_clear_command()


if __name__ == "__main__":
    app()
