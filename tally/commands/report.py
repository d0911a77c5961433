"""Summary and chart commands for viewing derived data."""

import json

from rich.console import Console
from rich.markup import escape

from tally.commands.transactions import load_tracker
from tally.domain.currency import format_currency
from tally.domain.models import BASE_CURRENCY
from tally.domain.presentation import ChartSeries, SavingsView, chart_payload, histogram_bar_length

console = Console()

BAR_WIDTH = 30


def render_progress_bar(savings: SavingsView, width: int = BAR_WIDTH) -> str:
    """Render savings progress as a text bar."""
    filled = histogram_bar_length(savings.percent, 100.0, width)
    return "█" * filled + "░" * (width - filled)


def summary_command() -> None:
    """Show balance and savings goal progress."""
    tracker = load_tracker()
    view = tracker.dashboard()

    balance = view.balance
    color = "green" if balance.base >= 0 else "red"
    console.print(f"[bold]Balance:[/bold] [{color}]{balance.base_display}[/{color}]")
    if balance.currency != BASE_CURRENCY:
        console.print(f"[bold]In {balance.currency}:[/bold] {balance.converted_display}")

    if not tracker.rate_load.live:
        console.print("[dim]Using fallback currency rates[/dim]")

    savings = view.savings
    console.print()
    if not savings.is_set:
        console.print("[dim]No savings goal set (use 'tally goal set')[/dim]")
        console.print(f"[bold]Current savings:[/bold] {savings.current_display}")
        return

    console.print(f"[bold cyan]Savings goal ({escape(savings.period)}):[/bold cyan] {savings.goal_display}")
    console.print(f"  {render_progress_bar(savings)} {savings.percent_text}")
    console.print(f"  Saved: {savings.saved_display}")
    console.print(f"  To go: {savings.remaining_display}")
    console.print(f"  Current savings: {savings.current_display}")


def render_series(series: ChartSeries) -> None:
    """Render a chart series as histogram lines, one block per dataset."""
    console.print(f"[bold cyan]{series.title}[/bold cyan]\n")

    if not series.labels:
        console.print("  [dim]No data yet[/dim]\n")
        return

    values = [value for dataset in series.datasets for value in dataset.data]
    max_amount = max((abs(value) for value in values), default=0.0)

    for dataset in series.datasets:
        if len(series.datasets) > 1:
            color = "green" if dataset.label == "Income" else "red"
            console.print(f"  [bold {color}]{dataset.label}[/bold {color}]")

        for label, value in zip(series.labels, dataset.data):
            bar = "█" * histogram_bar_length(value, max_amount, BAR_WIDTH)
            amount_display = format_currency(value, BASE_CURRENCY)
            console.print(f"  {escape(label):20} {amount_display:>14} {bar}")
        console.print()


def charts_command(json_output: bool = False) -> None:
    """Show the monthly trend and category breakdown charts.

    Args:
        json_output: Print chart payloads as JSON for an external chart library.
    """
    tracker = load_tracker()
    view = tracker.dashboard()

    if json_output:
        payload = {
            "spending": chart_payload(view.spending_chart),
            "categories": chart_payload(view.category_chart),
        }
        console.print_json(json.dumps(payload))
        return

    render_series(view.spending_chart)
    render_series(view.category_chart)
