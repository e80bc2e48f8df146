"""Exchange rate commands."""

import typer
from rich.table import Table

from ...core.models import Currency
from ..common import code, console, current_rates

app = typer.Typer(help="Exchange rates")


@app.command("show")
def show():
    """Show the exchange rates used for valuation."""
    rates = current_rates()
    home, primary, secondary = code(Currency.HOME), code(Currency.PRIMARY), code(Currency.SECONDARY)

    table = Table(title="Exchange rates")
    table.add_column("Pair", style="bold")
    table.add_column("Rate", justify="right")
    table.add_row(f"{primary} → {home}", f"{rates.primary_to_home:,.4f}")
    table.add_row(f"{secondary} → {home}", f"{rates.secondary_to_home:,.4f}")
    table.add_row(f"{primary} → {secondary}", f"{rates.primary_to_secondary:,.4f}")
    console.print(table)
    if rates.fetched_at is None:
        console.print("  [yellow]Live rates unavailable; showing fallback rates[/yellow]")
    else:
        console.print(f"  Fetched {rates.fetched_at:%Y-%m-%d %H:%M}")
