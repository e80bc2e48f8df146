"""Net Worth Tracker CLI main entry point."""

import typer

from ..core.config import get_config
from ..core.logging_config import configure_logging
from .commands import accounts, deposits, entries, export, holdings, prices, rates, stats

app = typer.Typer(
    name="nw",
    help="Personal net worth tracker across home, primary and secondary currencies",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(entries.app, name="entries", help="Assets, liabilities, income and expenses")
app.add_typer(holdings.app, name="holdings", help="Stock and crypto holdings")
app.add_typer(accounts.app, name="accounts", help="Trading accounts and crypto wallets")
app.add_typer(deposits.app, name="deposits", help="Deposits into accounts")
app.add_typer(prices.app, name="prices", help="Fetch market prices")
app.add_typer(rates.app, name="rates", help="Exchange rates")
app.add_typer(stats.app, name="stats", help="Net worth statistics")
app.add_typer(export.app, name="export", help="Export data")


@app.callback()
def startup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """Configure logging on every run."""
    configure_logging("DEBUG" if verbose else get_config().log_level)


if __name__ == "__main__":
    app()
