"""Trading account and crypto wallet commands."""

from decimal import Decimal

import typer
from rich.table import Table

from ...core.exceptions import TrackerError
from ...core.finance import account_summary
from ...core.models import Account, Currency, new_id
from ..common import code, colored, console, current_rates, fail, money, open_store, parse_decimal, pct

app = typer.Typer(help="Manage trading accounts and crypto wallets")


def _accounts(store, crypto: bool):
    return store.crypto_accounts if crypto else store.trading_accounts


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Account name, as used on holdings"),
    initial_home: str = typer.Option("0", "--initial", "-i", help="Initial value in home currency"),
    initial_foreign: str = typer.Option("0", "--initial-foreign", help="Initial value in primary currency"),
    crypto: bool = typer.Option(False, "--crypto", help="Crypto wallet instead of trading account"),
):
    """Add an account."""
    store = open_store()
    accounts = _accounts(store, crypto)
    if accounts.find(lambda a: a.name == name):
        console.print(f"[yellow]Account '{name}' already exists[/yellow]")
        return
    account = accounts.add(Account(
        id=new_id(),
        name=name,
        initial_value_home=parse_decimal(initial_home, "initial value", minimum=Decimal("0")),
        initial_value_foreign=parse_decimal(initial_foreign, "initial value", minimum=Decimal("0")),
    ))
    store.flush()
    console.print(f"[green]Created account '{name}' (ID: {account.id})[/green]")


@app.command("list")
def list_accounts(crypto: bool = typer.Option(False, "--crypto")):
    """List accounts with current value and P&L against their initial value."""
    store = open_store()
    accounts = _accounts(store, crypto).list()
    if not accounts:
        console.print("[yellow]No accounts. Create one with: nw accounts add <NAME>[/yellow]")
        return

    holdings = (store.crypto_holdings if crypto else store.stock_holdings).list()
    rates = current_rates()
    home = code(Currency.HOME)
    table = Table(title="Crypto wallets" if crypto else "Trading accounts")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column(f"Initial ({home})", justify="right")
    table.add_column(f"Value ({home})", justify="right")
    table.add_column(f"Value ({code(Currency.PRIMARY)})", justify="right")
    table.add_column(f"P&L ({home})", justify="right")
    table.add_column("P&L %", justify="right")

    for view in account_summary(accounts, holdings, rates):
        table.add_row(
            view.account.id,
            view.name,
            money(view.account.initial_value_home),
            money(view.current_value_home),
            money(view.current_value_primary),
            colored(view.pnl_home),
            pct(view.pnl_percentage),
        )
    console.print(table)


@app.command("remove")
def remove(
    account_id: str = typer.Argument(..., help="Account ID"),
    crypto: bool = typer.Option(False, "--crypto"),
):
    """Remove an account. Its holdings are kept."""
    store = open_store()
    try:
        account = _accounts(store, crypto).remove(account_id)
    except TrackerError as e:
        fail(str(e))
    store.flush()
    console.print(f"[green]Removed account '{account.name}'[/green]")
