"""Deposits into trading accounts."""

from decimal import Decimal
from typing import Optional

import typer
from rich.table import Table

from ...core.finance import total_deposits_by_account
from ...core.models import Currency, Deposit, new_id
from ..common import code, console, fail, money, open_store, parse_date, parse_decimal

app = typer.Typer(help="Record deposits into accounts")


def _parse_foreign(pairs: list[str]) -> dict[str, Decimal]:
    amounts: dict[str, Decimal] = {}
    for pair in pairs:
        currency, sep, raw = pair.partition("=")
        if not sep or len(currency.strip()) != 3:
            fail(f"Invalid --foreign value {pair!r}, expected CODE=AMOUNT (e.g. USD=250)")
        amounts[currency.strip().upper()] = parse_decimal(raw, f"{currency} amount", minimum=Decimal("0"))
    return amounts


@app.command("add")
def add(
    account: str = typer.Argument(..., help="Account name"),
    amount: str = typer.Argument(..., help="Amount deposited, in home currency"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD, default today"),
    foreign: Optional[list[str]] = typer.Option(None, "--foreign", help="Foreign amount as CODE=AMOUNT, repeatable"),
):
    """Record a deposit."""
    store = open_store()
    deposit = store.deposits.add(Deposit(
        id=new_id(),
        account=account,
        date=parse_date(on),
        amount=parse_decimal(amount, "amount", minimum=Decimal("0")),
        foreign_amounts=_parse_foreign(foreign or []),
    ))
    store.flush()
    console.print(f"[green]Deposited {money(deposit.amount)} {code(Currency.HOME)} into '{account}'[/green]")


@app.command("list")
def list_deposits(account: Optional[str] = typer.Option(None, "--account", "-a")):
    """List deposits and totals per account."""
    store = open_store()
    deposits = store.deposits.list()
    if account is not None:
        deposits = [d for d in deposits if d.account == account]
    if not deposits:
        console.print("[yellow]No deposits recorded[/yellow]")
        return

    home = code(Currency.HOME)
    table = Table(title="Deposits")
    table.add_column("Date")
    table.add_column("Account", style="bold")
    table.add_column(f"Amount ({home})", justify="right")
    table.add_column("Foreign", justify="right")
    for d in sorted(deposits, key=lambda d: d.date):
        foreign = ", ".join(f"{money(v)} {k}" for k, v in d.foreign_amounts.items())
        table.add_row(d.date.isoformat(), d.account, money(d.amount), foreign or "—")
    console.print(table)

    for name, total in total_deposits_by_account(deposits).items():
        console.print(f"  {name}: [bold]{money(total)} {home}[/bold]")
