"""Assets, liabilities, income and expenses."""

from decimal import Decimal
from enum import Enum
from typing import Optional

import typer
from rich.table import Table

from ...core.exceptions import TrackerError
from ...core.finance import monthly_income_equivalent, value_monetary_entry
from ...core.models import Asset, AssetClass, Currency, Expense, Income, IncomeFrequency, Liability, new_id
from ..common import (
    code,
    console,
    current_rates,
    fail,
    money,
    open_store,
    parse_currency,
    parse_date,
    parse_decimal,
    rate_for_entry,
)

app = typer.Typer(help="Record assets, liabilities, income and expenses")

FREQUENCIES = [f.value for f in IncomeFrequency]


class EntryKind(str, Enum):
    asset = "asset"
    liability = "liability"
    income = "income"
    expense = "expense"


_COLLECTIONS = {
    EntryKind.asset: "assets",
    EntryKind.liability: "liabilities",
    EntryKind.income: "income",
    EntryKind.expense: "expenses",
}


@app.command("add")
def add(
    kind: EntryKind = typer.Argument(..., help="asset, liability, income or expense"),
    amount: str = typer.Argument(..., help="Amount in the entry currency"),
    name: str = typer.Option("", "--name", "-n", help="Asset/liability name, income source or expense description"),
    category: str = typer.Option("Other", "--category", "-c"),
    currency: Optional[str] = typer.Option(None, "--currency", help="ISO code, default home currency"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD, default today"),
    frequency: str = typer.Option("monthly", "--frequency", "-f", help=f"Income only: {', '.join(FREQUENCIES)}"),
    fixed: bool = typer.Option(False, "--fixed", help="Asset only: fixed rather than current"),
    interest: Optional[str] = typer.Option(None, "--interest", help="Liability only: interest rate %"),
):
    """Add a dated entry."""
    value = parse_decimal(amount, "amount", minimum=Decimal("0"))
    cur = parse_currency(currency)
    entry_date = parse_date(on)
    rate = rate_for_entry(cur)
    common = dict(id=new_id(), amount=value, date=entry_date, currency=cur, rate_at_entry=rate)

    if kind == EntryKind.asset:
        asset_class = AssetClass.FIXED if fixed else AssetClass.CURRENT
        record = Asset(name=name, category=category, asset_class=asset_class, **common)
    elif kind == EntryKind.liability:
        rate_pct = parse_decimal(interest, "interest rate") if interest else None
        record = Liability(name=name, category=category, interest_rate=rate_pct, **common)
    elif kind == EntryKind.income:
        if frequency not in FREQUENCIES:
            fail(f"Invalid frequency. Choose from: {', '.join(FREQUENCIES)}")
        record = Income(source=name, frequency=IncomeFrequency(frequency), **common)
    else:
        record = Expense(category=category, description=name, **common)

    store = open_store()
    getattr(store, _COLLECTIONS[kind]).add(record)
    store.flush()
    rate_info = f"  @ {rate:,.4f}" if rate is not None else ""
    console.print(f"[green]Added {kind.value} {money(value)} {code(cur)}{rate_info} (ID: {record.id})[/green]")


@app.command("list")
def list_entries(kind: EntryKind = typer.Argument(..., help="asset, liability, income or expense")):
    """List entries of one kind with their home-currency value."""
    store = open_store()
    records = sorted(getattr(store, _COLLECTIONS[kind]).list(), key=lambda r: r.date)
    if not records:
        console.print(f"[yellow]No {kind.value} entries. Add one with: nw entries add {kind.value} <AMOUNT>[/yellow]")
        return

    rates = current_rates()
    home = code(Currency.HOME)
    table = Table(title=f"{kind.value.capitalize()} entries")
    table.add_column("ID", style="cyan")
    table.add_column("Date")
    table.add_column("Name" if kind != EntryKind.expense else "Category", style="bold")
    table.add_column("Detail")
    table.add_column("Amount", justify="right")
    table.add_column(f"Value ({home})", justify="right")

    total = None
    for r in records:
        if kind == EntryKind.income:
            label, detail = r.source, r.frequency.value
            value = monthly_income_equivalent(r, rates)
        elif kind == EntryKind.expense:
            label, detail = r.category, r.description
            value = value_monetary_entry(r, rates)
        else:
            label, detail = r.name, r.category
            if kind == EntryKind.asset:
                detail = f"{r.category} ({r.asset_class.value})"
            value = value_monetary_entry(r, rates)
        total = value if total is None else total + value
        table.add_row(
            r.id, r.date.isoformat(), label or "—", detail or "—",
            f"{money(r.amount)} {code(r.currency)}", money(value),
        )

    table.add_row("", "", "", "", "[bold]Total[/bold]", f"[bold]{money(total)}[/bold]")
    console.print(table)
    if kind == EntryKind.income:
        console.print("  Values are monthly equivalents; one-time income counts as 0.\n")


@app.command("remove")
def remove(
    kind: EntryKind = typer.Argument(..., help="asset, liability, income or expense"),
    entry_id: str = typer.Argument(..., help="Entry ID"),
):
    """Remove an entry."""
    store = open_store()
    try:
        getattr(store, _COLLECTIONS[kind]).remove(entry_id)
    except TrackerError as e:
        fail(str(e))
    store.flush()
    console.print(f"[green]Removed {kind.value} {entry_id}[/green]")
