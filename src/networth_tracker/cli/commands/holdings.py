"""Stock and crypto holdings commands."""

from decimal import Decimal
from typing import Optional

import typer
from rich.table import Table

from ...core.exceptions import TrackerError
from ...core.finance import (
    PnLFilter,
    SortKey,
    filter_groups,
    group_by_instrument,
    market_price_primary,
    sort_groups,
    total_portfolio_value,
    value_holding,
    value_holding_pnl,
)
from ...core.models import Currency, Holding, InstrumentKind, QuoteCurrency, new_id
from ..common import (
    code,
    colored,
    console,
    current_rates,
    fail,
    money,
    open_store,
    parse_currency,
    parse_decimal,
    pct,
)

app = typer.Typer(help="Manage stock and crypto holdings")

STOCK_KINDS = [InstrumentKind.EQUITY.value, InstrumentKind.FUND.value]


def _collection(store, crypto: bool):
    return store.crypto_holdings if crypto else store.stock_holdings


def _label(crypto: bool) -> str:
    return "crypto" if crypto else "stock"


@app.command("add")
def add(
    instrument: str = typer.Argument(..., help="Ticker or crypto symbol (e.g. AAPL, 0700.HK, BTC)"),
    quantity: str = typer.Argument(..., help="Units held"),
    avg_cost: str = typer.Argument(..., help="Average cost per unit in the holding currency"),
    account: str = typer.Option("", "--account", "-a", help="Trading account or wallet name"),
    currency: Optional[str] = typer.Option(None, "--currency", help="ISO code, default primary currency"),
    kind: str = typer.Option("Stock", "--kind", "-k", help=f"Stocks only: {', '.join(STOCK_KINDS)}"),
    price: Optional[str] = typer.Option(None, "--price", "-p", help="Current market price, if known"),
    name: str = typer.Option("", "--name", "-n"),
    crypto: bool = typer.Option(False, "--crypto", help="Add to the crypto portfolio"),
):
    """Add a holding."""
    qty = parse_decimal(quantity, "quantity", minimum=Decimal("0"))
    cost = parse_decimal(avg_cost, "average cost", minimum=Decimal("0"))
    market = parse_decimal(price, "price", minimum=Decimal("0")) if price else None
    declared = parse_currency(currency, default=Currency.PRIMARY)

    if crypto:
        instrument_kind = InstrumentKind.CRYPTO
        quote = QuoteCurrency.PRIMARY_QUOTED
    else:
        if kind not in STOCK_KINDS:
            fail(f"Invalid kind. Choose from: {', '.join(STOCK_KINDS)} (use add-cash for cash)")
        instrument_kind = InstrumentKind(kind)
        quote = QuoteCurrency.for_declared(declared)

    holding = Holding(
        id=new_id(),
        instrument_code=instrument.strip().upper(),
        quantity=qty,
        avg_cost=cost,
        account=account,
        declared_currency=declared,
        quote_currency=quote,
        kind=instrument_kind,
        market_price=market,
        rate_at_entry=current_rates().primary_to_home,
        name=name,
    )
    store = open_store()
    _collection(store, crypto).add(holding)
    store.flush()
    console.print(f"[green]Added {holding.instrument_code} x {qty} to {_label(crypto)} portfolio "
                  f"(ID: {holding.id})[/green]")


@app.command("add-cash")
def add_cash(
    amount: str = typer.Argument(..., help="Cash balance"),
    account: str = typer.Option(..., "--account", "-a", help="Trading account name"),
    currency: Optional[str] = typer.Option(None, "--currency", help="ISO code, default home currency"),
):
    """Add an uninvested cash balance to a trading account."""
    value = parse_decimal(amount, "amount", minimum=Decimal("0"))
    declared = parse_currency(currency)
    holding = Holding.cash_sleeve(new_id(), value, account, declared, current_rates().primary_to_home)
    store = open_store()
    store.stock_holdings.add(holding)
    store.flush()
    console.print(f"[green]Added {money(value)} {code(declared)} cash to '{account}' (ID: {holding.id})[/green]")


@app.command("list")
def list_holdings(
    crypto: bool = typer.Option(False, "--crypto", help="Show the crypto portfolio"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Only this account"),
):
    """List holdings with market value and P&L."""
    store = open_store()
    holdings = _collection(store, crypto).list()
    if account is not None:
        holdings = [h for h in holdings if h.account == account]
    if not holdings:
        console.print(f"[yellow]No {_label(crypto)} holdings. Add one with: nw holdings add <CODE> <QTY> <COST>[/yellow]")
        return

    rates = current_rates()
    primary = code(Currency.PRIMARY)
    home = code(Currency.HOME)
    table = Table(title=f"{_label(crypto).capitalize()} holdings")
    table.add_column("ID", style="cyan")
    table.add_column("Code", style="bold")
    table.add_column("Account")
    table.add_column("Kind")
    table.add_column("Qty", justify="right")
    table.add_column("Avg cost", justify="right")
    table.add_column(f"Price ({primary})", justify="right")
    table.add_column(f"Value ({home})", justify="right")
    table.add_column(f"P&L ({home})", justify="right")
    table.add_column("P&L %", justify="right")

    for h in holdings:
        value = value_holding(h, rates)
        pnl = value_holding_pnl(h, rates)
        table.add_row(
            h.id,
            h.instrument_code,
            h.account or "—",
            h.kind.value,
            f"{h.quantity:,.4f}",
            f"{money(h.avg_cost)} {code(h.declared_currency)}",
            money(market_price_primary(h, rates), 4),
            money(value.home) if h.is_priced else "—",
            colored(pnl.home) if h.is_priced else "—",
            pct(pnl.percentage) if h.is_priced else "—",
        )

    total = total_portfolio_value(holdings, rates)
    table.add_row("", "", "", "", "", "", "[bold]Total[/bold]", f"[bold]{money(total.home)}[/bold]", "", "")
    console.print(table)
    unpriced = [h.instrument_code for h in holdings if not h.is_priced]
    if unpriced:
        console.print(f"  [yellow]No price yet for {', '.join(unpriced)}; run: nw prices refresh[/yellow]")


@app.command("grouped")
def grouped(
    crypto: bool = typer.Option(False, "--crypto", help="Group the crypto portfolio"),
    account: str = typer.Option("all", "--account", "-a", help="Only groups held in this account"),
    pnl: PnLFilter = typer.Option(PnLFilter.ALL, "--pnl", help="all, profit or loss"),
    portion_min: str = typer.Option("", "--min", help="Minimum portfolio portion %"),
    portion_max: str = typer.Option("", "--max", help="Maximum portfolio portion %"),
    sort: SortKey = typer.Option(SortKey.VALUE_DESC, "--sort", "-s", help="Sort order"),
):
    """One row per instrument, combined across accounts."""
    store = open_store()
    holdings = _collection(store, crypto).list()
    if not holdings:
        console.print(f"[yellow]No {_label(crypto)} holdings[/yellow]")
        return

    rates = current_rates()
    total = total_portfolio_value(holdings, rates)
    groups = group_by_instrument(holdings, total.home, rates)
    groups = sort_groups(filter_groups(groups, account, pnl.value, portion_min, portion_max), sort.value)
    if not groups:
        console.print("[yellow]No positions match the filters[/yellow]")
        return

    home = code(Currency.HOME)
    table = Table(title=f"{_label(crypto).capitalize()} positions by instrument")
    table.add_column("Code", style="bold")
    table.add_column("Name")
    table.add_column("Accounts")
    table.add_column("Qty", justify="right")
    table.add_column(f"Avg price ({code(Currency.PRIMARY)})", justify="right")
    table.add_column(f"Value ({home})", justify="right")
    table.add_column(f"P&L ({home})", justify="right")
    table.add_column("P&L %", justify="right")
    table.add_column("Portion", justify="right")

    for g in groups:
        table.add_row(
            g.code,
            g.name or "—",
            ", ".join(a for a in g.accounts if a) or "—",
            f"{g.total_quantity:,.4f}",
            money(g.weighted_avg_market_price, 4),
            money(g.total_market_value.home),
            colored(g.total_pnl.home),
            pct(g.total_pnl.percentage),
            f"{g.portion:,.2f}%",
        )
    console.print(table)


@app.command("remove")
def remove(
    holding_id: str = typer.Argument(..., help="Holding ID"),
    crypto: bool = typer.Option(False, "--crypto"),
    force: bool = typer.Option(False, "--force", "-f"),
):
    """Remove a holding."""
    store = open_store()
    holdings = _collection(store, crypto)
    try:
        h = holdings.get(holding_id)
    except TrackerError as e:
        fail(str(e))

    if not force:
        if not typer.confirm(f"Remove {h.instrument_code} ({h.account or 'no account'})?"):
            console.print("Cancelled.")
            return

    holdings.remove(holding_id)
    store.flush()
    console.print(f"[green]Removed {h.instrument_code}[/green]")
