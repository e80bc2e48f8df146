"""Net worth statistics commands."""

from typing import Optional

import typer
from rich.table import Table

from ...core.finance import (
    allocation_by_type,
    asset_allocation,
    current_asset_allocation,
    current_assets,
    fixed_assets,
    monthly_cash_flow_series,
    monthly_expenses,
    monthly_flow,
    monthly_income,
    net_worth,
    net_worth_history,
    total_assets,
    total_liabilities,
    total_portfolio_value,
)
from ...core.models import Currency
from ..common import code, colored, console, current_rates, money, open_store, parse_date

app = typer.Typer(help="Net worth statistics")


@app.command("summary")
def summary(on: Optional[str] = typer.Option(None, "--date", "-d", help="Month to use for expenses (YYYY-MM-DD)")):
    """Net worth, portfolios and this month's cash flow."""
    store = open_store()
    rates = current_rates()
    today = parse_date(on)
    home = code(Currency.HOME)

    assets = store.assets.list()
    liabilities = store.liabilities.list()
    stocks = store.stock_holdings.list()
    crypto = store.crypto_holdings.list()
    income = store.income.list()
    expenses = store.expenses.list()

    stock_value = total_portfolio_value(stocks, rates)
    crypto_value = total_portfolio_value(crypto, rates)

    console.print(f"\n[bold]Net worth summary ({home})[/bold]\n")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Current assets", money(current_assets(assets, rates)))
    table.add_row("Fixed assets", money(fixed_assets(assets, rates)))
    table.add_row("Stock portfolio", money(stock_value.home))
    table.add_row("Crypto portfolio", money(crypto_value.home))
    table.add_row("[bold]Total assets[/bold]", f"[bold]{money(total_assets(assets, rates, stocks, crypto))}[/bold]")
    table.add_row("Total liabilities", money(total_liabilities(liabilities, rates)))
    table.add_row("[bold]Net worth[/bold]", f"[bold]{colored(net_worth(assets, liabilities, rates, stocks, crypto))}[/bold]")
    table.add_row("", "")
    table.add_row("Monthly income", money(monthly_income(income, rates)))
    table.add_row(f"Expenses ({today:%Y-%m})", money(monthly_expenses(expenses, rates, today)))
    table.add_row("[bold]Monthly cash flow[/bold]", colored(monthly_flow(income, expenses, rates, today)))
    console.print(table)
    console.print(f"\n  Rates: 1 {code(Currency.PRIMARY)} = {rates.primary_to_home:,.4f} {home}, "
                  f"1 {code(Currency.SECONDARY)} = {rates.secondary_to_home:,.4f} {home}\n")


@app.command("allocation")
def allocation(
    current: bool = typer.Option(False, "--current", help="Current assets only"),
    by_type: bool = typer.Option(False, "--by-type", help="Stock portfolio by instrument kind"),
):
    """Asset allocation by category, or stock allocation by kind."""
    store = open_store()
    rates = current_rates()
    if by_type:
        slices = allocation_by_type(store.stock_holdings.list(), rates)
        title = "Stock allocation by kind"
    else:
        build = current_asset_allocation if current else asset_allocation
        slices = build(store.assets.list(), rates, store.stock_holdings.list(), store.crypto_holdings.list())
        title = "Current asset allocation" if current else "Asset allocation"

    if not slices:
        console.print("[yellow]Nothing to allocate yet[/yellow]")
        return

    table = Table(title=title)
    table.add_column("Name", style="bold")
    table.add_column(f"Value ({code(Currency.HOME)})", justify="right")
    table.add_column("Share", justify="right")
    for s in slices:
        table.add_row(s.name, money(s.value), f"{s.percentage:,.1f}%")
    console.print(table)


@app.command("history")
def history():
    """Net worth at every dated asset or liability entry."""
    store = open_store()
    rates = current_rates()
    points = net_worth_history(
        store.assets.list(),
        store.liabilities.list(),
        total_portfolio_value(store.stock_holdings.list(), rates).home,
        total_portfolio_value(store.crypto_holdings.list(), rates).home,
        rates,
    )
    if not points:
        console.print("[yellow]No dated assets or liabilities yet[/yellow]")
        return

    table = Table(title=f"Net worth history ({code(Currency.HOME)})")
    table.add_column("Date")
    table.add_column("Net worth", justify="right")
    for p in points:
        table.add_row(p.date.isoformat(), colored(p.net_worth))
    console.print(table)
    console.print("  [dim]Stock and crypto portfolios are included at today's value on every date.[/dim]")


@app.command("cashflow")
def cashflow():
    """Income and expenses per month."""
    store = open_store()
    points = monthly_cash_flow_series(store.income.list(), store.expenses.list(), current_rates())
    if not points:
        console.print("[yellow]No income or expenses recorded[/yellow]")
        return

    table = Table(title=f"Monthly cash flow ({code(Currency.HOME)})")
    table.add_column("Month")
    table.add_column("Income", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Net", justify="right")
    for p in points:
        table.add_row(p.month, money(p.income), money(p.expenses), colored(p.net))
    console.print(table)
