"""Price refresh commands."""

import typer
from rich.table import Table

from ...core.config import get_config
from ...core.pricing import apply_prices, priceable_codes
from ...external.crypto_fetcher import CryptoFetcher
from ...external.price_fetcher import StockPriceFetcher
from ..common import console, money, open_store

app = typer.Typer(help="Fetch market prices")


@app.command("refresh")
def refresh(
    stocks: bool = typer.Option(True, "--stocks/--no-stocks", help="Refresh stock holdings"),
    crypto: bool = typer.Option(True, "--crypto/--no-crypto", help="Refresh crypto holdings"),
):
    """Fetch latest prices and store them on the holdings.

    Stocks are priced via Yahoo Finance, crypto via CoinGecko. Instruments
    that fail keep their previous price.
    """
    cfg = get_config()
    store = open_store()
    table = Table(title="Price refresh")
    table.add_column("Portfolio")
    table.add_column("Code", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Status")

    batches = []
    if stocks:
        fetcher = StockPriceFetcher(ttl=cfg.price_cache_ttl, delay=cfg.price_request_delay)
        batches.append(("stock", store.stock_holdings, fetcher))
    if crypto:
        fetcher = CryptoFetcher(ttl=cfg.price_cache_ttl, delay=cfg.price_request_delay)
        batches.append(("crypto", store.crypto_holdings, fetcher))

    any_codes = False
    for label, collection, fetcher in batches:
        holdings = collection.list()
        codes = priceable_codes(holdings)
        if not codes:
            continue
        any_codes = True
        console.print(f"Fetching {len(codes)} {label} prices...")
        prices = fetcher.fetch_prices(codes)
        update = apply_prices(holdings, prices)
        collection.replace_all(update.holdings)
        for c in update.updated:
            table.add_row(label, c, money(prices[c], 4), "[green]OK[/green]")
        for c in update.missing:
            table.add_row(label, c, "—", "[red]FAILED[/red]")

    if not any_codes:
        console.print("[yellow]No holdings to fetch prices for[/yellow]")
        return
    store.flush()
    console.print(table)
