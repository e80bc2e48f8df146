"""Parsing and formatting helpers shared by the CLI commands."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer
from rich.console import Console

from ..core.config import get_config
from ..core.models import Currency, RateSet
from ..data.store import FinancialStore
from ..external.rate_fetcher import get_rate_provider

console = Console()


def fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def open_store() -> FinancialStore:
    return FinancialStore()


def current_rates() -> RateSet:
    return get_rate_provider().get_rates()


def parse_decimal(raw: str, label: str, minimum: Optional[Decimal] = None) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        fail(f"Invalid {label}: {raw!r}")
    if not value.is_finite() or (minimum is not None and value < minimum):
        fail(f"Invalid {label}: {raw!r}")
    return value


def parse_date(raw: Optional[str]) -> date:
    if not raw:
        return date.today()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        fail(f"Invalid date {raw!r}, expected YYYY-MM-DD")


def parse_currency(raw: Optional[str], default: Currency = Currency.HOME) -> Currency:
    """Accept an ISO code from config (e.g. USD) or a role name (e.g. primary)."""
    if not raw:
        return default
    role = get_config().role_for(raw)
    if role is not None:
        return role
    try:
        return Currency(raw.lower())
    except ValueError:
        cfg = get_config()
        fail(f"Unsupported currency {raw!r}. Choose from: "
             f"{cfg.home_currency}, {cfg.primary_currency}, {cfg.secondary_currency}")


def rate_for_entry(currency: Currency) -> Optional[Decimal]:
    """FOREIGN -> HOME rate to store on a new record (None for home currency)."""
    if currency == Currency.HOME:
        return None
    return current_rates().to_home(currency)


def code(currency: Currency) -> str:
    return get_config().code_for(currency)


def money(value: Optional[Decimal], places: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:,.{places}f}"


def colored(value: Decimal, text: Optional[str] = None) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]{text if text is not None else money(value)}[/{color}]"


def pct(value: Decimal) -> str:
    return colored(value, f"{value:,.2f}%")
