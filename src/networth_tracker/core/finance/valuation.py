"""Single-record valuation in home and primary currency.

All functions are pure. They accept one entry or holding plus an optional
RateSet and return Decimal values; no I/O, no side effects.

Rate precedence:
  1. the live RateSet passed by the caller;
  2. when rates is None, the rate stored on the record at entry time;
  3. FALLBACK_RATES as a last resort, so a conversion always succeeds.
"""

from decimal import Decimal
from typing import Optional

from ..models import (
    FALLBACK_RATES,
    Currency,
    Holding,
    HoldingPnL,
    HoldingValue,
    InstrumentKind,
    MonetaryEntry,
    QuoteCurrency,
    RateSet,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def effective_rates(rates: Optional[RateSet], rate_at_entry: Optional[Decimal] = None) -> RateSet:
    """Resolve the RateSet to use for one record.

    Live rates always win. Without them, the record's stored primary->home
    rate replaces the fallback primary rate; the secondary legs come from
    FALLBACK_RATES.
    """
    if rates is not None:
        return rates
    if rate_at_entry is None:
        return FALLBACK_RATES
    return RateSet(
        primary_to_home=rate_at_entry,
        secondary_to_home=FALLBACK_RATES.secondary_to_home,
        primary_to_secondary=FALLBACK_RATES.primary_to_secondary,
    )


def to_primary(amount: Decimal, currency: Currency, rates: RateSet) -> Decimal:
    """Convert an amount in any supported currency to primary currency."""
    if currency == Currency.HOME:
        return amount / rates.primary_to_home
    if currency == Currency.SECONDARY:
        return amount / rates.primary_to_secondary
    return amount


def convert(amount: Decimal, from_currency: Currency, to_currency: Currency, rates: RateSet) -> Decimal:
    """Convert between any two currency roles, pivoting through primary."""
    if from_currency == to_currency:
        return amount
    if to_currency == Currency.HOME:
        return amount * rates.to_home(from_currency)
    primary = to_primary(amount, from_currency, rates)
    if to_currency == Currency.SECONDARY:
        return primary * rates.primary_to_secondary
    return primary


def value_monetary_entry(entry: MonetaryEntry, rates: Optional[RateSet] = None) -> Decimal:
    """Value an asset, liability, income or expense amount in home currency.

    Home-currency entries are returned unchanged. Foreign entries are
    multiplied by the live rate for their currency; the entry's own
    rate_at_entry is used only when no live rates are supplied.

    Args:
        entry: Any MonetaryEntry subtype.
        rates: Live rates, or None to fall back to the stored rate.

    Returns:
        Amount in home currency.
    """
    if entry.currency == Currency.HOME:
        return entry.amount
    if rates is not None:
        return entry.amount * rates.to_home(entry.currency)
    if entry.rate_at_entry is not None:
        return entry.amount * entry.rate_at_entry
    return entry.amount * FALLBACK_RATES.to_home(entry.currency)


def market_value_primary(holding: Holding, rates: RateSet) -> Optional[Decimal]:
    """Market value in primary currency, or None for an unpriced holding."""
    if holding.market_price is None:
        return None
    raw = holding.quantity * holding.market_price
    if holding.kind == InstrumentKind.CASH_SLEEVE:
        # Cash is priced in its own declared currency
        return to_primary(raw, holding.declared_currency, rates)
    if holding.quote_currency == QuoteCurrency.SECONDARY_QUOTED:
        return raw / rates.primary_to_secondary
    return raw


def market_price_primary(holding: Holding, rates: Optional[RateSet] = None) -> Optional[Decimal]:
    """Per-unit market price normalised to primary currency."""
    if holding.market_price is None:
        return None
    rates = effective_rates(rates, holding.rate_at_entry)
    if holding.kind == InstrumentKind.CASH_SLEEVE:
        return to_primary(holding.market_price, holding.declared_currency, rates)
    if holding.quote_currency == QuoteCurrency.SECONDARY_QUOTED:
        return holding.market_price / rates.primary_to_secondary
    return holding.market_price


def cost_basis_primary(holding: Holding, rates: Optional[RateSet] = None) -> Decimal:
    """Cost basis (quantity x avg_cost) normalised to primary currency."""
    rates = effective_rates(rates, holding.rate_at_entry)
    return to_primary(holding.cost_basis, holding.declared_currency, rates)


def value_holding(holding: Holding, rates: Optional[RateSet] = None) -> HoldingValue:
    """Market value of one holding in primary and home currency.

    Secondary-quoted prices are first divided by primary_to_secondary, then
    every value is multiplied by primary_to_home. An unpriced holding is
    worth zero; it never falls back to its cost basis.

    Args:
        holding: The holding to value.
        rates: Live rates, or None to use holding.rate_at_entry.

    Returns:
        HoldingValue(primary, home).
    """
    rates = effective_rates(rates, holding.rate_at_entry)
    primary = market_value_primary(holding, rates)
    if primary is None:
        return HoldingValue()
    if holding.kind == InstrumentKind.CASH_SLEEVE:
        # Straight declared -> home, so home cash stays exact
        raw = holding.quantity * holding.market_price
        return HoldingValue(primary=primary, home=raw * rates.to_home(holding.declared_currency))
    return HoldingValue(primary=primary, home=primary * rates.primary_to_home)


def value_holding_pnl(holding: Holding, rates: Optional[RateSet] = None) -> HoldingPnL:
    """Unrealized profit/loss of one holding.

    Market value and cost basis are both normalised to primary currency
    before subtracting, so currencies are never mixed.

    Returns:
        HoldingPnL(primary, home, percentage). All zero when the holding is
        unpriced; percentage is zero when the cost basis is zero.
    """
    rates = effective_rates(rates, holding.rate_at_entry)
    market = market_value_primary(holding, rates)
    if market is None:
        return HoldingPnL()
    cost = to_primary(holding.cost_basis, holding.declared_currency, rates)
    pnl = market - cost
    percentage = pnl / cost * HUNDRED if cost != 0 else ZERO
    return HoldingPnL(primary=pnl, home=pnl * rates.primary_to_home, percentage=percentage)
