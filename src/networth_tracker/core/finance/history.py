"""Historical series rebuilt from dated entries.

Holdings carry no dates, so net worth history projects the *current* stock
and crypto value back onto every point. This is a known approximation: there
is no historical price data to reconstruct what the portfolios were worth on
each date.
"""

from decimal import Decimal
from typing import Optional, Sequence

from ..models import Asset, CashFlowPoint, Expense, Income, Liability, NetWorthPoint, RateSet
from .aggregation import monthly_income_equivalent
from .valuation import ZERO, value_monetary_entry


def month_key(d) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def net_worth_history(
    assets: Sequence[Asset],
    liabilities: Sequence[Liability],
    current_stock_home: Decimal = ZERO,
    current_crypto_home: Decimal = ZERO,
    rates: Optional[RateSet] = None,
) -> list[NetWorthPoint]:
    """Net worth at every date on which an asset or liability was recorded.

    Each point is the home value of assets dated on or before that date,
    minus liabilities dated on or before it, plus the current stock and
    crypto portfolio values added unconditionally.

    Args:
        assets: Dated asset entries.
        liabilities: Dated liability entries.
        current_stock_home: Present stock portfolio value (home currency).
        current_crypto_home: Present crypto portfolio value (home currency).
        rates: Live rates, or None to use each entry's stored rate.

    Returns:
        Points sorted by date ascending, one per distinct date.
    """
    asset_values = [(a.date, value_monetary_entry(a, rates)) for a in assets]
    liability_values = [(li.date, value_monetary_entry(li, rates)) for li in liabilities]
    dates = sorted({d for d, _ in asset_values} | {d for d, _ in liability_values})
    holdings_value = current_stock_home + current_crypto_home

    points = []
    for day in dates:
        owned = sum((v for d, v in asset_values if d <= day), ZERO)
        owed = sum((v for d, v in liability_values if d <= day), ZERO)
        points.append(NetWorthPoint(date=day, net_worth=owned - owed + holdings_value))
    return points


def monthly_cash_flow_series(
    income: Sequence[Income],
    expenses: Sequence[Expense],
    rates: Optional[RateSet] = None,
) -> list[CashFlowPoint]:
    """Income and expenses bucketed by YYYY-MM of each entry's date.

    Income lands in its own month at its monthly-equivalent amount (it is
    not spread over later months); expenses count at face value.
    """
    buckets: dict[str, list[Decimal]] = {}
    for item in income:
        bucket = buckets.setdefault(month_key(item.date), [ZERO, ZERO])
        bucket[0] += monthly_income_equivalent(item, rates)
    for expense in expenses:
        bucket = buckets.setdefault(month_key(expense.date), [ZERO, ZERO])
        bucket[1] += value_monetary_entry(expense, rates)
    return [
        CashFlowPoint(month=month, income=values[0], expenses=values[1])
        for month, values in sorted(buckets.items())
    ]
