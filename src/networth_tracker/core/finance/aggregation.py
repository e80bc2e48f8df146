"""Portfolio and household aggregates.

All functions are pure: they accept model objects and return Decimal
values or derived records. No database access, no I/O, no side effects.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..models import (
    Account,
    AccountView,
    AllocationSlice,
    Asset,
    AssetClass,
    Deposit,
    Expense,
    Holding,
    HoldingValue,
    Income,
    IncomeFrequency,
    Liability,
    MonetaryEntry,
    RateSet,
)
from .valuation import HUNDRED, ZERO, cost_basis_primary, value_holding, value_monetary_entry

STOCK_PORTFOLIO = "Stock Portfolio"
CRYPTO_PORTFOLIO = "Crypto Portfolio"

# Monthly equivalent of one payment at each frequency; yearly divides instead
MONTHLY_FACTORS: dict[IncomeFrequency, Decimal] = {
    IncomeFrequency.WEEKLY: Decimal("4.33"),
    IncomeFrequency.BI_WEEKLY: Decimal("2.17"),
    IncomeFrequency.MONTHLY: Decimal("1"),
    IncomeFrequency.ONE_TIME: Decimal("0"),
}
MONTHS_PER_YEAR = Decimal("12")


def normalize_to_monthly(amount: Decimal, frequency: IncomeFrequency) -> Decimal:
    """Monthly equivalent of a recurring amount (one-time -> 0)."""
    if frequency == IncomeFrequency.YEARLY:
        return amount / MONTHS_PER_YEAR
    return amount * MONTHLY_FACTORS[frequency]


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    return part / whole * HUNDRED if whole != 0 else ZERO


def total_home_value(entries: Iterable[MonetaryEntry], rates: Optional[RateSet] = None) -> Decimal:
    """Sum of value_monetary_entry over all entries."""
    return sum((value_monetary_entry(e, rates) for e in entries), ZERO)


def total_portfolio_value(holdings: Iterable[Holding], rates: Optional[RateSet] = None) -> HoldingValue:
    """Sum the market value of all holdings.

    Unpriced holdings contribute zero to both legs.
    """
    total = HoldingValue()
    for h in holdings:
        total = total + value_holding(h, rates)
    return total


def total_cost_basis(holdings: Iterable[Holding], rates: Optional[RateSet] = None) -> Decimal:
    """Cost basis of all holdings in primary currency, priced or not."""
    return sum((cost_basis_primary(h, rates) for h in holdings), ZERO)


def account_summary(
    accounts: Sequence[Account],
    holdings: Sequence[Holding],
    rates: Optional[RateSet] = None,
) -> list[AccountView]:
    """Current value and P&L per account.

    Holdings are matched to accounts by exact, case-sensitive name. The P&L
    is measured against the account's initial home-currency value.

    Args:
        accounts: Trading accounts or crypto wallets.
        holdings: Every holding that may belong to one of the accounts.
        rates: Live rates.

    Returns:
        One AccountView per account, in input order.
    """
    views = []
    for account in accounts:
        current = total_portfolio_value(
            (h for h in holdings if h.account == account.name), rates
        )
        pnl = current.home - account.initial_value_home
        pnl_pct = pnl / account.initial_value_home * HUNDRED if account.initial_value_home > 0 else ZERO
        views.append(AccountView(
            account=account,
            current_value_home=current.home,
            current_value_primary=current.primary,
            pnl_home=pnl,
            pnl_percentage=pnl_pct,
        ))
    return views


def allocation_by_type(holdings: Sequence[Holding], rates: Optional[RateSet] = None) -> list[AllocationSlice]:
    """Allocation by instrument kind, relative to the home-currency total.

    Percentages sum to 100 when the portfolio has value, and are all zero
    otherwise. Slices are ordered by value, largest first.
    """
    by_kind: dict[str, Decimal] = {}
    for h in holdings:
        key = h.kind.value
        by_kind[key] = by_kind.get(key, ZERO) + value_holding(h, rates).home
    total = sum(by_kind.values(), ZERO)
    slices = [AllocationSlice(name=k, value=v, percentage=_percentage(v, total)) for k, v in by_kind.items()]
    return sorted(slices, key=lambda s: s.value, reverse=True)


def total_assets(
    assets: Iterable[Asset],
    rates: Optional[RateSet] = None,
    stock_holdings: Sequence[Holding] = (),
    crypto_holdings: Sequence[Holding] = (),
) -> Decimal:
    """Home value of manual assets plus both holding portfolios."""
    return (
        total_home_value(assets, rates)
        + total_portfolio_value(stock_holdings, rates).home
        + total_portfolio_value(crypto_holdings, rates).home
    )


def current_assets(assets: Iterable[Asset], rates: Optional[RateSet] = None) -> Decimal:
    return total_home_value((a for a in assets if a.asset_class == AssetClass.CURRENT), rates)


def fixed_assets(assets: Iterable[Asset], rates: Optional[RateSet] = None) -> Decimal:
    return total_home_value((a for a in assets if a.asset_class == AssetClass.FIXED), rates)


def total_liabilities(liabilities: Iterable[Liability], rates: Optional[RateSet] = None) -> Decimal:
    return total_home_value(liabilities, rates)


def net_worth(
    assets: Sequence[Asset],
    liabilities: Sequence[Liability],
    rates: Optional[RateSet] = None,
    stock_holdings: Sequence[Holding] = (),
    crypto_holdings: Sequence[Holding] = (),
) -> Decimal:
    return total_assets(assets, rates, stock_holdings, crypto_holdings) - total_liabilities(liabilities, rates)


def monthly_income_equivalent(item: Income, rates: Optional[RateSet] = None) -> Decimal:
    """Home-currency monthly equivalent of one income entry."""
    return normalize_to_monthly(value_monetary_entry(item, rates), item.frequency)


def monthly_income(income: Iterable[Income], rates: Optional[RateSet] = None) -> Decimal:
    """Recurring monthly income. One-time income is excluded."""
    return sum((monthly_income_equivalent(i, rates) for i in income), ZERO)


def monthly_expenses(
    expenses: Iterable[Expense],
    rates: Optional[RateSet] = None,
    today: Optional[date] = None,
) -> Decimal:
    """Expenses dated in the current calendar month (not a trailing window)."""
    today = today or date.today()
    return total_home_value(
        (e for e in expenses if e.date.year == today.year and e.date.month == today.month),
        rates,
    )


def monthly_flow(
    income: Iterable[Income],
    expenses: Iterable[Expense],
    rates: Optional[RateSet] = None,
    today: Optional[date] = None,
) -> Decimal:
    """Recurring monthly income minus this month's expenses."""
    return monthly_income(income, rates) - monthly_expenses(expenses, rates, today)


def _by_category(assets: Iterable[Asset], rates: Optional[RateSet]) -> dict[str, Decimal]:
    allocation: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for a in assets:
        allocation[a.category] += value_monetary_entry(a, rates)
    return allocation


def _with_portfolios(
    allocation: dict[str, Decimal],
    stock_holdings: Sequence[Holding],
    crypto_holdings: Sequence[Holding],
    rates: Optional[RateSet],
) -> list[AllocationSlice]:
    if stock_holdings:
        allocation[STOCK_PORTFOLIO] += total_portfolio_value(stock_holdings, rates).home
    if crypto_holdings:
        allocation[CRYPTO_PORTFOLIO] += total_portfolio_value(crypto_holdings, rates).home
    total = sum(allocation.values(), ZERO)
    slices = [AllocationSlice(name=k, value=v, percentage=_percentage(v, total)) for k, v in allocation.items()]
    return sorted(slices, key=lambda s: s.value, reverse=True)


def asset_allocation(
    assets: Sequence[Asset],
    rates: Optional[RateSet] = None,
    stock_holdings: Sequence[Holding] = (),
    crypto_holdings: Sequence[Holding] = (),
) -> list[AllocationSlice]:
    """Asset value by category, with each holding portfolio as one slice."""
    return _with_portfolios(_by_category(assets, rates), stock_holdings, crypto_holdings, rates)


def current_asset_allocation(
    assets: Sequence[Asset],
    rates: Optional[RateSet] = None,
    stock_holdings: Sequence[Holding] = (),
    crypto_holdings: Sequence[Holding] = (),
) -> list[AllocationSlice]:
    """Like asset_allocation, but fixed assets are left out. Portfolios count as liquid."""
    current = [a for a in assets if a.asset_class == AssetClass.CURRENT]
    return _with_portfolios(_by_category(current, rates), stock_holdings, crypto_holdings, rates)


def total_deposits_by_account(deposits: Iterable[Deposit]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for d in deposits:
        totals[d.account] = totals.get(d.account, ZERO) + d.amount
    return totals
