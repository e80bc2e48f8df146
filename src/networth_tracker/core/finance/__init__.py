"""Multi-currency valuation and aggregation.

Pure functions for valuation, aggregation, grouping and history series.
No database access or I/O.

Usage:
    from networth_tracker.core.finance import value_holding, group_by_instrument
"""

from .aggregation import (
    account_summary,
    allocation_by_type,
    asset_allocation,
    current_asset_allocation,
    current_assets,
    fixed_assets,
    monthly_expenses,
    monthly_flow,
    monthly_income,
    monthly_income_equivalent,
    net_worth,
    normalize_to_monthly,
    total_assets,
    total_cost_basis,
    total_deposits_by_account,
    total_home_value,
    total_liabilities,
    total_portfolio_value,
)
from .grouping import PnLFilter, SortKey, filter_groups, group_by_instrument, sort_groups
from .history import monthly_cash_flow_series, net_worth_history
from .valuation import (
    convert,
    cost_basis_primary,
    market_price_primary,
    value_holding,
    value_holding_pnl,
    value_monetary_entry,
)

__all__ = [
    "value_monetary_entry",
    "value_holding",
    "value_holding_pnl",
    "convert",
    "cost_basis_primary",
    "market_price_primary",
    "total_home_value",
    "total_portfolio_value",
    "total_cost_basis",
    "account_summary",
    "allocation_by_type",
    "asset_allocation",
    "current_asset_allocation",
    "total_assets",
    "current_assets",
    "fixed_assets",
    "total_liabilities",
    "net_worth",
    "normalize_to_monthly",
    "monthly_income_equivalent",
    "monthly_income",
    "monthly_expenses",
    "monthly_flow",
    "total_deposits_by_account",
    "group_by_instrument",
    "filter_groups",
    "sort_groups",
    "PnLFilter",
    "SortKey",
    "net_worth_history",
    "monthly_cash_flow_series",
]
