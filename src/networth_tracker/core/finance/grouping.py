"""Combine holdings of the same instrument across accounts.

group_by_instrument() builds one GroupedPosition per instrument code;
filter_groups() and sort_groups() are the list operators the holdings
views use on top of it.
"""

import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Sequence

from ..models import GroupedPosition, Holding, HoldingPnL, HoldingValue, RateSet
from .valuation import (
    HUNDRED,
    ZERO,
    cost_basis_primary,
    market_price_primary,
    value_holding,
    value_holding_pnl,
)

logger = logging.getLogger(__name__)

ALL_ACCOUNTS = "all"


class PnLFilter(str, Enum):
    ALL = "all"
    PROFIT = "profit"
    LOSS = "loss"


class SortKey(str, Enum):
    PNL_DESC = "pandl-desc"
    PNL_ASC = "pandl-asc"
    PORTION_DESC = "portion-desc"
    PORTION_ASC = "portion-asc"
    VALUE_DESC = "value-desc"
    VALUE_ASC = "value-asc"


_SORT_FIELDS = {
    SortKey.PNL_DESC: (lambda g: g.total_pnl.home, True),
    SortKey.PNL_ASC: (lambda g: g.total_pnl.home, False),
    SortKey.PORTION_DESC: (lambda g: g.portion, True),
    SortKey.PORTION_ASC: (lambda g: g.portion, False),
    SortKey.VALUE_DESC: (lambda g: g.total_market_value.home, True),
    SortKey.VALUE_ASC: (lambda g: g.total_market_value.home, False),
}


def _build_group(code: str, members: list[Holding], portfolio_home_total: Decimal,
                 rates: Optional[RateSet]) -> GroupedPosition:
    first = members[0]
    market = HoldingValue()
    pnl_primary = ZERO
    pnl_home = ZERO
    cost_primary = ZERO
    total_quantity = ZERO
    priced_quantity_sum = ZERO
    any_priced = False
    cost_weighted_sum = ZERO
    accounts: list[str] = []

    for h in members:
        market = market + value_holding(h, rates)
        pnl = value_holding_pnl(h, rates)
        pnl_primary += pnl.primary
        pnl_home += pnl.home
        cost_primary += cost_basis_primary(h, rates)
        total_quantity += h.quantity
        cost_weighted_sum += h.quantity * h.avg_cost
        price = market_price_primary(h, rates)
        if price is not None:
            any_priced = True
            priced_quantity_sum += h.quantity * price
        if h.account not in accounts:
            accounts.append(h.account)

    weighted_price = None
    weighted_cost = None
    if total_quantity > 0:
        weighted_cost = cost_weighted_sum / total_quantity
        if any_priced:
            weighted_price = priced_quantity_sum / total_quantity

    return GroupedPosition(
        code=code,
        name=first.name,
        kind=first.kind,
        currency=first.declared_currency,
        holdings=tuple(members),
        total_quantity=total_quantity,
        total_market_value=market,
        total_pnl=HoldingPnL(
            primary=pnl_primary,
            home=pnl_home,
            percentage=pnl_primary / cost_primary * HUNDRED if cost_primary != 0 else ZERO,
        ),
        portion=market.home / portfolio_home_total * HUNDRED if portfolio_home_total != 0 else ZERO,
        accounts=tuple(accounts),
        weighted_avg_market_price=weighted_price,
        weighted_avg_cost=weighted_cost,
    )


def group_by_instrument(
    holdings: Sequence[Holding],
    portfolio_home_total: Decimal,
    rates: Optional[RateSet] = None,
) -> list[GroupedPosition]:
    """Group holdings by case-insensitive instrument code.

    Groups appear in the order their code is first seen. P&L is summed per
    member in primary and home currency separately rather than converting
    the primary total, so mixed-currency groups do not drift. The weighted
    average cost uses declared-currency costs and assumes every member
    shares the first member's currency.

    Args:
        holdings: Holdings to group.
        portfolio_home_total: Denominator for each group's portion (%).
        rates: Live rates.

    Returns:
        One GroupedPosition per distinct code; single-member groups still
        carry their holding in `holdings`.
    """
    grouped: dict[str, list[Holding]] = {}
    for h in holdings:
        grouped.setdefault(h.instrument_code.strip().upper(), []).append(h)
    return [_build_group(code, members, portfolio_home_total, rates) for code, members in grouped.items()]


def _parse_bound(raw) -> Optional[Decimal]:
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            value = None
    if value is None or not value.is_finite():
        logger.debug("Ignoring unparsable portion bound %r", raw)
        return None
    return value


def filter_groups(
    groups: Sequence[GroupedPosition],
    account_filter: str = ALL_ACCOUNTS,
    pnl_filter: str = PnLFilter.ALL,
    portion_min: str = "",
    portion_max: str = "",
) -> list[GroupedPosition]:
    """Keep groups matching every filter (AND).

    account_filter keeps groups held in that account; pnl_filter keeps
    profit (home P&L >= 0) or loss (< 0) groups; portion bounds are
    inclusive and an empty bound means no bound on that side.
    """
    pnl_mode = PnLFilter(pnl_filter)
    low = _parse_bound(portion_min)
    high = _parse_bound(portion_max)

    result = []
    for g in groups:
        if account_filter != ALL_ACCOUNTS and account_filter not in g.accounts:
            continue
        if pnl_mode == PnLFilter.PROFIT and g.total_pnl.home < 0:
            continue
        if pnl_mode == PnLFilter.LOSS and g.total_pnl.home >= 0:
            continue
        if low is not None and g.portion < low:
            continue
        if high is not None and g.portion > high:
            continue
        result.append(g)
    return result


def sort_groups(groups: Sequence[GroupedPosition], key: str) -> list[GroupedPosition]:
    """Stable sort; groups with equal keys keep their relative order."""
    field, descending = _SORT_FIELDS[SortKey(key)]
    return sorted(groups, key=field, reverse=descending)
