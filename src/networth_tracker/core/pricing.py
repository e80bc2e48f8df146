"""Merge fetched market prices into holdings."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from .models import Holding, InstrumentKind


@dataclass
class PriceUpdate:
    """Outcome of applying one price batch."""
    holdings: list[Holding]
    updated: list[str] = field(default_factory=list)  # instrument codes
    missing: list[str] = field(default_factory=list)


def priceable_codes(holdings: Sequence[Holding]) -> list[str]:
    """Distinct upper-cased codes that need a market quote (cash never does)."""
    codes: list[str] = []
    for h in holdings:
        if h.kind == InstrumentKind.CASH_SLEEVE:
            continue
        code = h.instrument_code.strip().upper()
        if code and code not in codes:
            codes.append(code)
    return codes


def apply_prices(
    holdings: Sequence[Holding],
    prices: Mapping[str, Decimal],
    fetched_at: Optional[datetime] = None,
) -> PriceUpdate:
    """Replace market prices for every holding whose code has a quote.

    prices may be a strict subset of the codes requested; holdings without a
    quote keep their last known price and are reported in `missing`.
    """
    fetched_at = fetched_at or datetime.now()
    wanted = priceable_codes(holdings)
    result = PriceUpdate(holdings=[])
    for h in holdings:
        price = prices.get(h.instrument_code.strip().upper())
        if h.kind == InstrumentKind.CASH_SLEEVE or price is None:
            result.holdings.append(h)
            continue
        result.holdings.append(dataclasses.replace(h, market_price=price, last_updated=fetched_at))
    result.updated = [c for c in wanted if c in prices]
    result.missing = [c for c in wanted if c not in prices]
    return result
