"""Price fetching via yfinance for stocks, ETFs and secondary-listed shares.

Quotes come back in the listing's own currency: US tickers in USD,
".HK" tickers in HKD. Holdings record which of the two applies in their
quote_currency tag; this module does not convert anything.
"""

import logging
import time
from decimal import Decimal
from typing import Callable, Optional

import yfinance as yf

from ..core.cache import MemoryCache

logger = logging.getLogger(__name__)


class StockPriceFetcher:
    """Fetches prices for stocks and ETFs via Yahoo Finance."""

    def __init__(
        self,
        cache: Optional[MemoryCache] = None,
        ttl: float = 300,
        delay: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._cache = cache if cache is not None else MemoryCache()
        self._ttl = ttl
        self._delay = delay
        self._sleep = sleep

    @staticmethod
    def _try_fetch(symbol: str) -> Optional[Decimal]:
        """Try to get a price for a single Yahoo Finance symbol. Returns None on failure."""
        try:
            ticker = yf.Ticker(symbol)
        except Exception as e:
            logger.debug("yfinance rejected %s: %s", symbol, e)
            return None
        # Try fast_info first
        try:
            price = getattr(ticker.fast_info, "last_price", None)
            if price is not None and price > 0:
                return Decimal(str(price)).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.debug("fast_info failed for %s: %s", symbol, e)
        # Fallback to history
        try:
            hist = ticker.history(period="5d")
            if not hist.empty:
                return Decimal(str(hist["Close"].iloc[-1])).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.debug("history failed for %s: %s", symbol, e)
        return None

    def fetch_price(self, code: str) -> Optional[Decimal]:
        """Current price for one symbol, or None when no data is available."""
        symbol = code.strip().upper()
        cached = self._cache.get_fresh(symbol, self._ttl)
        if cached is not None:
            return cached
        price = self._try_fetch(symbol)
        if price is not None:
            self._cache.put(symbol, price)
        else:
            logger.debug("No price data for %s", symbol)
        return price

    def fetch_prices(self, codes: list[str]) -> dict[str, Decimal]:
        """Fetch several symbols one at a time, pausing between network calls.

        Symbols without data are left out of the result, so the caller gets
        a subset on partial failure.
        """
        results: dict[str, Decimal] = {}
        first_call = True
        for code in codes:
            symbol = code.strip().upper()
            cached = self._cache.get_fresh(symbol, self._ttl)
            if cached is not None:
                results[symbol] = cached
                continue
            if not first_call:
                self._sleep(self._delay)
            first_call = False
            price = self.fetch_price(symbol)
            if price is not None:
                results[symbol] = price
        wanted = {c.strip().upper() for c in codes}
        if len(results) < len(wanted):
            logger.warning("Fetched %d of %d stock prices", len(results), len(wanted))
        return results
