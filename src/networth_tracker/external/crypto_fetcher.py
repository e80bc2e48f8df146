"""Crypto price fetching via CoinGecko free API. Prices are always in USD."""

import logging
import time
from decimal import Decimal
from typing import Callable, Optional

import requests

from ..core.cache import MemoryCache
from ..core.exceptions import PriceFetchError

logger = logging.getLogger(__name__)

# Map common crypto symbols to CoinGecko IDs
SYMBOL_TO_COINGECKO = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "BNB": "binancecoin",
    "SOL": "solana",
    "ADA": "cardano",
    "XRP": "ripple",
    "DOT": "polkadot",
    "DOGE": "dogecoin",
    "MATIC": "matic-network",
    "AVAX": "avalanche-2",
    "LINK": "chainlink",
    "UNI": "uniswap",
    "ATOM": "cosmos",
    "LTC": "litecoin",
    "ETC": "ethereum-classic",
    "XLM": "stellar",
    "ALGO": "algorand",
    "VET": "vechain",
    "FIL": "filecoin",
    "TRX": "tron",
    "EOS": "eos",
    "AAVE": "aave",
    "MKR": "maker",
    "COMP": "compound-governance-token",
    "SUSHI": "sushi",
    "SNX": "havven",
    "YFI": "yearn-finance",
    "CRV": "curve-dao-token",
    "USDT": "tether",
    "USDC": "usd-coin",
    "DAI": "dai",
    "WLD": "worldcoin-wld",
}

# Retried in order when the primary ID has no quote
ALTERNATIVE_IDS = {
    "WLD": ["worldcoin"],
    "USDT": ["tether-usd"],
}

COINGECKO_API = "https://api.coingecko.com/api/v3"
QUOTE_CURRENCY = "usd"
REQUEST_TIMEOUT = 10


def coin_id(symbol: str) -> str:
    symbol = symbol.strip().upper()
    return SYMBOL_TO_COINGECKO.get(symbol, symbol.lower())


def _positive(raw) -> Optional[Decimal]:
    if raw is None:
        return None
    price = Decimal(str(raw))
    return price if price > 0 else None


class CryptoFetcher:
    """Fetches crypto prices via CoinGecko (free, no API key)."""

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
    def _query(ids: list[str]) -> dict:
        try:
            resp = requests.get(
                f"{COINGECKO_API}/simple/price",
                params={"ids": ",".join(ids), "vs_currencies": QUOTE_CURRENCY},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise PriceFetchError(f"CoinGecko request for {','.join(ids)} failed: {e}") from e

    def fetch_price(self, symbol: str) -> Optional[Decimal]:
        """Fetch current USD price for a single crypto symbol.

        Returns None when CoinGecko has no quote; raises PriceFetchError
        when every candidate ID failed at the network level.
        """
        symbol = symbol.strip().upper()
        cached = self._cache.get_fresh(symbol, self._ttl)
        if cached is not None:
            return cached

        candidates = [coin_id(symbol), *ALTERNATIVE_IDS.get(symbol, [])]
        last_error: Optional[PriceFetchError] = None
        for candidate in candidates:
            try:
                data = self._query([candidate])
            except PriceFetchError as e:
                last_error = e
                continue
            price = _positive(data.get(candidate, {}).get(QUOTE_CURRENCY))
            if price is not None:
                self._cache.put(symbol, price)
                return price
            last_error = None
        if last_error is not None:
            raise last_error
        return None

    def fetch_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Fetch prices for multiple crypto symbols.

        One batched request first; if it fails, symbols are fetched one at a
        time with a pause between calls. Symbols that cannot be priced are
        left out of the result.
        """
        results: dict[str, Decimal] = {}
        to_fetch: list[str] = []
        for s in symbols:
            symbol = s.strip().upper()
            cached = self._cache.get_fresh(symbol, self._ttl)
            if cached is not None:
                results[symbol] = cached
            elif symbol not in to_fetch:
                to_fetch.append(symbol)
        if not to_fetch:
            return results

        try:
            data = self._query([coin_id(s) for s in to_fetch])
        except PriceFetchError as e:
            logger.warning("%s; retrying symbols one by one", e)
            for i, symbol in enumerate(to_fetch):
                if i:
                    self._sleep(self._delay)
                try:
                    price = self.fetch_price(symbol)
                except PriceFetchError as err:
                    logger.warning("%s", err)
                    continue
                if price is not None:
                    results[symbol] = price
            return results

        for symbol in to_fetch:
            price = _positive(data.get(coin_id(symbol), {}).get(QUOTE_CURRENCY))
            if price is None:
                logger.debug("No CoinGecko quote for %s", symbol)
                continue
            results[symbol] = price
            self._cache.put(symbol, price)
        return results
