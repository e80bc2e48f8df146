"""Exchange rates via the free exchangerate-api.com endpoint (no API key)."""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests

from ..core.cache import MemoryCache
from ..core.config import AppConfig, get_config
from ..core.exceptions import RateFetchError
from ..core.models import FALLBACK_RATES, RateSet

logger = logging.getLogger(__name__)

EXCHANGE_RATE_API = "https://api.exchangerate-api.com/v4/latest"
REQUEST_TIMEOUT = 10


def _positive(raw) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value if value > 0 else None


class ExchangeRateFetcher:
    """Fetches the primary -> home and primary -> secondary rates in one call.

    The secondary -> home rate is derived (home / secondary) rather than
    fetched, so the three rates are always mutually consistent.
    """

    def __init__(
        self,
        primary: str = "USD",
        home: str = "MYR",
        secondary: str = "HKD",
        fallback: RateSet = FALLBACK_RATES,
    ):
        self.primary = primary.upper()
        self.home = home.upper()
        self.secondary = secondary.upper()
        self.fallback = fallback

    def fetch_rates(self) -> RateSet:
        try:
            resp = requests.get(f"{EXCHANGE_RATE_API}/{self.primary}", timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise RateFetchError(f"Failed to fetch {self.primary} exchange rates: {e}") from e

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RateFetchError(f"Malformed {self.primary} rate response: {data!r:.200}")
        primary_to_home = _positive(rates.get(self.home))
        if primary_to_home is None:
            raise RateFetchError(f"Invalid {self.primary}->{self.home} rate received: {rates.get(self.home)!r}")

        primary_to_secondary = _positive(rates.get(self.secondary))
        if primary_to_secondary is None:
            logger.info("No %s quote in rate response, using %s", self.secondary, self.fallback.primary_to_secondary)
            primary_to_secondary = self.fallback.primary_to_secondary

        return RateSet(
            primary_to_home=primary_to_home,
            secondary_to_home=primary_to_home / primary_to_secondary,
            primary_to_secondary=primary_to_secondary,
            fetched_at=datetime.now(),
        )


class RateProvider:
    """Cached, never-failing access to the current RateSet.

    Order of preference: a cached RateSet younger than ttl, a live fetch,
    the last cached RateSet of any age, then the static fallback.
    """

    CACHE_KEY = "rates"

    def __init__(
        self,
        fetcher: ExchangeRateFetcher,
        cache: Optional[MemoryCache] = None,
        ttl: float = 3600,
        fallback: RateSet = FALLBACK_RATES,
    ):
        self._fetcher = fetcher
        self._cache = cache if cache is not None else MemoryCache()
        self._ttl = ttl
        self._fallback = fallback

    def get_rates(self) -> RateSet:
        fresh = self._cache.get_fresh(self.CACHE_KEY, self._ttl)
        if fresh is not None:
            return fresh

        try:
            rates = self._fetcher.fetch_rates()
        except RateFetchError as e:
            logger.warning("%s", e)
            hit = self._cache.get(self.CACHE_KEY)
            if hit is not None:
                stale, age = hit
                logger.info("Using cached exchange rates from %.0fs ago", age)
                return stale
            logger.info("No cached exchange rates, using static fallback")
            return self._fallback

        self._cache.put(self.CACHE_KEY, rates)
        return rates


def build_rate_provider(cfg: AppConfig) -> RateProvider:
    fallback = cfg.fallback_rates()
    fetcher = ExchangeRateFetcher(
        primary=cfg.primary_currency,
        home=cfg.home_currency,
        secondary=cfg.secondary_currency,
        fallback=fallback,
    )
    return RateProvider(fetcher, ttl=cfg.rate_cache_ttl, fallback=fallback)


_provider: Optional[RateProvider] = None


def get_rate_provider() -> RateProvider:
    global _provider
    if _provider is None:
        _provider = build_rate_provider(get_config())
    return _provider


def set_rate_provider(provider: Optional[RateProvider]) -> None:
    global _provider
    _provider = provider
