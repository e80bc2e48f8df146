"""Tests for ExchangeRateFetcher and RateProvider (no network)."""

from datetime import datetime
from decimal import Decimal

import pytest
import requests

from networth_tracker.core.cache import MemoryCache
from networth_tracker.core.exceptions import RateFetchError
from networth_tracker.core.models import FALLBACK_RATES, RateSet
from networth_tracker.external import rate_fetcher
from networth_tracker.external.rate_fetcher import ExchangeRateFetcher, RateProvider

D = Decimal


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self._payload


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class ScriptedFetcher:
    """Returns or raises the queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def fetch_rates(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


LIVE = RateSet(D("4.45"), D("0.57"), D("7.81"), fetched_at=datetime(2024, 6, 1))
NEWER = RateSet(D("4.5"), D("0.58"), D("7.8"), fetched_at=datetime(2024, 6, 2))


class TestExchangeRateFetcher:
    def test_parses_rates(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append(url)
            return FakeResponse({"base": "USD", "rates": {"MYR": 4.5, "HKD": 7.8, "EUR": 0.9}})

        monkeypatch.setattr(rate_fetcher.requests, "get", fake_get)
        rates = ExchangeRateFetcher().fetch_rates()
        assert calls == [f"{rate_fetcher.EXCHANGE_RATE_API}/USD"]
        assert rates.primary_to_home == D("4.5")
        assert rates.primary_to_secondary == D("7.8")
        assert rates.secondary_to_home == D("4.5") / D("7.8")
        assert rates.fetched_at is not None

    def test_missing_secondary_uses_fallback(self, monkeypatch):
        monkeypatch.setattr(rate_fetcher.requests, "get",
                            lambda url, timeout: FakeResponse({"rates": {"MYR": 4.68}}))
        rates = ExchangeRateFetcher().fetch_rates()
        assert rates.primary_to_secondary == FALLBACK_RATES.primary_to_secondary
        assert rates.secondary_to_home == D("4.68") / D("7.8")

    @pytest.mark.parametrize("home_rate", [None, 0, -1, "n/a", float("nan"), float("inf")])
    def test_invalid_home_rate_is_a_failure(self, monkeypatch, home_rate):
        monkeypatch.setattr(rate_fetcher.requests, "get",
                            lambda url, timeout: FakeResponse({"rates": {"MYR": home_rate, "HKD": 7.8}}))
        with pytest.raises(RateFetchError):
            ExchangeRateFetcher().fetch_rates()

    @pytest.mark.parametrize("payload", [["not", "a", "dict"], "USD", None, {"rates": ["MYR", 4.5]}, {"base": "USD"}])
    def test_malformed_payload_is_a_failure(self, monkeypatch, payload):
        monkeypatch.setattr(rate_fetcher.requests, "get", lambda url, timeout: FakeResponse(payload))
        with pytest.raises(RateFetchError):
            ExchangeRateFetcher().fetch_rates()

    def test_nan_secondary_uses_fallback(self, monkeypatch):
        monkeypatch.setattr(rate_fetcher.requests, "get",
                            lambda url, timeout: FakeResponse({"rates": {"MYR": 4.68, "HKD": float("nan")}}))
        rates = ExchangeRateFetcher().fetch_rates()
        assert rates.primary_to_secondary == FALLBACK_RATES.primary_to_secondary

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(rate_fetcher.requests, "get", lambda url, timeout: FakeResponse({}, status=503))
        with pytest.raises(RateFetchError):
            ExchangeRateFetcher().fetch_rates()

    def test_connection_error(self, monkeypatch):
        def boom(url, timeout):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(rate_fetcher.requests, "get", boom)
        with pytest.raises(RateFetchError):
            ExchangeRateFetcher().fetch_rates()


class TestRateProvider:
    def test_fresh_cache_skips_fetch(self):
        clock = FakeClock()
        fetcher = ScriptedFetcher(LIVE, NEWER)
        provider = RateProvider(fetcher, MemoryCache(clock), ttl=3600)
        assert provider.get_rates() == LIVE
        clock.now = 3599
        assert provider.get_rates() == LIVE
        assert fetcher.calls == 1

    def test_expired_cache_refetches(self):
        clock = FakeClock()
        fetcher = ScriptedFetcher(LIVE, NEWER)
        provider = RateProvider(fetcher, MemoryCache(clock), ttl=3600)
        provider.get_rates()
        clock.now = 3600
        assert provider.get_rates() == NEWER
        assert fetcher.calls == 2

    def test_failure_returns_stale_cache(self):
        clock = FakeClock()
        fetcher = ScriptedFetcher(LIVE, RateFetchError("down"))
        provider = RateProvider(fetcher, MemoryCache(clock), ttl=3600)
        provider.get_rates()
        clock.now = 10 * 3600
        assert provider.get_rates() == LIVE

    def test_failure_without_cache_returns_fallback(self):
        fallback = RateSet(D("4.2"), D("0.55"), D("7.75"))
        provider = RateProvider(ScriptedFetcher(RateFetchError("down")), MemoryCache(FakeClock()), fallback=fallback)
        assert provider.get_rates() == fallback

    @pytest.mark.parametrize("payload", [["not", "a", "dict"], {"rates": {"MYR": float("nan"), "HKD": 7.8}}])
    def test_bad_live_response_falls_back(self, monkeypatch, payload):
        monkeypatch.setattr(rate_fetcher.requests, "get", lambda url, timeout: FakeResponse(payload))
        provider = RateProvider(ExchangeRateFetcher(), MemoryCache(FakeClock()))
        assert provider.get_rates() == FALLBACK_RATES

    def test_default_fallback_constants(self):
        provider = RateProvider(ScriptedFetcher(RateFetchError("down")))
        rates = provider.get_rates()
        assert (rates.primary_to_home, rates.secondary_to_home, rates.primary_to_secondary) == (
            D("4.7"), D("0.6"), D("7.8"))
