"""Tests for StockPriceFetcher with yfinance stubbed out."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from networth_tracker.core.cache import MemoryCache
from networth_tracker.external import price_fetcher
from networth_tracker.external.price_fetcher import StockPriceFetcher

D = Decimal


class FakeSeries:
    def __init__(self, values):
        self.iloc = values


class FakeHistory:
    def __init__(self, closes):
        self.empty = not closes
        self._closes = closes

    def __getitem__(self, column):
        assert column == "Close"
        return FakeSeries(self._closes)


def make_ticker(quotes, history=None, calls=None):
    """Build a fake yf.Ticker: quotes maps symbol -> fast_info last_price."""

    class FakeTicker:
        def __init__(self, symbol):
            if calls is not None:
                calls.append(symbol)
            self.symbol = symbol
            self.fast_info = SimpleNamespace(last_price=quotes.get(symbol))

        def history(self, period):
            return FakeHistory((history or {}).get(self.symbol, []))

    return FakeTicker


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fetcher(sleeps):
    return StockPriceFetcher(cache=MemoryCache(lambda: 0.0), ttl=300, delay=0.2, sleep=sleeps.append)


class TestFetchPrice:
    def test_fast_info(self, monkeypatch, fetcher):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"AAPL": 189.25}))
        assert fetcher.fetch_price("aapl") == D("189.2500")

    def test_history_fallback(self, monkeypatch, fetcher):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({}, history={"0700.HK": [380.0, 385.4]}))
        assert fetcher.fetch_price("0700.HK") == D("385.4000")

    def test_no_data(self, monkeypatch, fetcher):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({}))
        assert fetcher.fetch_price("NOPE") is None

    def test_non_positive_fast_info_falls_through(self, monkeypatch, fetcher):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"X": 0}, history={"X": [12.5]}))
        assert fetcher.fetch_price("X") == D("12.5000")

    def test_cached(self, monkeypatch, fetcher):
        calls = []
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"AAPL": 100}, calls=calls))
        fetcher.fetch_price("AAPL")
        fetcher.fetch_price("AAPL")
        assert calls == ["AAPL"]


class TestFetchPrices:
    def test_partial_results(self, monkeypatch, fetcher):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"AAPL": 190, "MSFT": 410}))
        prices = fetcher.fetch_prices(["AAPL", "GONE", "msft"])
        assert prices == {"AAPL": D("190"), "MSFT": D("410")}

    def test_sleeps_between_network_calls(self, monkeypatch, fetcher, sleeps):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"A": 1, "B": 2, "C": 3}))
        fetcher.fetch_prices(["A", "B", "C"])
        assert sleeps == [0.2, 0.2]

    def test_cached_symbols_do_not_sleep(self, monkeypatch, fetcher, sleeps):
        monkeypatch.setattr(price_fetcher.yf, "Ticker", make_ticker({"A": 1, "B": 2}))
        fetcher.fetch_price("A")
        fetcher.fetch_prices(["A", "B"])
        assert sleeps == []

    def test_empty(self, fetcher):
        assert fetcher.fetch_prices([]) == {}
