"""Tests for CryptoFetcher with the CoinGecko API stubbed out."""

from decimal import Decimal

import pytest
import requests

from networth_tracker.core.cache import MemoryCache
from networth_tracker.core.exceptions import PriceFetchError
from networth_tracker.external import crypto_fetcher
from networth_tracker.external.crypto_fetcher import CryptoFetcher, coin_id

D = Decimal


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class FakeCoinGecko:
    """Answers /simple/price from a fixed table; ids in `broken` raise."""

    def __init__(self, prices, broken=()):
        self.prices = prices
        self.broken = set(broken)
        self.requests = []

    def __call__(self, url, params, timeout):
        ids = params["ids"].split(",")
        self.requests.append(ids)
        if self.broken & set(ids):
            raise requests.ConnectionError("reset")
        return FakeResponse({i: {"usd": self.prices[i]} for i in ids if i in self.prices})


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fetcher(sleeps):
    return CryptoFetcher(cache=MemoryCache(lambda: 0.0), ttl=300, delay=0.2, sleep=sleeps.append)


def test_coin_id():
    assert coin_id("btc") == "bitcoin"
    assert coin_id("WLD") == "worldcoin-wld"
    assert coin_id("PEPE") == "pepe"


class TestFetchPrice:
    def test_known_symbol(self, monkeypatch, fetcher):
        monkeypatch.setattr(crypto_fetcher.requests, "get", FakeCoinGecko({"bitcoin": 65000.5}))
        assert fetcher.fetch_price("btc") == D("65000.5")

    def test_alternative_id(self, monkeypatch, fetcher):
        api = FakeCoinGecko({"worldcoin": 2.1})
        monkeypatch.setattr(crypto_fetcher.requests, "get", api)
        assert fetcher.fetch_price("WLD") == D("2.1")
        assert api.requests == [["worldcoin-wld"], ["worldcoin"]]

    def test_no_quote(self, monkeypatch, fetcher):
        monkeypatch.setattr(crypto_fetcher.requests, "get", FakeCoinGecko({}))
        assert fetcher.fetch_price("ZZZ") is None

    def test_network_failure_raises(self, monkeypatch, fetcher):
        monkeypatch.setattr(crypto_fetcher.requests, "get", FakeCoinGecko({}, broken={"ethereum"}))
        with pytest.raises(PriceFetchError):
            fetcher.fetch_price("ETH")

    def test_cached(self, monkeypatch, fetcher):
        api = FakeCoinGecko({"bitcoin": 1})
        monkeypatch.setattr(crypto_fetcher.requests, "get", api)
        fetcher.fetch_price("BTC")
        fetcher.fetch_price("BTC")
        assert len(api.requests) == 1


class TestFetchPrices:
    def test_single_batch_request(self, monkeypatch, fetcher):
        api = FakeCoinGecko({"bitcoin": 65000, "ethereum": 3500})
        monkeypatch.setattr(crypto_fetcher.requests, "get", api)
        prices = fetcher.fetch_prices(["BTC", "eth", "NOPE"])
        assert prices == {"BTC": D("65000"), "ETH": D("3500")}
        assert api.requests == [["bitcoin", "ethereum", "nope"]]

    def test_batch_failure_falls_back_to_individual(self, monkeypatch, fetcher, sleeps):
        api = FakeCoinGecko({"bitcoin": 65000, "solana": 150}, broken={"ethereum"})
        monkeypatch.setattr(crypto_fetcher.requests, "get", api)
        prices = fetcher.fetch_prices(["BTC", "ETH", "SOL"])
        assert prices == {"BTC": D("65000"), "SOL": D("150")}
        assert sleeps == [0.2, 0.2]

    def test_all_cached(self, monkeypatch, fetcher):
        api = FakeCoinGecko({"bitcoin": 1})
        monkeypatch.setattr(crypto_fetcher.requests, "get", api)
        fetcher.fetch_price("BTC")
        assert fetcher.fetch_prices(["BTC"]) == {"BTC": D("1")}
        assert len(api.requests) == 1
