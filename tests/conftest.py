"""Shared pytest fixtures for net worth tracker tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from networth_tracker.core.config import AppConfig, set_config
from networth_tracker.core.exceptions import RateFetchError
from networth_tracker.core.models import RateSet
from networth_tracker.data.document_store import JsonFileDocumentStore, set_document_store
from networth_tracker.external.rate_fetcher import RateProvider, set_rate_provider

LIVE_RATES = RateSet(
    primary_to_home=Decimal("4.7"),
    secondary_to_home=Decimal("0.6"),
    primary_to_secondary=Decimal("7.8"),
    fetched_at=datetime(2024, 6, 1, 12, 0),
)


class OfflineRateFetcher:
    """Stands in for ExchangeRateFetcher; never touches the network."""

    def __init__(self, rates=LIVE_RATES):
        self.rates = rates
        self.calls = 0

    def fetch_rates(self) -> RateSet:
        self.calls += 1
        if self.rates is None:
            raise RateFetchError("offline")
        return self.rates


@pytest.fixture(autouse=True)
def isolated_store(tmp_path):
    """Each test gets its own config, data file and offline rates. Resets the globals after."""
    data_file = tmp_path / "financial-data.json"
    cfg = AppConfig(data_file=str(data_file))
    set_config(cfg)
    store = JsonFileDocumentStore(data_file, cfg)
    set_document_store(store)
    set_rate_provider(RateProvider(OfflineRateFetcher(), fallback=cfg.fallback_rates()))
    yield store
    set_document_store(None)
    set_rate_provider(None)
    set_config(None)


@pytest.fixture
def rates() -> RateSet:
    return LIVE_RATES
