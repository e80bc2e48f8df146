"""Tests for AppConfig loading."""

import json
from decimal import Decimal

import pytest

from networth_tracker.core import config as config_mod
from networth_tracker.core.config import AppConfig, get_config, save_config, set_config
from networth_tracker.core.models import Currency


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_mod, "_config_path", lambda: path)
    set_config(None)
    return path


def test_defaults_without_file(config_file):
    cfg = get_config()
    assert (cfg.home_currency, cfg.primary_currency, cfg.secondary_currency) == ("MYR", "USD", "HKD")
    assert cfg.rate_cache_ttl == 3600


def test_loads_overrides(config_file):
    config_file.write_text(json.dumps({
        "home_currency": "SGD",
        "storage": "sqlite",
        "fallback_primary_to_home": "1.35",
        "price_request_delay": 0.5,
    }))
    cfg = get_config()
    assert cfg.home_currency == "SGD"
    assert cfg.storage == "sqlite"
    assert cfg.fallback_primary_to_home == Decimal("1.35")
    assert cfg.fallback_rates().primary_to_home == Decimal("1.35")
    assert cfg.price_request_delay == 0.5


@pytest.mark.parametrize("bad", [
    "{not json",
    json.dumps({"storage": "postgres"}),
    json.dumps({"fallback_primary_to_home": "-1"}),
    json.dumps({"rate_cache_ttl": "soon"}),
])
def test_invalid_file_falls_back_to_defaults(config_file, bad):
    config_file.write_text(bad)
    assert get_config() == AppConfig()


def test_save_round_trip(config_file):
    save_config(AppConfig(home_currency="EUR", fallback_secondary_to_home=Decimal("0.12")))
    set_config(None)
    cfg = get_config()
    assert cfg.home_currency == "EUR"
    assert cfg.fallback_secondary_to_home == Decimal("0.12")


def test_currency_roles():
    cfg = AppConfig()
    assert cfg.code_for(Currency.SECONDARY) == "HKD"
    assert cfg.role_for("usd") == Currency.PRIMARY
    assert cfg.role_for("JPY") is None


def test_relative_data_path_resolves_under_project_root():
    cfg = AppConfig(data_file="data/x.json")
    assert cfg.data_path() == config_mod.find_project_root() / "data" / "x.json"
