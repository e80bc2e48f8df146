"""JSON and SQLite document stores against real files."""

import json
from datetime import date
from decimal import Decimal

import pytest

from networth_tracker.core.config import AppConfig
from networth_tracker.core.models import Asset, Currency, FinancialDocument, Holding
from networth_tracker.data.database import Database
from networth_tracker.data.document_store import (
    JsonFileDocumentStore,
    SqliteDocumentStore,
    build_document_store,
)


def _doc():
    return FinancialDocument(
        assets=[Asset(id="a1", amount=Decimal("100.10"), date=date(2024, 1, 1), currency=Currency.PRIMARY,
                      rate_at_entry=Decimal("4.7"), name="USD savings")],
        stock_holdings=[Holding(id="h1", instrument_code="AAPL", quantity=Decimal("10"),
                                avg_cost=Decimal("150"), market_price=Decimal("190"), account="IBKR")],
    )


@pytest.fixture
def json_store(tmp_path):
    return JsonFileDocumentStore(tmp_path / "data" / "doc.json", AppConfig())


@pytest.fixture
def sqlite_store(tmp_path):
    db = Database(str(tmp_path / "doc.db"))
    yield SqliteDocumentStore(db, AppConfig())
    db.close()


class TestJsonFileDocumentStore:
    def test_missing_file_loads_empty_document(self, json_store):
        assert json_store.load() == FinancialDocument()

    def test_save_then_load(self, json_store):
        json_store.save(_doc())
        assert json_store.load() == _doc()

    def test_file_is_camel_case_json_with_string_decimals(self, json_store):
        json_store.save(_doc())
        data = json.loads(json_store.path.read_text(encoding="utf-8"))
        assert data["stockHoldings"][0]["instrumentCode"] == "AAPL"
        assert data["assets"][0]["amount"] == "100.10"
        assert not json_store.path.with_name("doc.json.tmp").exists()

    def test_corrupt_file_is_moved_aside(self, json_store):
        json_store.path.parent.mkdir(parents=True)
        json_store.path.write_text("{truncated", encoding="utf-8")
        assert json_store.load() == FinancialDocument()
        backup = json_store.path.with_name("doc.json.corrupt")
        assert backup.read_text(encoding="utf-8") == "{truncated"
        assert not json_store.path.exists()

    def test_non_object_json(self, json_store):
        json_store.path.parent.mkdir(parents=True)
        json_store.path.write_text("[1, 2]", encoding="utf-8")
        assert json_store.load() == FinancialDocument()

    def test_legacy_file_is_migrated(self, json_store):
        json_store.path.parent.mkdir(parents=True)
        json_store.path.write_text(json.dumps({
            "assets": [{"id": "1", "name": "Cash", "value": 250, "currency": "HKD", "date": "2024-01-01"}],
            "stockHoldings": [{"id": "s", "code": "0700.hk", "quantity": 100, "avgPrice": 300,
                               "currency": "HKD", "stockType": "Stock"}],
        }), encoding="utf-8")
        doc = json_store.load()
        assert doc.assets[0].amount == Decimal("250")
        assert doc.assets[0].currency == Currency.SECONDARY
        assert doc.stock_holdings[0].instrument_code == "0700.HK"
        assert doc.stock_holdings[0].market_price is None


class TestSqliteDocumentStore:
    def test_empty_database(self, sqlite_store):
        assert sqlite_store.load() == FinancialDocument()

    def test_save_then_load(self, sqlite_store):
        sqlite_store.save(_doc())
        assert sqlite_store.load() == _doc()

    def test_save_replaces_previous_document(self, sqlite_store):
        sqlite_store.save(_doc())
        sqlite_store.save(FinancialDocument())
        assert sqlite_store.load().assets == []
        rows = sqlite_store.db.conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]
        assert rows == 1


def test_build_document_store_picks_backend(tmp_path):
    json_cfg = AppConfig(data_file=str(tmp_path / "a.json"))
    assert isinstance(build_document_store(json_cfg), JsonFileDocumentStore)
    sqlite_store = build_document_store(AppConfig(data_file=str(tmp_path / "a.json"), storage="sqlite"))
    assert isinstance(sqlite_store, SqliteDocumentStore)
    assert sqlite_store.db.db_path.endswith("a.db")
    sqlite_store.db.close()
