"""Tests for the dataclass <-> JSON document mapper."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from networth_tracker.core.exceptions import DocumentError
from networth_tracker.core.models import (
    Asset,
    AssetClass,
    Currency,
    Deposit,
    FinancialDocument,
    Holding,
    InstrumentKind,
    QuoteCurrency,
)
from networth_tracker.data.mapper import DocumentMapper, camel, document_from_dict, document_to_dict

D = Decimal


def test_camel():
    assert camel("instrument_code") == "instrumentCode"
    assert camel("initial_value_home") == "initialValueHome"
    assert camel("id") == "id"


class TestDocumentMapper:
    def test_holding_from_dict(self):
        h = DocumentMapper(Holding).from_dict({
            "id": "h1", "instrumentCode": "0700.HK", "quantity": "100", "avgCost": 300.5,
            "declaredCurrency": "secondary", "quoteCurrency": "secondary", "kind": "Stock",
            "marketPrice": None, "lastUpdated": "2024-06-01T09:30:00Z",
        })
        assert h.quantity == D("100")
        assert h.avg_cost == D("300.5")
        assert h.declared_currency == Currency.SECONDARY
        assert h.quote_currency == QuoteCurrency.SECONDARY_QUOTED
        assert h.market_price is None
        assert h.last_updated.year == 2024
        assert h.account == ""

    def test_holding_to_dict(self):
        h = Holding(id="h1", instrument_code="AAPL", quantity=D("10"), avg_cost=D("150.25"),
                    market_price=D("190"), last_updated=datetime(2024, 6, 1, 9, 30))
        data = DocumentMapper(Holding).to_dict(h)
        assert data["instrumentCode"] == "AAPL"
        assert data["avgCost"] == "150.25"
        assert data["declaredCurrency"] == "primary"
        assert data["kind"] == "Stock"
        assert data["lastUpdated"] == "2024-06-01T09:30:00"
        assert data["rateAtEntry"] is None

    def test_dates_accept_timestamps(self):
        a = DocumentMapper(Asset).from_dict({"id": "a", "amount": 1, "date": "2024-03-05T00:00:00.000Z"})
        assert a.date == date(2024, 3, 5)
        assert a.asset_class == AssetClass.CURRENT

    def test_dict_field(self):
        d = DocumentMapper(Deposit).from_dict({
            "id": "d", "account": "IBKR", "date": "2024-01-01", "amount": "100", "foreignAmounts": {"USD": 21.5},
        })
        assert d.foreign_amounts == {"USD": D("21.5")}
        assert DocumentMapper(Deposit).to_dict(d)["foreignAmounts"] == {"USD": "21.5"}

    def test_missing_required_field(self):
        with pytest.raises(DocumentError):
            DocumentMapper(Asset).from_dict({"id": "a", "date": "2024-01-01"})

    def test_invalid_value(self):
        with pytest.raises(DocumentError):
            DocumentMapper(Asset).from_dict({"id": "a", "amount": "lots", "date": "2024-01-01"})


class TestDocument:
    def test_round_trip_keeps_decimals_exact(self):
        doc = FinancialDocument(
            assets=[Asset(id="a", amount=D("0.1"), date=date(2024, 1, 1), name="x")],
            crypto_holdings=[Holding(id="c", instrument_code="BTC", quantity=D("0.00012345"),
                                     avg_cost=D("30000"), kind=InstrumentKind.CRYPTO)],
        )
        restored = document_from_dict(document_to_dict(doc))
        assert restored == doc

    def test_bad_records_are_dropped(self):
        doc = document_from_dict({
            "assets": [
                {"id": "ok", "amount": "5", "date": "2024-01-01"},
                {"id": "bad", "amount": "5", "date": "not a date"},
            ],
        })
        assert [a.id for a in doc.assets] == ["ok"]

    def test_missing_categories_use_defaults(self):
        doc = document_from_dict({})
        assert doc.expense_categories == FinancialDocument().expense_categories
