"""Tests for the sectioned CSV export."""

import csv
import io
from datetime import date
from decimal import Decimal

from networth_tracker.core.config import AppConfig
from networth_tracker.core.export import write_csv
from networth_tracker.core.models import (
    Asset,
    Currency,
    Expense,
    FinancialDocument,
    Income,
    IncomeFrequency,
    Liability,
)


def _export(doc):
    out = io.StringIO()
    write_csv(doc, out)
    return list(csv.reader(io.StringIO(out.getvalue())))


def test_empty_document_has_all_sections():
    rows = _export(FinancialDocument())
    titles = [r[0] for r in rows if len(r) == 1]
    assert titles == ["ASSETS", "LIABILITIES", "INCOME", "EXPENSES"]


def test_records_and_quoting():
    doc = FinancialDocument(
        assets=[Asset(id="a", amount=Decimal("1200.50"), date=date(2024, 1, 1), name='House, "main"',
                      category="Real Estate")],
        liabilities=[Liability(id="l", amount=Decimal("300"), date=date(2024, 2, 1), name="Card")],
        income=[Income(id="i", amount=Decimal("100"), date=date(2024, 3, 1), source="Side",
                       frequency=IncomeFrequency.WEEKLY, currency=Currency.PRIMARY, rate_at_entry=Decimal("4.7"))],
        expenses=[Expense(id="e", amount=Decimal("20"), date=date(2024, 3, 2), category="Food")],
    )
    rows = _export(doc)
    assert ['House, "main"', "Real Estate", "1200.50", "MYR", "2024-01-01"] in rows
    assert ["Card", "Other", "300", "MYR", "", "2024-02-01"] in rows
    assert ["Side", "100", "USD", "weekly", "2024-03-01"] in rows
    assert ["Food", "20", "MYR", "2024-03-02", ""] in rows


def test_currency_column_follows_configured_codes():
    doc = FinancialDocument(
        expenses=[Expense(id="e", amount=Decimal("8"), date=date(2024, 3, 2), category="Food",
                          currency=Currency.SECONDARY, rate_at_entry=Decimal("0.17"))],
    )
    out = io.StringIO()
    write_csv(doc, out, AppConfig(home_currency="SGD", primary_currency="USD", secondary_currency="EUR"))
    rows = list(csv.reader(io.StringIO(out.getvalue())))
    assert ["Food", "8", "EUR", "2024-03-02", ""] in rows
