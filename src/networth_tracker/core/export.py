"""Sectioned CSV export of dated entries."""

import csv
from typing import Optional, TextIO

from .config import AppConfig, get_config
from .models import FinancialDocument


def _plain(value) -> str:
    return "" if value is None else str(value)


def write_csv(doc: FinancialDocument, out: TextIO, cfg: Optional[AppConfig] = None) -> None:
    """Write assets, liabilities, income and expenses as four CSV sections.

    Each section is a title row, a header row, the records, then a blank
    separator row. Amounts are written in the entry's own currency, labelled
    with its ISO code.
    """
    cfg = cfg or get_config()
    writer = csv.writer(out, lineterminator="\n")

    writer.writerow(["ASSETS"])
    writer.writerow(["Name", "Category", "Value", "Currency", "Date"])
    for a in doc.assets:
        writer.writerow([a.name, a.category, a.amount, cfg.code_for(a.currency), a.date.isoformat()])
    writer.writerow([])

    writer.writerow(["LIABILITIES"])
    writer.writerow(["Name", "Category", "Amount", "Currency", "Interest Rate", "Date"])
    for li in doc.liabilities:
        writer.writerow([li.name, li.category, li.amount, cfg.code_for(li.currency),
                         _plain(li.interest_rate), li.date.isoformat()])
    writer.writerow([])

    writer.writerow(["INCOME"])
    writer.writerow(["Source", "Amount", "Currency", "Frequency", "Date"])
    for i in doc.income:
        writer.writerow([i.source, i.amount, cfg.code_for(i.currency), i.frequency.value, i.date.isoformat()])
    writer.writerow([])

    writer.writerow(["EXPENSES"])
    writer.writerow(["Category", "Amount", "Currency", "Date", "Description"])
    for e in doc.expenses:
        writer.writerow([e.category, e.amount, cfg.code_for(e.currency), e.date.isoformat(), e.description])
