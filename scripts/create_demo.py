#!/usr/bin/env python3
"""
Fill the configured data file with demo records to showcase every report.

Household:  MYR home currency, USD brokerage, HKD listings
Includes:   foreign-currency assets, a weekly and a one-time income,
            the same ticker held in two accounts, an unpriced holding,
            a cash sleeve and a crypto wallet.

Prices are set directly so no network access is needed. Run
`nw prices refresh` afterwards to replace them with live quotes.
"""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from networth_tracker.core.models import (
    Account,
    Asset,
    AssetClass,
    Currency,
    Deposit,
    Expense,
    Holding,
    Income,
    IncomeFrequency,
    InstrumentKind,
    Liability,
    QuoteCurrency,
    new_id,
)
from networth_tracker.data.store import FinancialStore

D = Decimal
# Rates recorded on foreign entries, roughly mid-2024
USD_MYR = D("4.70")
HKD_MYR = D("0.60")

store = FinancialStore()

# ── Guard: don't create twice ────────────────────────────────────────────────
if store.assets.list() or store.stock_holdings.list():
    print("Data file already has records. Point data_file at an empty file to create the demo.")
    sys.exit(0)

# ── 1. Assets and liabilities ────────────────────────────────────────────────
ASSETS = [
    ("Maybank savings", "Cash", D("25000"), Currency.HOME, AssetClass.CURRENT, date(2024, 1, 2)),
    ("USD fixed deposit", "Cash", D("5000"), Currency.PRIMARY, AssetClass.CURRENT, date(2024, 2, 1)),
    ("EPF", "Retirement Account", D("180000"), Currency.HOME, AssetClass.FIXED, date(2024, 1, 15)),
    ("Condo", "Real Estate", D("650000"), Currency.HOME, AssetClass.FIXED, date(2023, 6, 1)),
    ("HK brokerage cash", "Investment", D("12000"), Currency.SECONDARY, AssetClass.CURRENT, date(2024, 3, 10)),
]
for name, category, amount, currency, asset_class, on in ASSETS:
    rate = {Currency.PRIMARY: USD_MYR, Currency.SECONDARY: HKD_MYR}.get(currency)
    store.assets.add(Asset(id=new_id(), amount=amount, date=on, currency=currency, rate_at_entry=rate,
                           name=name, category=category, asset_class=asset_class))
print(f"✓ {len(ASSETS)} assets")

store.liabilities.add(Liability(id=new_id(), amount=D("420000"), date=date(2023, 6, 1), name="Condo mortgage",
                                category="Mortgage", interest_rate=D("4.1")))
store.liabilities.add(Liability(id=new_id(), amount=D("3200"), date=date(2024, 3, 20), name="Credit card",
                                category="Credit Card", interest_rate=D("18")))
print("✓ 2 liabilities")

# ── 2. Income and expenses ───────────────────────────────────────────────────
store.income.add(Income(id=new_id(), amount=D("9500"), date=date(2024, 1, 25), source="Salary"))
store.income.add(Income(id=new_id(), amount=D("150"), date=date(2024, 2, 3), source="Tutoring",
                        currency=Currency.PRIMARY, rate_at_entry=USD_MYR, frequency=IncomeFrequency.WEEKLY))
store.income.add(Income(id=new_id(), amount=D("2000"), date=date(2024, 3, 1), source="Bonus",
                        frequency=IncomeFrequency.ONE_TIME))
EXPENSES = [
    ("Housing", D("2100"), date(2024, 3, 1), "Mortgage instalment"),
    ("Food", D("1250"), date(2024, 3, 31), "Groceries and dining"),
    ("Transportation", D("380"), date(2024, 3, 15), ""),
    ("Entertainment", D("45"), date(2024, 2, 10), "Streaming"),
]
for category, amount, on, description in EXPENSES:
    store.expenses.add(Expense(id=new_id(), amount=amount, date=on, category=category, description=description))
print(f"✓ 3 income entries, {len(EXPENSES)} expenses")

# ── 3. Accounts and deposits ─────────────────────────────────────────────────
for name, initial_home, initial_usd in [("IBKR", D("60000"), D("12766")), ("Moomoo", D("20000"), D("4255"))]:
    store.trading_accounts.add(Account(id=new_id(), name=name, initial_value_home=initial_home,
                                       initial_value_foreign=initial_usd))
    store.deposits.add(Deposit(id=new_id(), account=name, date=date(2024, 1, 5), amount=initial_home,
                               foreign_amounts={"USD": initial_usd}))
store.crypto_accounts.add(Account(id=new_id(), name="Ledger", initial_value_home=D("15000")))
print("✓ 2 trading accounts, 1 crypto wallet")

# ── 4. Holdings ──────────────────────────────────────────────────────────────
# (code, qty, avg cost, price, account, declared currency, kind)
STOCKS = [
    ("VOO", D("20"), D("410"), D("505.20"), "IBKR", Currency.PRIMARY, InstrumentKind.FUND),
    ("AAPL", D("30"), D("165"), D("214.10"), "IBKR", Currency.PRIMARY, InstrumentKind.EQUITY),
    ("AAPL", D("10"), D("190"), D("214.10"), "Moomoo", Currency.PRIMARY, InstrumentKind.EQUITY),
    ("0700.HK", D("200"), D("320"), D("368.40"), "Moomoo", Currency.SECONDARY, InstrumentKind.EQUITY),
    ("NVDA", D("15"), D("95"), None, "Moomoo", Currency.PRIMARY, InstrumentKind.EQUITY),
]
for code, qty, cost, price, account, currency, kind in STOCKS:
    store.stock_holdings.add(Holding(
        id=new_id(), instrument_code=code, quantity=qty, avg_cost=cost, account=account,
        declared_currency=currency, quote_currency=QuoteCurrency.for_declared(currency), kind=kind,
        market_price=price, rate_at_entry=USD_MYR,
    ))
store.stock_holdings.add(Holding.cash_sleeve(new_id(), D("3500"), "IBKR", Currency.PRIMARY, USD_MYR))
print(f"✓ {len(STOCKS)} stock holdings + 1 cash sleeve (NVDA left unpriced)")

for code, qty, cost, price in [("BTC", D("0.12"), D("42000"), D("64000")), ("ETH", D("1.5"), D("2900"), D("3400"))]:
    store.crypto_holdings.add(Holding(
        id=new_id(), instrument_code=code, quantity=qty, avg_cost=cost, account="Ledger",
        kind=InstrumentKind.CRYPTO, market_price=price, rate_at_entry=USD_MYR,
    ))
print("✓ 2 crypto holdings")

store.flush()
print("\nDone. Try: nw stats summary, nw holdings grouped, nw accounts list")
