"""Upgrade raw persisted documents to the current shape.

Older data files used ISO currency codes ("USD"), per-collection field
names (stock "code", crypto "symbol", "avgPrice", "exchangeRate", ...) and
per-currency deposit columns. Anything missing gets a default; nothing in
here raises on malformed input.
"""

import copy
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.config import AppConfig
from ..core.models import (
    DEFAULT_ASSET_CATEGORIES,
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_LIABILITY_CATEGORIES,
    Currency,
    InstrumentKind,
    QuoteCurrency,
    new_id,
)

logger = logging.getLogger(__name__)

ENTRY_COLLECTIONS = ("assets", "liabilities", "income", "expenses")
HOLDING_COLLECTIONS = ("stockHoldings", "cryptoHoldings")
ACCOUNT_COLLECTIONS = ("tradingAccounts", "cryptoAccounts")

# Renames applied before anything else: legacy key -> current key
_RENAMES: dict[str, dict[str, str]] = {
    "assets": {"value": "amount", "exchangeRate": "rateAtEntry", "assetType": "assetClass"},
    "liabilities": {"exchangeRate": "rateAtEntry"},
    "income": {"exchangeRate": "rateAtEntry"},
    "expenses": {"exchangeRate": "rateAtEntry"},
    "stockHoldings": {
        "code": "instrumentCode",
        "avgPrice": "avgCost",
        "stockType": "kind",
        "currency": "declaredCurrency",
        "exchangeRate": "rateAtEntry",
    },
    "cryptoHoldings": {
        "symbol": "instrumentCode",
        "avgPrice": "avgCost",
        "currency": "declaredCurrency",
        "exchangeRate": "rateAtEntry",
    },
}

_DEPOSIT_FIELDS = {"id", "account", "date", "amount", "foreignAmounts"}

_CATEGORY_DEFAULTS = {
    "assetCategories": DEFAULT_ASSET_CATEGORIES,
    "liabilityCategories": DEFAULT_LIABILITY_CATEGORIES,
    "expenseCategories": DEFAULT_EXPENSE_CATEGORIES,
}

_KIND_ALIASES = {
    "stock": InstrumentKind.EQUITY,
    "equity": InstrumentKind.EQUITY,
    "etf": InstrumentKind.FUND,
    "fund": InstrumentKind.FUND,
    "cash": InstrumentKind.CASH_SLEEVE,
    "crypto": InstrumentKind.CRYPTO,
}


def _rename(record: dict, renames: dict[str, str]) -> None:
    for old, new in renames.items():
        if old != new and old in record and new not in record:
            record[new] = record.pop(old)


def _currency_role(raw, cfg: AppConfig, default: Currency) -> Currency:
    """Accept either a role value ("primary") or an ISO code ("USD")."""
    if raw is None or raw == "":
        return default
    text = str(raw).strip()
    try:
        return Currency(text.lower())
    except ValueError:
        pass
    role = cfg.role_for(text)
    if role is None:
        logger.warning("Unsupported currency %r, treating as %s", raw, default.value)
        return default
    return role


def _kind(raw, default: InstrumentKind) -> InstrumentKind:
    if raw is None:
        return default
    return _KIND_ALIASES.get(str(raw).strip().lower(), default)


def _ensure_id(record: dict) -> None:
    if not record.get("id"):
        record["id"] = new_id()
    else:
        record["id"] = str(record["id"])


def _migrate_entry(record: dict, collection: str, cfg: AppConfig) -> None:
    _rename(record, _RENAMES[collection])
    _ensure_id(record)
    currency = _currency_role(record.get("currency"), cfg, Currency.HOME)
    record["currency"] = currency.value
    if currency == Currency.HOME:
        # rate_at_entry is only kept for foreign entries
        record.pop("rateAtEntry", None)
    if collection == "assets" and not record.get("assetClass"):
        record["assetClass"] = "current"


def _secondary_rate_to_primary(record: dict, cfg: AppConfig) -> None:
    """Legacy secondary holdings kept a secondary -> home rate; convert it to primary -> home."""
    raw = record.get("rateAtEntry")
    if raw is None:
        return
    try:
        rate = Decimal(str(raw))
    except InvalidOperation:
        rate = None
    if rate is None or not rate.is_finite() or rate <= 0:
        logger.warning("Dropping unusable legacy rate %r on holding %s", raw, record.get("id"))
        record.pop("rateAtEntry")
        return
    record["rateAtEntry"] = str(rate * cfg.fallback_primary_to_secondary)


def _migrate_holding(record: dict, collection: str, cfg: AppConfig) -> None:
    legacy_rate = "exchangeRate" in record and "rateAtEntry" not in record
    _rename(record, _RENAMES[collection])
    _ensure_id(record)
    record["instrumentCode"] = str(record.get("instrumentCode") or "").strip().upper()
    record.setdefault("account", "")

    declared = _currency_role(record.get("declaredCurrency"), cfg, Currency.PRIMARY)
    if collection == "cryptoHoldings":
        record["kind"] = InstrumentKind.CRYPTO.value
        record["quoteCurrency"] = QuoteCurrency.PRIMARY_QUOTED.value
    else:
        kind = _kind(record.get("kind"), InstrumentKind.EQUITY)
        record["kind"] = kind.value
        if record.get("quoteCurrency") not in {q.value for q in QuoteCurrency}:
            record["quoteCurrency"] = QuoteCurrency.for_declared(declared).value
    record["declaredCurrency"] = declared.value
    if legacy_rate and declared == Currency.SECONDARY:
        _secondary_rate_to_primary(record, cfg)

    if record["kind"] == InstrumentKind.CASH_SLEEVE.value:
        record.setdefault("quantity", "1")
        if record.get("marketPrice") is None and record.get("avgCost") is not None:
            record["marketPrice"] = record["avgCost"]
        if not record.get("instrumentCode"):
            record["instrumentCode"] = "CASH"


def _migrate_account(record: dict, cfg: AppConfig) -> None:
    _ensure_id(record)
    _rename(record, {
        f"initial{cfg.home_currency.upper()}": "initialValueHome",
        f"initial{cfg.primary_currency.upper()}": "initialValueForeign",
    })


def _migrate_deposit(record: dict) -> None:
    _ensure_id(record)
    foreign = dict(record.get("foreignAmounts") or {})
    for key in [k for k in record if k not in _DEPOSIT_FIELDS]:
        # Legacy per-currency columns such as "usd" or "sgd"
        if len(key) == 3 and key.isalpha() and isinstance(record[key], (int, float, str)):
            foreign[key.upper()] = record.pop(key)
    record["foreignAmounts"] = foreign


def _records(data: dict, key: str) -> list:
    value = data.get(key)
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Ignoring malformed '%s' collection", key)
        return []
    return [r for r in value if isinstance(r, dict)]


def migrate_document(raw: Optional[dict], cfg: AppConfig) -> dict:
    """Return an upgraded copy of a raw document dict (input is not modified)."""
    data = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    for key in ENTRY_COLLECTIONS:
        records = _records(data, key)
        for record in records:
            _migrate_entry(record, key, cfg)
        data[key] = records

    for key in HOLDING_COLLECTIONS:
        records = _records(data, key)
        for record in records:
            _migrate_holding(record, key, cfg)
        data[key] = records

    for key in ACCOUNT_COLLECTIONS:
        records = _records(data, key)
        for record in records:
            _migrate_account(record, cfg)
        data[key] = records

    deposits = _records(data, "deposits")
    for record in deposits:
        _migrate_deposit(record)
    data["deposits"] = deposits

    for key, defaults in _CATEGORY_DEFAULTS.items():
        if not isinstance(data.get(key), list) or not data[key]:
            data[key] = list(defaults)

    return data
