"""Dataclass <-> JSON dict mapping for the persisted document."""

import dataclasses
import logging
import typing
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Generic, TypeVar

from ..core.exceptions import DocumentError
from ..core.models import (
    Account,
    Asset,
    Deposit,
    Expense,
    FinancialDocument,
    Holding,
    Income,
    Liability,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _parse_date(v) -> date:
    if isinstance(v, date):
        return v
    return date.fromisoformat(str(v)[:10])


def _parse_datetime(v) -> datetime:
    if isinstance(v, datetime):
        return v
    return datetime.fromisoformat(str(v).replace("Z", "+00:00"))


class DocumentMapper(Generic[T]):
    """Maps JSON dicts (camelCase keys) to dataclass instances using type hints."""

    def __init__(self, model_class: type[T]):
        self._model_class = model_class
        self._fields = dataclasses.fields(model_class)  # type: ignore[arg-type]
        self._hints = typing.get_type_hints(model_class)
        self._converters = {
            f.name: self._get_converter(self._hints.get(f.name))
            for f in self._fields
        }

    def _get_converter(self, hint):
        if hint is None:
            return None

        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        # Optional[X] = Union[X, None]
        if origin is typing.Union:
            non_none = [a for a in args if a is not type(None)]
            if len(non_none) == 1:
                inner_conv = self._get_converter(non_none[0])
                if inner_conv is None:
                    return None
                return lambda v, c=inner_conv: c(v) if v is not None else None
            return None

        if origin is dict:
            value_conv = self._get_converter(args[1]) if len(args) == 2 else None
            if value_conv is None:
                return dict
            return lambda v, c=value_conv: {str(k): c(x) for k, x in v.items()}

        if hint is Decimal:
            return lambda v: Decimal(str(v))
        if hint is datetime:
            return _parse_datetime
        if hint is date:
            return _parse_date
        if hint is int:
            return int
        if hint is str:
            return str
        if isinstance(hint, type) and issubclass(hint, Enum):
            return lambda v, cls=hint: cls(v)

        return None

    def from_dict(self, data: dict) -> T:
        kwargs: dict = {}
        for f in self._fields:
            key = camel(f.name)
            raw = data.get(key)
            if raw is None:
                # Absent or null: let the dataclass default apply
                if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:  # type: ignore[misc]
                    raise DocumentError(f"{self._model_class.__name__} record missing '{key}'")
                continue
            conv = self._converters.get(f.name)
            try:
                kwargs[f.name] = conv(raw) if conv else raw
            except (ValueError, TypeError, InvalidOperation, AttributeError) as e:
                raise DocumentError(
                    f"{self._model_class.__name__} field '{key}' has invalid value {raw!r}"
                ) from e
        return self._model_class(**kwargs)

    @staticmethod
    def _serialize(val):
        """Convert Python value -> JSON-compatible value."""
        if val is None:
            return None
        if isinstance(val, Decimal):
            return str(val)
        if isinstance(val, (datetime, date)):
            return val.isoformat()
        if isinstance(val, Enum):
            return val.value
        if isinstance(val, dict):
            return {k: DocumentMapper._serialize(v) for k, v in val.items()}
        return val

    def to_dict(self, obj: T) -> dict:
        return {camel(f.name): self._serialize(getattr(obj, f.name)) for f in self._fields}


# Document collection key -> record type
COLLECTIONS: dict[str, type] = {
    "assets": Asset,
    "liabilities": Liability,
    "income": Income,
    "expenses": Expense,
    "stock_holdings": Holding,
    "crypto_holdings": Holding,
    "trading_accounts": Account,
    "crypto_accounts": Account,
    "deposits": Deposit,
}
CATEGORY_LISTS = ("asset_categories", "liability_categories", "expense_categories")

_MAPPERS = {model: DocumentMapper(model) for model in set(COLLECTIONS.values())}


def mapper_for(model: type) -> DocumentMapper:
    return _MAPPERS[model]


def document_from_dict(data: dict) -> FinancialDocument:
    """Build a FinancialDocument from a migrated dict.

    Records that still cannot be mapped are dropped with a warning rather
    than failing the whole load.
    """
    doc = FinancialDocument()
    for name, model in COLLECTIONS.items():
        records = []
        for raw in data.get(camel(name)) or []:
            try:
                records.append(mapper_for(model).from_dict(raw))
            except DocumentError as e:
                logger.warning("Dropping unreadable %s record: %s", name, e)
        setattr(doc, name, records)
    for name in CATEGORY_LISTS:
        values = data.get(camel(name))
        if values:
            setattr(doc, name, [str(v) for v in values])
    return doc


def document_to_dict(doc: FinancialDocument) -> dict:
    data: dict = {}
    for name, model in COLLECTIONS.items():
        data[camel(name)] = [mapper_for(model).to_dict(r) for r in getattr(doc, name)]
    for name in CATEGORY_LISTS:
        data[camel(name)] = list(getattr(doc, name))
    return data
