"""In-memory entity store over the persisted document.

All edits happen on in-memory lists; nothing touches disk until flush().
"""

import dataclasses
from typing import Callable, Generic, Optional, TypeVar

from ..core.exceptions import DuplicateEntityError, EntityNotFoundError
from ..core.models import Account, Asset, Deposit, Expense, FinancialDocument, Holding, Income, Liability
from .document_store import DocumentStore, get_document_store

T = TypeVar("T")


class Collection(Generic[T]):
    """One list of records keyed by id."""

    def __init__(self, label: str, items: list[T]):
        self.label = label
        self._items = items

    def _index(self, id: str) -> int:
        for i, item in enumerate(self._items):
            if item.id == id:  # type: ignore[attr-defined]
                return i
        raise EntityNotFoundError(f"No {self.label} with id '{id}'")

    def get(self, id: str) -> T:
        return self._items[self._index(id)]

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        return next((item for item in self._items if predicate(item)), None)

    def add(self, item: T) -> T:
        if any(existing.id == item.id for existing in self._items):  # type: ignore[attr-defined]
            raise DuplicateEntityError(f"{self.label} '{item.id}' already exists")  # type: ignore[attr-defined]
        self._items.append(item)
        return item

    def update(self, id: str, **changes) -> T:
        """Replace the record with a copy carrying `changes`."""
        i = self._index(id)
        updated = dataclasses.replace(self._items[i], **changes)
        self._items[i] = updated
        return updated

    def replace_all(self, items: list[T]) -> None:
        self._items[:] = items

    def remove(self, id: str) -> T:
        return self._items.pop(self._index(id))

    def __len__(self) -> int:
        return len(self._items)

    def list(self) -> list[T]:
        return list(self._items)


class FinancialStore:
    """Typed collections over one FinancialDocument, saved as a whole."""

    def __init__(self, backend: Optional[DocumentStore] = None):
        self._backend = backend or get_document_store()
        self.document: FinancialDocument = self._backend.load()
        doc = self.document
        self.assets: Collection[Asset] = Collection("asset", doc.assets)
        self.liabilities: Collection[Liability] = Collection("liability", doc.liabilities)
        self.income: Collection[Income] = Collection("income entry", doc.income)
        self.expenses: Collection[Expense] = Collection("expense", doc.expenses)
        self.stock_holdings: Collection[Holding] = Collection("stock holding", doc.stock_holdings)
        self.crypto_holdings: Collection[Holding] = Collection("crypto holding", doc.crypto_holdings)
        self.trading_accounts: Collection[Account] = Collection("trading account", doc.trading_accounts)
        self.crypto_accounts: Collection[Account] = Collection("crypto account", doc.crypto_accounts)
        self.deposits: Collection[Deposit] = Collection("deposit", doc.deposits)

    def flush(self) -> None:
        self._backend.save(self.document)
