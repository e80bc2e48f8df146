"""Whole-document persistence backends.

The tracker reads and writes its data as one document. Two backends are
available: a JSON file (the default) and a single-row SQLite table. Both
run the raw dict through migration before mapping it to model objects.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..core.config import AppConfig, get_config
from ..core.exceptions import DocumentError
from ..core.models import FinancialDocument
from .database import Database
from .mapper import document_from_dict, document_to_dict
from .migration import migrate_document

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    def __init__(self, cfg: Optional[AppConfig] = None):
        self.cfg = cfg or get_config()

    @abstractmethod
    def load_raw(self) -> Optional[dict]:
        """Raw stored dict, or None when nothing has been saved yet."""

    @abstractmethod
    def save_raw(self, data: dict) -> None:
        ...

    def load(self) -> FinancialDocument:
        raw = self.load_raw()
        if raw is None:
            return FinancialDocument()
        return document_from_dict(migrate_document(raw, self.cfg))

    def save(self, doc: FinancialDocument) -> None:
        self.save_raw(document_to_dict(doc))


class JsonFileDocumentStore(DocumentStore):
    """One JSON file, written atomically via a temp file and rename."""

    def __init__(self, path: Path, cfg: Optional[AppConfig] = None):
        super().__init__(cfg)
        self.path = Path(path)

    def load_raw(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            backup = self.path.with_name(self.path.name + ".corrupt")
            logger.warning("Cannot parse %s (%s); moved it to %s", self.path, e, backup)
            os.replace(self.path, backup)
            return None
        if not isinstance(data, dict):
            logger.warning("%s does not hold a JSON object, starting empty", self.path)
            return None
        return data

    def save_raw(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise DocumentError(f"Failed to write {self.path}: {e}") from e


class SqliteDocumentStore(DocumentStore):
    DOCUMENT_NAME = "financial-data"

    def __init__(self, db: Database, cfg: Optional[AppConfig] = None):
        super().__init__(cfg)
        self.db = db
        self.db.initialize()

    def load_raw(self) -> Optional[dict]:
        body = self.db.read_document(self.DOCUMENT_NAME)
        if body is None:
            return None
        try:
            data = json.loads(body)
        except ValueError as e:
            logger.warning("Stored document in %s is unreadable (%s), starting empty", self.db.db_path, e)
            return None
        return data if isinstance(data, dict) else None

    def save_raw(self, data: dict) -> None:
        self.db.write_document(self.DOCUMENT_NAME, json.dumps(data, ensure_ascii=False))


def build_document_store(cfg: AppConfig) -> DocumentStore:
    path = cfg.data_path()
    if cfg.storage == "sqlite":
        return SqliteDocumentStore(Database(str(path.with_suffix(".db"))), cfg)
    return JsonFileDocumentStore(path, cfg)


# Global store instance, configured at app startup
_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = build_document_store(get_config())
    return _store


def set_document_store(store: Optional[DocumentStore]) -> None:
    global _store
    if isinstance(_store, SqliteDocumentStore) and _store is not store:
        _store.db.close()
    _store = store
