"""Typed client for the storage backend.

Callers depend on ``LedgerBackend``; ``SqliteBackend`` is the implementation
shipped with the application.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

from . import repo
from .errors import BackendError
from .models import Note, Transaction

logger = logging.getLogger(__name__)


class LedgerBackend(Protocol):
    def list_transactions(self) -> list[Transaction]: ...

    def list_days(self) -> list[str]: ...

    def get_install_date(self) -> str: ...

    def add_transaction(self, txn: Transaction) -> int: ...

    def update_transaction(self, txn: Transaction) -> None: ...

    def delete_transaction(self, txn_id: int) -> None: ...

    def list_notes(self) -> list[Note]: ...

    def add_note(self, content: str) -> int: ...

    def update_note(self, note: Note) -> None: ...

    def delete_note(self, note_id: int) -> None: ...

    def get_currency(self) -> str: ...

    def set_currency(self, currency: str) -> None: ...

    def get_language(self) -> str: ...

    def set_language(self, language: str) -> None: ...


@contextmanager
def _command(name: str) -> Iterator[None]:
    try:
        yield
    except (sqlite3.Error, ValueError) as exc:
        logger.error("backend command %s failed: %s", name, exc)
        raise BackendError(name, str(exc)) from exc


class SqliteBackend:
    def __init__(self, db_path: str | Path):
        self.db_path = db_path

    def list_transactions(self) -> list[Transaction]:
        with _command("get_transactions"):
            return repo.list_txns(self.db_path)

    def list_days(self) -> list[str]:
        with _command("get_days"):
            return repo.list_days(self.db_path)

    def get_install_date(self) -> str:
        with _command("get_install_date"):
            return repo.get_meta(self.db_path, "install_date")

    def add_transaction(self, txn: Transaction) -> int:
        with _command("add_transaction"):
            return repo.create_txn(self.db_path, txn)

    def update_transaction(self, txn: Transaction) -> None:
        with _command("update_transaction"):
            repo.update_txn(self.db_path, txn)

    def delete_transaction(self, txn_id: int) -> None:
        with _command("delete_transaction"):
            repo.delete_txn(self.db_path, txn_id)

    def list_notes(self) -> list[Note]:
        with _command("get_notes"):
            return repo.list_notes(self.db_path)

    def add_note(self, content: str) -> int:
        with _command("add_note"):
            return repo.create_note(self.db_path, content)

    def update_note(self, note: Note) -> None:
        with _command("update_note"):
            if note.id is None:
                raise ValueError("note id required")
            repo.update_note(self.db_path, note.id, note.content)

    def delete_note(self, note_id: int) -> None:
        with _command("delete_note"):
            repo.delete_note(self.db_path, note_id)

    def get_currency(self) -> str:
        with _command("get_currency"):
            return repo.get_meta(self.db_path, "currency")

    def set_currency(self, currency: str) -> None:
        with _command("set_currency"):
            repo.set_meta(self.db_path, "currency", currency)

    def get_language(self) -> str:
        with _command("get_language"):
            return repo.get_meta(self.db_path, "language")

    def set_language(self, language: str) -> None:
        with _command("set_language"):
            repo.set_meta(self.db_path, "language", language)
