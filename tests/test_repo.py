from decimal import Decimal

import pytest

from cashbook.backend import SqliteBackend
from cashbook.db import init_db
from cashbook.errors import BackendError
from cashbook.models import Note, Transaction
from cashbook.repo import create_txn, delete_txn, list_days, list_txns, update_txn
from cashbook.settings import Settings


def _settings(tmp_path) -> Settings:
    settings = Settings(data_dir=tmp_path, db_path=tmp_path / "t.sqlite")
    init_db(settings)
    return settings


def _txn(day: str, amount: str = "-12.34", kind: str = "expense") -> Transaction:
    return Transaction(date=day, description="lunch", amount=Decimal(amount), transaction_type=kind)


def test_create_list_delete(tmp_path):
    settings = _settings(tmp_path)

    tid = create_txn(settings.db_path, _txn("25.02.2026"))
    rows = list_txns(settings.db_path)
    assert len(rows) == 1
    assert rows[0].id == tid
    assert rows[0].amount == Decimal("-12.34")
    assert list_days(settings.db_path) == ["25.02.2026"]

    delete_txn(settings.db_path, tid)
    assert list_txns(settings.db_path) == []
    assert list_days(settings.db_path) == []


def test_day_stays_while_other_transactions_remain(tmp_path):
    settings = _settings(tmp_path)
    first = create_txn(settings.db_path, _txn("25.02.2026"))
    create_txn(settings.db_path, _txn("25.02.2026", "5", "income"))

    delete_txn(settings.db_path, first)
    assert list_days(settings.db_path) == ["25.02.2026"]


def test_update_moves_day(tmp_path):
    settings = _settings(tmp_path)
    tid = create_txn(settings.db_path, _txn("25.02.2026"))

    moved = Transaction(
        id=tid, date="01.03.2026", description="dinner", amount=Decimal("-20"), transaction_type="expense"
    )
    update_txn(settings.db_path, moved)

    assert list_txns(settings.db_path) == [moved]
    assert list_days(settings.db_path) == ["01.03.2026"]


def test_update_unknown_transaction_fails(tmp_path):
    settings = _settings(tmp_path)
    with pytest.raises(ValueError, match="transaction not found"):
        update_txn(settings.db_path, Transaction(id=99, date="01.03.2026", description="x", amount=Decimal("1"), transaction_type="income"))


def test_backend_reports_failed_commands(tmp_path):
    backend = SqliteBackend(_settings(tmp_path).db_path)

    with pytest.raises(BackendError) as excinfo:
        backend.delete_transaction(42)
    assert excinfo.value.command == "delete_transaction"

    with pytest.raises(BackendError):
        backend.update_note(Note(id=5, content="missing"))


def test_backend_settings_and_notes(tmp_path):
    backend = SqliteBackend(_settings(tmp_path).db_path)

    backend.set_currency("$")
    backend.set_language("de")
    assert backend.get_currency() == "$"
    assert backend.get_language() == "de"

    note_id = backend.add_note("pay rent")
    backend.update_note(Note(id=note_id, content="pay rent on the 1st"))
    assert backend.list_notes() == [Note(id=note_id, content="pay rent on the 1st")]

    backend.delete_note(note_id)
    assert backend.list_notes() == []


def test_backend_on_unreadable_database_raises_backend_error(tmp_path):
    backend = SqliteBackend(tmp_path / "missing-dir" / "t.sqlite")
    with pytest.raises(BackendError):
        backend.list_transactions()
