import sqlite3
from datetime import date

from cashbook.db import init_db
from cashbook.repo import get_meta, list_days
from cashbook.settings import Settings


def test_init_db_seeds_metadata_once(tmp_path):
    settings = Settings(data_dir=tmp_path, db_path=tmp_path / "t.sqlite")
    init_db(settings, today=date(2024, 3, 5))
    init_db(settings, today=date(2025, 1, 1))

    assert get_meta(settings.db_path, "install_date") == "05.03.2024"
    assert get_meta(settings.db_path, "currency") == "€"
    assert get_meta(settings.db_path, "language") == "en"


def test_init_db_backfills_days_for_legacy_database(tmp_path):
    db_path = tmp_path / "legacy.sqlite"
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE transactions (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          description TEXT NOT NULL,
          amount REAL NOT NULL,
          transaction_type TEXT NOT NULL,
          date TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        INSERT INTO transactions(description, amount, transaction_type, date)
        VALUES ('legacy', -15.5, 'expense', '08.03.2026'),
               ('legacy 2', 20, 'income', '08.03.2026'),
               ('legacy 3', 1, 'income', '09.03.2026')
        """
    )
    conn.commit()
    conn.close()

    settings = Settings(data_dir=tmp_path, db_path=db_path)
    init_db(settings)

    assert sorted(list_days(db_path)) == ["08.03.2026", "09.03.2026"]
