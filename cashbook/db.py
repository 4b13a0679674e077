import sqlite3
from datetime import date as dt_date
from pathlib import Path

from .settings import DEFAULT_CURRENCY, DEFAULT_LANGUAGE, Settings


def connect(db_path: str | Path):
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def _table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table_name,),
    ).fetchone()
    return row is not None


def init_db(settings: Settings, today: dt_date | None = None) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    install_date = (today or dt_date.today()).strftime("%d.%m.%Y")
    with connect(settings.db_path) as conn:
        had_days = _table_exists(conn, "days")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              description TEXT NOT NULL,
              amount TEXT NOT NULL,
              transaction_type TEXT NOT NULL CHECK(transaction_type IN ('income','expense')),
              date TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS days (
              date TEXT PRIMARY KEY
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS metadata (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS notes (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              content TEXT NOT NULL
            );
            """
        )
        if not had_days:
            conn.execute(
                """
                INSERT OR IGNORE INTO days(date)
                SELECT DISTINCT date FROM transactions
                """
            )
        conn.executemany(
            "INSERT OR IGNORE INTO metadata(key, value) VALUES (?, ?)",
            [
                ("install_date", install_date),
                ("currency", DEFAULT_CURRENCY),
                ("language", DEFAULT_LANGUAGE),
            ],
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_transactions_date
            ON transactions(date)
            """
        )
