import sqlite3
from decimal import Decimal

from .db import connect
from .models import Note, Transaction


def _row_to_txn(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=int(row["id"]),
        date=row["date"],
        description=row["description"],
        amount=Decimal(str(row["amount"])),
        transaction_type=row["transaction_type"],
    )


def _forget_day_if_unused(conn: sqlite3.Connection, date_str: str) -> None:
    remaining = conn.execute(
        "SELECT COUNT(*) AS c FROM transactions WHERE date = ?",
        (date_str,),
    ).fetchone()["c"]
    if int(remaining) == 0:
        conn.execute("DELETE FROM days WHERE date = ?", (date_str,))


def list_txns(db_path) -> list[Transaction]:
    with connect(db_path) as conn:
        cur = conn.execute(
            """
            SELECT id, description, amount, transaction_type, date
            FROM transactions
            ORDER BY id ASC
            """
        )
        return [_row_to_txn(row) for row in cur.fetchall()]


def create_txn(db_path, txn: Transaction) -> int:
    with connect(db_path) as conn:
        cur = conn.execute(
            """
            INSERT INTO transactions(description, amount, transaction_type, date)
            VALUES (?, ?, ?, ?)
            """,
            (txn.description, str(txn.amount), txn.transaction_type, txn.date),
        )
        conn.execute("INSERT OR IGNORE INTO days(date) VALUES (?)", (txn.date,))
        return int(cur.lastrowid)


def update_txn(db_path, txn: Transaction) -> None:
    if txn.id is None:
        raise ValueError("transaction id required")
    with connect(db_path) as conn:
        old = conn.execute(
            "SELECT date FROM transactions WHERE id = ?",
            (txn.id,),
        ).fetchone()
        if old is None:
            raise ValueError("transaction not found")
        conn.execute(
            """
            UPDATE transactions
            SET description = ?, amount = ?, transaction_type = ?, date = ?
            WHERE id = ?
            """,
            (txn.description, str(txn.amount), txn.transaction_type, txn.date, txn.id),
        )
        conn.execute("INSERT OR IGNORE INTO days(date) VALUES (?)", (txn.date,))
        if old["date"] != txn.date:
            _forget_day_if_unused(conn, old["date"])


def delete_txn(db_path, txn_id: int) -> None:
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT date FROM transactions WHERE id = ?",
            (txn_id,),
        ).fetchone()
        if row is None:
            raise ValueError("transaction not found")
        conn.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
        _forget_day_if_unused(conn, row["date"])


def list_days(db_path) -> list[str]:
    with connect(db_path) as conn:
        rows = conn.execute("SELECT date FROM days").fetchall()
    return [row["date"] for row in rows]


def get_meta(db_path, key: str) -> str:
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key = ?",
            (key,),
        ).fetchone()
    if row is None:
        raise ValueError(f"{key} not set")
    return row["value"]


def set_meta(db_path, key: str, value: str) -> None:
    with connect(db_path) as conn:
        conn.execute(
            "INSERT OR REPLACE INTO metadata(key, value) VALUES (?, ?)",
            (key, value),
        )


def list_notes(db_path) -> list[Note]:
    with connect(db_path) as conn:
        rows = conn.execute("SELECT id, content FROM notes ORDER BY id ASC").fetchall()
    return [Note(id=int(row["id"]), content=row["content"]) for row in rows]


def create_note(db_path, content: str) -> int:
    with connect(db_path) as conn:
        cur = conn.execute("INSERT INTO notes(content) VALUES (?)", (content,))
        return int(cur.lastrowid)


def update_note(db_path, note_id: int, content: str) -> None:
    with connect(db_path) as conn:
        cur = conn.execute(
            "UPDATE notes SET content = ? WHERE id = ?",
            (content, note_id),
        )
        if cur.rowcount == 0:
            raise ValueError("note not found")


def delete_note(db_path, note_id: int) -> None:
    with connect(db_path) as conn:
        conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
