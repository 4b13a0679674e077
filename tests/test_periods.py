from datetime import date
from decimal import Decimal

from cashbook.models import Transaction
from cashbook.periods import (
    DateRange,
    MonthCursor,
    current_month_range,
    filter_by_range,
    month_range,
    offset_for,
    parse_range_input,
    today_range,
)


def _txn(day: str, amount: str = "1") -> Transaction:
    return Transaction(
        date=day, description=day, amount=Decimal(amount), transaction_type="income"
    )


def test_month_range_handles_leap_february():
    assert month_range(2024, 2) == DateRange("2024-02-01", "2024-02-29")
    assert month_range(2023, 2) == DateRange("2023-02-01", "2023-02-28")


def test_current_and_today_ranges():
    today = date(2024, 12, 15)
    assert current_month_range(today) == DateRange("2024-12-01", "2024-12-31")
    assert today_range(today) == DateRange("2024-12-15", "2024-12-15")


def test_month_cursor_moves_across_year_boundaries():
    today = date(2024, 1, 15)
    cursor = MonthCursor()

    assert cursor.previous()
    assert cursor.range(today) == DateRange("2023-12-01", "2023-12-31")

    cursor.next()
    cursor.next()
    assert cursor.offset == -1
    assert cursor.range(today) == DateRange("2024-02-01", "2024-02-29")

    cursor.reset()
    assert cursor.range(today) == DateRange("2024-01-01", "2024-01-31")


def test_month_cursor_is_bounded():
    back = MonthCursor(offset=1200)
    assert back.previous() is False
    assert back.offset == 1200

    ahead = MonthCursor(offset=-1200)
    assert ahead.next() is False
    assert ahead.offset == -1200


def test_offset_for_range_start():
    assert offset_for("2023-11-01", date(2024, 1, 15)) == 2
    assert offset_for("2024-03-01", date(2024, 1, 15)) == -2


def test_parse_range_input():
    assert parse_range_input("31/12/2024", "dd/mm/yyyy") == "2024-12-31"
    assert parse_range_input("2024-12-31", "yyyy-mm-dd") == "2024-12-31"
    assert parse_range_input("31/02/2024", "dd/mm/yyyy") == ""
    assert parse_range_input("2024-1", "yyyy-mm-dd") == ""
    assert parse_range_input("", "dd/mm/yyyy") == ""


def test_filter_by_range_is_inclusive():
    txs = [_txn("31.01.2024"), _txn("01.02.2024"), _txn("29.02.2024"), _txn("01.03.2024")]
    selected = filter_by_range(txs, month_range(2024, 2))
    assert [tx.date for tx in selected] == ["01.02.2024", "29.02.2024"]


def test_filter_without_bounds_keeps_everything():
    txs = [_txn("31.01.2024"), _txn("01.03.2024")]
    assert filter_by_range(txs, DateRange()) == txs
