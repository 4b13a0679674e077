from decimal import Decimal

from cashbook.aggregate import (
    archive_months,
    archive_years,
    axis_ticks,
    build_chart_series,
    build_export_request,
    compute_totals,
    filter_archive,
    group_by_month,
    monthly_totals,
    sort_by_date_desc,
    split_by_type,
    summarize_export,
)
from cashbook.models import ExportRequest, MonthGroup, Transaction


def _txn(day: str, amount: str, kind: str, description: str = "", txn_id=None) -> Transaction:
    return Transaction(
        id=txn_id,
        date=day,
        description=description or f"{kind} {day}",
        amount=Decimal(amount),
        transaction_type=kind,
    )


def _ledger() -> list[Transaction]:
    return [
        _txn("03.03.2024", "1000", "income", "salary"),
        _txn("15.03.2024", "-45.10", "expense", "groceries"),
        _txn("02.07.2024", "200.50", "income", "refund"),
        _txn("20.07.2024", "-80", "expense", "train"),
        _txn("21.07.2024", "-19.99", "expense", "books"),
        _txn("11.11.2023", "300", "income", "bonus"),
    ]


def test_sort_is_descending_and_stable_for_equal_dates():
    txs = [
        _txn("01.05.2024", "1", "income", "a"),
        _txn("01.05.2024", "2", "income", "b"),
        _txn("02.05.2024", "3", "income", "newest"),
        _txn("01.05.2024", "4", "income", "c"),
    ]
    ordered = sort_by_date_desc(txs)
    assert [tx.description for tx in ordered] == ["newest", "a", "b", "c"]


def test_sort_uses_given_key():
    txs = [_txn("01.05.2024", "1", "income", "a"), _txn("02.05.2024", "1", "income", "b")]
    ordered = sort_by_date_desc(txs, sort_key=lambda d: "same")
    assert [tx.description for tx in ordered] == ["a", "b"]


def test_split_keeps_order_per_side():
    ordered = sort_by_date_desc(_ledger())
    income, expenses = split_by_type(ordered)
    assert [tx.description for tx in income] == ["refund", "salary", "bonus"]
    assert [tx.description for tx in expenses] == ["books", "train", "groceries"]


def test_totals_use_absolute_values():
    totals = compute_totals(
        [_txn("01.01.2024", "10.005", "income"), _txn("02.01.2024", "-2.5", "expense"), _txn("03.01.2024", "4", "expense")]
    )
    assert totals.income == Decimal("10.005")
    assert totals.expenses == Decimal("6.5")
    assert totals.net == Decimal("3.505")


def test_group_by_month_orders_year_then_month():
    groups = group_by_month(_ledger())
    assert [(g.year, g.month) for g in groups] == [("2023", "11"), ("2024", "03"), ("2024", "07")]
    assert len(groups[2].transactions) == 3


def test_export_request_for_year_and_month():
    year = build_export_request(_ledger(), "2024")
    assert [g.month for g in year.months] == ["03", "07"]
    assert year.filename == "archive_2024.pdf"

    month = build_export_request(_ledger(), "2024", "7")
    assert [g.month for g in month.months] == ["07"]
    assert month.filename == "archive_2024_M7.pdf"

    padded = build_export_request(_ledger(), "2024", "07")
    assert padded.filename == "archive_2024_M7.pdf"


def test_month_totals_add_up_to_scope_totals():
    request = build_export_request(_ledger(), "2024")
    reports = summarize_export(request)
    scope = compute_totals(tx for tx in _ledger() if tx.date.endswith("2024"))

    assert sum(r.totals.income for r in reports) == scope.income
    assert sum(r.totals.expenses for r in reports) == scope.expenses


def test_empty_months_are_dropped():
    request = ExportRequest(
        year="2024",
        months=(
            MonthGroup("2024", "03", (_txn("03.03.2024", "1", "income"),)),
            MonthGroup("2024", "05", ()),
            MonthGroup("2024", "07", (_txn("02.07.2024", "-1", "expense"),)),
        ),
    )
    reports = summarize_export(request)
    assert [r.month for r in reports] == ["03", "07"]


def test_chart_series_is_ascending_with_markers():
    txs = [
        _txn("02.03.2024", "-5", "expense", "coffee"),
        _txn("01.03.2024", "100", "income", "gift"),
        _txn("02.03.2024", "20", "income", "sale"),
        _txn("03.03.2024", "-7", "expense", "lunch"),
    ]
    points = build_chart_series(txs)
    assert [p.date for p in points] == ["01.03.2024", "02.03.2024", "03.03.2024"]
    assert [p.marker for p in points] == ["income", "mixed", "expense"]
    assert points[1].income == Decimal("20")
    assert points[1].expenses == Decimal("5")
    assert points[1].expense_descriptions == ("coffee",)


def test_axis_ticks_span_the_largest_daily_sum():
    points = build_chart_series(
        [_txn("01.03.2024", "2000", "income"), _txn("02.03.2024", "-300", "expense")]
    )
    assert axis_ticks(points) == [Decimal(v) for v in ("0", "500", "1000", "1500", "2000")]
    assert axis_ticks([]) == [Decimal(0)]


def test_monthly_totals_keys():
    totals = monthly_totals(_ledger())
    assert list(totals) == ["2023-11", "2024-03", "2024-07"]
    assert totals["2024-07"].expenses == Decimal("99.99")


def test_archive_years_and_months():
    days = ["03.03.2024", "11.11.2023", "02.07.2024", "15.03.2024"]
    assert archive_years(days) == ["2023", "2024"]
    assert archive_months(days) == ["03", "07", "11"]


def test_filter_archive_selection():
    groups = group_by_month(_ledger())

    assert filter_archive(groups, "", "All") == []

    everything = filter_archive(groups, "All", "All")
    assert [year for year, _ in everything] == ["2024", "2023"]

    july = filter_archive(groups, "All", "07")
    assert [(year, [g.month for g in gs]) for year, gs in july] == [("2024", ["07"])]

    only_2023 = filter_archive(groups, "2023", "All")
    assert [(year, [g.month for g in gs]) for year, gs in only_2023] == [("2023", ["11"])]
