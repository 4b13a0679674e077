"""Grouping and totals over transaction snapshots.

Everything here is a pure transformation of the list handed in by the caller;
nothing is cached between calls.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from .formatting import date_sort_key, split_canonical
from .models import (
    ChartPoint,
    ExportRequest,
    MonthGroup,
    MonthReport,
    Totals,
    Transaction,
)

SortKey = Callable[[str], str]

ALL = "All"


def sort_by_date_desc(
    transactions: Iterable[Transaction], sort_key: SortKey = date_sort_key
) -> list[Transaction]:
    # sorted() stays stable with reverse=True, so equal dates keep input order
    return sorted(transactions, key=lambda tx: sort_key(tx.date), reverse=True)


def split_by_type(
    transactions: Iterable[Transaction],
) -> tuple[list[Transaction], list[Transaction]]:
    income: list[Transaction] = []
    expenses: list[Transaction] = []
    for tx in transactions:
        if tx.transaction_type == "income":
            income.append(tx)
        elif tx.transaction_type == "expense":
            expenses.append(tx)
    return income, expenses


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    income = Decimal("0")
    expenses = Decimal("0")
    for tx in transactions:
        if tx.transaction_type == "income":
            income += tx.magnitude
        elif tx.transaction_type == "expense":
            expenses += tx.magnitude
    return Totals(income=income, expenses=expenses)


def group_by_month(transactions: Iterable[Transaction]) -> list[MonthGroup]:
    buckets: dict[tuple[str, str], list[Transaction]] = defaultdict(list)
    for tx in transactions:
        _, month, year = split_canonical(tx.date)
        buckets[(year, month)].append(tx)
    return [
        MonthGroup(year=year, month=month, transactions=tuple(buckets[(year, month)]))
        for year, month in sorted(buckets, key=lambda k: (k[0], int(k[1])))
    ]


def build_export_request(
    transactions: Iterable[Transaction], year: str, month: str | None = None
) -> ExportRequest:
    """Collect the month groups of ``year`` (or one month of it) for export."""

    wanted_month = int(month) if month else None
    months = tuple(
        group
        for group in group_by_month(transactions)
        if group.year == year
        and (wanted_month is None or group.month_number == wanted_month)
    )
    return ExportRequest(year=year, month=month or None, months=months)


def summarize_month(group: MonthGroup, sort_key: SortKey = date_sort_key) -> MonthReport:
    ordered = sort_by_date_desc(group.transactions, sort_key)
    income, expenses = split_by_type(ordered)
    return MonthReport(
        year=group.year,
        month=group.month,
        income=tuple(income),
        expenses=tuple(expenses),
        totals=compute_totals(ordered),
    )


def summarize_export(
    request: ExportRequest, sort_key: SortKey = date_sort_key
) -> list[MonthReport]:
    return [
        summarize_month(group, sort_key)
        for group in request.months
        if group.transactions
    ]


def build_chart_series(transactions: Iterable[Transaction]) -> list[ChartPoint]:
    income: dict[str, Decimal] = defaultdict(Decimal)
    expenses: dict[str, Decimal] = defaultdict(Decimal)
    income_notes: dict[str, list[str]] = defaultdict(list)
    expense_notes: dict[str, list[str]] = defaultdict(list)
    dates: set[str] = set()

    for tx in transactions:
        dates.add(tx.date)
        if tx.transaction_type == "income":
            income[tx.date] += tx.magnitude
            income_notes[tx.date].append(tx.description)
        else:
            expenses[tx.date] += tx.magnitude
            expense_notes[tx.date].append(tx.description)

    return [
        ChartPoint(
            date=d,
            income=income[d],
            expenses=expenses[d],
            income_descriptions=tuple(income_notes[d]),
            expense_descriptions=tuple(expense_notes[d]),
        )
        for d in sorted(dates, key=date_sort_key)
    ]


def axis_ticks(points: Sequence[ChartPoint], steps: int = 4) -> list[Decimal]:
    """Evenly spaced value-axis ticks from zero up to the largest daily sum."""

    top = max((max(p.income, p.expenses) for p in points), default=Decimal(0))
    if top == 0:
        return [Decimal(0)]
    return [top * i / steps for i in range(steps + 1)]


def monthly_totals(transactions: Iterable[Transaction]) -> dict[str, Totals]:
    return {
        f"{group.year}-{group.month}": compute_totals(group.transactions)
        for group in group_by_month(transactions)
    }


def archive_years(days: Iterable[str]) -> list[str]:
    return sorted({split_canonical(day)[2] for day in days})


def archive_months(days: Iterable[str]) -> list[str]:
    return sorted({split_canonical(day)[1] for day in days}, key=int)


def filter_archive(
    groups: Sequence[MonthGroup], year: str, month: str
) -> list[tuple[str, list[MonthGroup]]]:
    """Select archive groups; ``"All"`` matches any year or month.

    An empty selector means nothing has been chosen yet and yields nothing.
    Years come back newest first.
    """

    if not year or not month:
        return []
    by_year: dict[str, list[MonthGroup]] = defaultdict(list)
    for group in groups:
        if year != ALL and group.year != year:
            continue
        if month != ALL and group.month_number != int(month):
            continue
        by_year[group.year].append(group)
    return [(y, by_year[y]) for y in sorted(by_year, reverse=True)]
