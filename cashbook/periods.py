import calendar
import re
from dataclasses import dataclass
from datetime import date as dt_date
from typing import Iterable

from .formatting import canonical_to_iso, to_canonical
from .models import Transaction

MAX_MONTH_OFFSET = 1200

_INPUT_PATTERNS = {
    "dd/mm/yyyy": re.compile(r"^\d{2}/\d{2}/\d{4}$"),
    "yyyy-mm-dd": re.compile(r"^\d{4}-\d{2}-\d{2}$"),
}


@dataclass(frozen=True)
class DateRange:
    start: str = ""
    end: str = ""

    def contains(self, iso: str) -> bool:
        if not self.start or not self.end:
            return True
        return self.start <= iso <= self.end


def month_range(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(
        start=dt_date(year, month, 1).isoformat(),
        end=dt_date(year, month, last_day).isoformat(),
    )


def current_month_range(today: dt_date | None = None) -> DateRange:
    current = today or dt_date.today()
    return month_range(current.year, current.month)


def today_range(today: dt_date | None = None) -> DateRange:
    current = (today or dt_date.today()).isoformat()
    return DateRange(start=current, end=current)


def _shift(today: dt_date, offset: int) -> tuple[int, int]:
    index = today.year * 12 + (today.month - 1) - offset
    return index // 12, index % 12 + 1


def offset_for(range_start: str, today: dt_date | None = None) -> int:
    current = today or dt_date.today()
    year, month = (int(part) for part in range_start.split("-")[:2])
    return (current.year - year) * 12 + (current.month - month)


@dataclass
class MonthCursor:
    """Months back from the current month; negative values look ahead."""

    offset: int = 0

    def previous(self) -> bool:
        if self.offset >= MAX_MONTH_OFFSET:
            return False
        self.offset += 1
        return True

    def next(self) -> bool:
        if self.offset <= -MAX_MONTH_OFFSET:
            return False
        self.offset -= 1
        return True

    def reset(self) -> None:
        self.offset = 0

    def range(self, today: dt_date | None = None) -> DateRange:
        year, month = _shift(today or dt_date.today(), self.offset)
        return month_range(year, month)


def parse_range_input(text: str, fmt: str) -> str:
    pattern = _INPUT_PATTERNS.get(fmt)
    if not text or pattern is None or not pattern.match(text):
        return ""
    iso = canonical_to_iso(to_canonical(text, fmt))
    try:
        dt_date.fromisoformat(iso)
    except ValueError:
        return ""
    return iso


def filter_by_range(
    transactions: Iterable[Transaction], date_range: DateRange
) -> list[Transaction]:
    return [tx for tx in transactions if date_range.contains(canonical_to_iso(tx.date))]
