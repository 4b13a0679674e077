from dataclasses import dataclass, field
from decimal import Decimal

TRANSACTION_TYPES = ("income", "expense")


@dataclass(frozen=True)
class Transaction:
    date: str
    description: str
    amount: Decimal
    transaction_type: str
    id: int | None = None

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)

    @property
    def is_income(self) -> bool:
        return self.transaction_type == "income"


@dataclass(frozen=True)
class Note:
    content: str
    id: int | None = None


@dataclass(frozen=True)
class MonthGroup:
    year: str
    month: str
    transactions: tuple[Transaction, ...] = ()

    @property
    def month_number(self) -> int:
        return int(self.month)


@dataclass(frozen=True)
class ExportRequest:
    year: str
    month: str | None = None
    months: tuple[MonthGroup, ...] = ()

    @property
    def filename(self) -> str:
        if self.month is None:
            return f"archive_{self.year}.pdf"
        return f"archive_{self.year}_M{int(self.month)}.pdf"


@dataclass(frozen=True)
class LetterheadInfo:
    name: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    logo: bytes | None = field(default=None, repr=False)

    def lines(self) -> list[str]:
        if not self.name:
            return []
        candidates = [self.name, self.address, f"{self.postal_code} {self.city}".strip()]
        return [line for line in candidates if line]


@dataclass(frozen=True)
class Totals:
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class MonthReport:
    year: str
    month: str
    income: tuple[Transaction, ...]
    expenses: tuple[Transaction, ...]
    totals: Totals


@dataclass(frozen=True)
class ChartPoint:
    date: str
    income: Decimal
    expenses: Decimal
    income_descriptions: tuple[str, ...]
    expense_descriptions: tuple[str, ...]

    @property
    def marker(self) -> str:
        if self.income > 0 and self.expenses == 0:
            return "income"
        if self.expenses > 0 and self.income == 0:
            return "expense"
        return "mixed"
