import re
from decimal import Decimal, InvalidOperation

from .formatting import parse_canonical, to_canonical
from .models import TRANSACTION_TYPES, Transaction

MIN_TRANSACTION_YEAR = 1800
MAX_TRANSACTION_YEAR = 2100
INSTALL_YEAR_LOOKBACK = 100

_DATE_PATTERNS = {
    "dd/mm/yyyy": re.compile(r"^\d{2}/\d{2}/\d{4}$"),
    "yyyy-mm-dd": re.compile(r"^\d{4}-\d{2}-\d{2}$"),
}


def validate_transaction_type(s: str) -> str:
    if s not in TRANSACTION_TYPES:
        raise ValueError("transaction type must be income or expense")
    return s


def parse_amount(s: str) -> Decimal:
    if not isinstance(s, str) or not s.strip():
        raise ValueError("amount required")
    try:
        d = Decimal(s.strip())
    except InvalidOperation as e:
        raise ValueError("amount invalid") from e
    if not d.is_finite():
        raise ValueError("amount invalid")
    if d <= 0:
        raise ValueError("amount must be positive")
    return d


def validate_display_date(s: str, fmt: str) -> bool:
    pattern = _DATE_PATTERNS.get(fmt)
    if pattern is None or not pattern.match(s):
        return False
    try:
        parsed = parse_canonical(to_canonical(s, fmt))
    except ValueError:
        return False
    return MIN_TRANSACTION_YEAR <= parsed.year <= MAX_TRANSACTION_YEAR


def min_transaction_year(install_date: str | None) -> int:
    if not install_date:
        return MIN_TRANSACTION_YEAR
    return parse_canonical(install_date).year - INSTALL_YEAR_LOOKBACK


def signed_amount(amount: Decimal, transaction_type: str) -> Decimal:
    magnitude = abs(amount)
    return magnitude if transaction_type == "income" else -magnitude


def build_transaction(
    *,
    description: str,
    amount: str,
    transaction_type: str,
    display_date: str,
    date_format: str,
    install_date: str | None = None,
    txn_id: int | None = None,
) -> Transaction:
    """Validate form input and return a transaction in storage form."""

    text = (description or "").strip()
    if not text or not display_date:
        raise ValueError("description, amount and date are required")
    valid_type = validate_transaction_type(transaction_type)
    value = parse_amount(amount)
    if not validate_display_date(display_date, date_format):
        raise ValueError(f"date must match {date_format}")

    canonical = to_canonical(display_date, date_format)
    year = parse_canonical(canonical).year
    min_year = min_transaction_year(install_date)
    if year < min_year or year > MAX_TRANSACTION_YEAR:
        raise ValueError(f"year must be between {min_year} and {MAX_TRANSACTION_YEAR}")

    return Transaction(
        id=txn_id,
        date=canonical,
        description=text,
        amount=signed_amount(value, valid_type),
        transaction_type=valid_type,
    )


def is_canonical_date(s: str) -> bool:
    if not isinstance(s, str) or not re.match(r"^\d{2}\.\d{2}\.\d{4}$", s):
        return False
    try:
        parse_canonical(s)
    except ValueError:
        return False
    return True
