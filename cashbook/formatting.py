"""Date and currency formatting.

Dates are stored as ``dd.mm.yyyy`` and only converted to one of the display
formats (``dd/mm/yyyy`` or ``yyyy-mm-dd``) when shown to the user.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")

_AXIS_UNITS = (
    (Decimal("1e21"), "E21"),
    (Decimal("1e18"), "Qi"),
    (Decimal("1e15"), "Q"),
    (Decimal("1e12"), "T"),
    (Decimal("1e9"), "B"),
    (Decimal("1e6"), "M"),
    (Decimal("1e3"), "K"),
)


def split_canonical(canonical: str) -> tuple[str, str, str]:
    day, month, year = canonical.split(".")
    return day.zfill(2), month.zfill(2), year


def to_display(canonical: str, fmt: str) -> str:
    day, month, year = split_canonical(canonical)
    if fmt == "yyyy-mm-dd":
        return f"{year}-{month}-{day}"
    if fmt == "dd/mm/yyyy":
        return f"{day}/{month}/{year}"
    raise ValueError(f"unsupported date format: {fmt}")


def to_canonical(display: str, fmt: str) -> str:
    if fmt == "yyyy-mm-dd":
        year, month, day = display.split("-")
    elif fmt == "dd/mm/yyyy":
        day, month, year = display.split("/")
    else:
        raise ValueError(f"unsupported date format: {fmt}")
    return f"{day}.{month}.{year}"


def date_sort_key(canonical: str) -> str:
    day, month, year = split_canonical(canonical)
    return f"{year}-{month}-{day}"


def canonical_to_iso(canonical: str) -> str:
    return date_sort_key(canonical)


def iso_to_canonical(iso: str) -> str:
    year, month, day = iso.split("-")
    return f"{day}.{month}.{year}"


def canonical_from_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def parse_canonical(canonical: str) -> date:
    day, month, year = split_canonical(canonical)
    return date(int(year), int(month), int(day))


def format_date(value: date, fmt: str) -> str:
    return to_display(canonical_from_date(value), fmt)


def format_amount(value: Decimal | int | str, rounding: str = ROUND_HALF_UP) -> str:
    """Return ``value`` with exactly two fraction digits.

    Half-way cases round away from zero unless another ``decimal`` rounding
    mode is given, so ``1234.005`` becomes ``1234.01``.
    """

    quantized = Decimal(value).quantize(TWO_PLACES, rounding=rounding)
    if quantized == 0:
        quantized = abs(quantized)
    return f"{quantized:.2f}"


def format_currency(
    amount: Decimal | int | str,
    symbol: str,
    *,
    negative: bool = False,
    rounding: str = ROUND_HALF_UP,
) -> str:
    sign = "-" if negative else ""
    return f"{sign}{symbol}{format_amount(abs(Decimal(amount)), rounding)}"


def format_signed_currency(amount: Decimal | int | str, symbol: str) -> str:
    value = Decimal(amount)
    if value >= 0:
        return f"+{format_currency(value, symbol)}"
    return format_currency(value, symbol, negative=True)


def format_axis_value(value: Decimal | int | float) -> str:
    number = Decimal(str(value))
    for threshold, suffix in _AXIS_UNITS:
        if number >= threshold:
            scaled = (number / threshold).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            return f"{scaled}{suffix}"
    return f"{number.quantize(Decimal('1'), rounding=ROUND_HALF_UP)}"
