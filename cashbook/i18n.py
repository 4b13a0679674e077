"""User-facing labels for reports, summaries and charts."""

from typing import Callable

Translator = Callable[[str], str]

_MONTHS = {
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    "de": (
        "Januar", "Februar", "März", "April", "Mai", "Juni",
        "Juli", "August", "September", "Oktober", "November", "Dezember",
    ),
    "ru": (
        "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
        "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
    ),
}

_LABELS = {
    "en": {
        "archive.no_transactions_in_year": "No transactions in year",
        "archive.description": "Description",
        "archive.date": "Date",
        "archive.amount": "Amount",
        "archive.total_income": "Total income",
        "archive.total_expenses": "Total expenses",
        "archive.net_balance": "Net balance",
        "archive.print_date": "Print date",
        "archive.page": "Page",
        "transaction_list.income": "Income",
        "transaction_list.expenses": "Expenses",
        "transaction_list.no_income_transactions": "No income transactions",
        "transaction_list.no_expense_transactions": "No expense transactions",
        "summary.income": "Income",
        "summary.expenses": "Expenses",
        "summary.balance": "Balance",
        "chart.income": "Income",
        "chart.expenses": "Expenses",
    },
    "de": {
        "archive.no_transactions_in_year": "Keine Transaktionen im Jahr",
        "archive.description": "Beschreibung",
        "archive.date": "Datum",
        "archive.amount": "Betrag",
        "archive.total_income": "Gesamteinnahmen",
        "archive.total_expenses": "Gesamtausgaben",
        "archive.net_balance": "Saldo",
        "archive.print_date": "Druckdatum",
        "archive.page": "Seite",
        "transaction_list.income": "Einnahmen",
        "transaction_list.expenses": "Ausgaben",
        "transaction_list.no_income_transactions": "Keine Einnahmen",
        "transaction_list.no_expense_transactions": "Keine Ausgaben",
        "summary.income": "Einnahmen",
        "summary.expenses": "Ausgaben",
        "summary.balance": "Saldo",
        "chart.income": "Einnahmen",
        "chart.expenses": "Ausgaben",
    },
    "ru": {
        "archive.no_transactions_in_year": "Нет транзакций за год",
        "archive.description": "Описание",
        "archive.date": "Дата",
        "archive.amount": "Сумма",
        "archive.total_income": "Итого доходы",
        "archive.total_expenses": "Итого расходы",
        "archive.net_balance": "Баланс",
        "archive.print_date": "Дата печати",
        "archive.page": "Страница",
        "transaction_list.income": "Доходы",
        "transaction_list.expenses": "Расходы",
        "transaction_list.no_income_transactions": "Нет доходов",
        "transaction_list.no_expense_transactions": "Нет расходов",
        "summary.income": "Доходы",
        "summary.expenses": "Расходы",
        "summary.balance": "Баланс",
        "chart.income": "Доходы",
        "chart.expenses": "Расходы",
    },
}

FALLBACK_LANGUAGE = "en"
SUPPORTED_LANGUAGES = tuple(_LABELS)


def _lookup(language: str, key: str) -> str | None:
    if key.startswith("archive.months_pdf."):
        try:
            index = int(key.rsplit(".", 1)[1])
        except ValueError:
            return None
        names = _MONTHS.get(language)
        if names is None or not 0 <= index < len(names):
            return None
        return names[index]
    return _LABELS.get(language, {}).get(key)


def get_translator(language: str) -> Translator:
    """Return a label lookup for ``language``.

    Unknown keys fall back to English, then to the key itself.
    """

    def translate(key: str) -> str:
        return _lookup(language, key) or _lookup(FALLBACK_LANGUAGE, key) or key

    return translate


def month_name(translate: Translator, month: int) -> str:
    return translate(f"archive.months_pdf.{month - 1}")
