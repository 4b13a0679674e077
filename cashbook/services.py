"""Application services used by the HTTP layer (or any other front end).

Each service keeps the last snapshot it loaded. Mutations go to the backend
first and only then refresh the snapshot, so a failed call leaves the previous
data in place and the error reaches the caller.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date as dt_date
from pathlib import Path

from .aggregate import (
    archive_months,
    archive_years,
    build_chart_series,
    build_export_request,
    compute_totals,
    filter_archive,
    group_by_month,
    monthly_totals,
)
from .backend import LedgerBackend
from .i18n import SUPPORTED_LANGUAGES, Translator, get_translator
from .logic import build_transaction, is_canonical_date
from .models import ChartPoint, LetterheadInfo, MonthGroup, Note, Totals, Transaction
from .periods import DateRange, filter_by_range
from .render import load_fonts, render_pdf
from .report import build_report
from .settings import DEFAULT_DATE_FORMAT, ReportConfig

logger = logging.getLogger(__name__)


def _require_canonical(txn: Transaction) -> None:
    if not is_canonical_date(txn.date):
        raise ValueError(f"date must be dd.mm.yyyy, got {txn.date!r}")


class LedgerService:
    def __init__(self, backend: LedgerBackend):
        self.backend = backend
        self._transactions: list[Transaction] = []

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def refresh(self) -> list[Transaction]:
        self._transactions = self.backend.list_transactions()
        return self.transactions

    def add_transaction(self, txn: Transaction) -> int:
        _require_canonical(txn)
        txn_id = self.backend.add_transaction(txn)
        logger.info("added %s transaction %s on %s", txn.transaction_type, txn_id, txn.date)
        self.refresh()
        return txn_id

    def update_transaction(self, txn: Transaction) -> None:
        _require_canonical(txn)
        self.backend.update_transaction(txn)
        logger.info("updated transaction %s", txn.id)
        self.refresh()

    def delete_transaction(self, txn_id: int) -> None:
        self.backend.delete_transaction(txn_id)
        logger.info("deleted transaction %s", txn_id)
        self.refresh()

    def submit_form(
        self,
        *,
        description: str,
        amount: str,
        transaction_type: str,
        display_date: str,
        date_format: str,
        txn_id: int | None = None,
    ) -> Transaction:
        """Validate form input, then create or update the transaction."""

        txn = build_transaction(
            description=description,
            amount=amount,
            transaction_type=transaction_type,
            display_date=display_date,
            date_format=date_format,
            install_date=self.install_date(),
            txn_id=txn_id,
        )
        if txn_id is None:
            return replace(txn, id=self.add_transaction(txn))
        self.update_transaction(txn)
        return txn

    def days(self) -> list[str]:
        return self.backend.list_days()

    def install_date(self) -> str:
        return self.backend.get_install_date()

    def transactions_in(self, date_range: DateRange) -> list[Transaction]:
        return filter_by_range(self._transactions, date_range)

    def summary(self, date_range: DateRange) -> Totals:
        return compute_totals(self.transactions_in(date_range))

    def chart(self, date_range: DateRange) -> list[ChartPoint]:
        return build_chart_series(self.transactions_in(date_range))

    def monthly(self) -> dict[str, Totals]:
        return monthly_totals(self._transactions)


class NotesService:
    def __init__(self, backend: LedgerBackend):
        self.backend = backend
        self._notes: list[Note] = []

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    def refresh(self) -> list[Note]:
        self._notes = self.backend.list_notes()
        return self.notes

    def add_note(self, content: str) -> int:
        text = content.strip()
        if not text:
            raise ValueError("note content required")
        note_id = self.backend.add_note(text)
        self.refresh()
        return note_id

    def update_note(self, note_id: int, content: str) -> None:
        text = content.strip()
        if not text:
            raise ValueError("note content required")
        self.backend.update_note(Note(id=note_id, content=text))
        self.refresh()

    def delete_note(self, note_id: int) -> None:
        self.backend.delete_note(note_id)
        self.refresh()


class SettingsService:
    def __init__(self, backend: LedgerBackend, date_format: str = DEFAULT_DATE_FORMAT):
        self.backend = backend
        self._config = ReportConfig(date_format=date_format)

    @property
    def config(self) -> ReportConfig:
        return self._config

    def load(self) -> ReportConfig:
        self._config = replace(
            self._config,
            currency=self.backend.get_currency(),
            language=self.backend.get_language(),
        )
        return self._config

    def update(
        self,
        *,
        currency: str | None = None,
        language: str | None = None,
        date_format: str | None = None,
    ) -> ReportConfig:
        """Validate every requested change, then store them.

        Nothing is applied when any value is rejected. A backend failure keeps
        only the changes the backend already accepted.
        """

        target = self._config
        if currency is not None:
            symbol = currency.strip()
            if not symbol:
                raise ValueError("currency required")
            target = replace(target, currency=symbol)
        if language is not None:
            if language not in SUPPORTED_LANGUAGES:
                raise ValueError(f"unsupported language: {language}")
            target = replace(target, language=language)
        if date_format is not None:
            target = replace(target, date_format=date_format)

        if target.currency != self._config.currency:
            self.backend.set_currency(target.currency)
            self._config = replace(self._config, currency=target.currency)
        if target.language != self._config.language:
            self.backend.set_language(target.language)
            self._config = replace(self._config, language=target.language)
        self._config = target
        return self._config

    def set_currency(self, currency: str) -> ReportConfig:
        return self.update(currency=currency)

    def set_language(self, language: str) -> ReportConfig:
        return self.update(language=language)

    def set_date_format(self, date_format: str) -> ReportConfig:
        return self.update(date_format=date_format)

    def translator(self) -> Translator:
        return get_translator(self._config.language)


@dataclass(frozen=True)
class ExportResult:
    filename: str
    content: bytes
    media_type: str = "application/pdf"


class ArchiveService:
    def __init__(
        self,
        backend: LedgerBackend,
        *,
        font_path: Path | None = None,
        bold_font_path: Path | None = None,
    ):
        self.backend = backend
        self.font_path = font_path
        self.bold_font_path = bold_font_path

    def years(self) -> list[str]:
        return archive_years(self.backend.list_days())

    def months(self) -> list[str]:
        return archive_months(self.backend.list_days())

    def browse(self, year: str, month: str) -> list[tuple[str, list[MonthGroup]]]:
        return filter_archive(group_by_month(self.backend.list_transactions()), year, month)

    def export(
        self,
        year: str,
        month: str | None,
        letterhead: LetterheadInfo,
        config: ReportConfig,
        *,
        printed_on: dt_date | None = None,
    ) -> ExportResult:
        """Build and render the archive PDF for a year or a single month."""

        request = build_export_request(self.backend.list_transactions(), year, month)
        fonts = load_fonts(self.font_path, self.bold_font_path)
        document = build_report(
            request,
            letterhead,
            config,
            get_translator(config.language),
            printed_on=printed_on,
        )
        content = render_pdf(document, fonts)
        logger.info("exported %s (%d bytes)", document.filename, len(content))
        return ExportResult(filename=document.filename, content=content)
