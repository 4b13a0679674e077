"""Layout description of the archive PDF.

The builder only decides what goes on the page and in which order; turning
the description into bytes is the renderer's job (see ``render.py``).
"""

from dataclasses import dataclass, field
from datetime import date as dt_date
from typing import Sequence, Union

from .aggregate import summarize_export
from .formatting import (
    format_currency,
    format_date,
    format_signed_currency,
    to_display,
)
from .i18n import Translator, month_name
from .models import ExportRequest, LetterheadInfo, MonthReport, Transaction
from .settings import ReportConfig

TABLE_WIDTHS = ("*", "auto", "auto")
PAGE_MARGINS = (40, 110, 40, 60)


@dataclass(frozen=True)
class Heading:
    text: str
    style: str = "header"
    centered: bool = False


@dataclass(frozen=True)
class TableBlock:
    header: tuple[str, str, str]
    rows: tuple[tuple[str, str, str], ...]
    widths: tuple[str, str, str] = TABLE_WIDTHS


@dataclass(frozen=True)
class TextLine:
    text: str
    bold: bool = False
    align: str = "left"
    tone: str | None = None
    font_size: int = 11


Block = Union[Heading, TableBlock, TextLine]


@dataclass(frozen=True)
class Section:
    year: str
    month: str
    blocks: tuple[Block, ...]
    page_break_before: bool = False


@dataclass(frozen=True)
class PageHeader:
    lines: tuple[str, ...] = ()
    logo: bytes | None = field(default=None, repr=False)

    @property
    def is_blank(self) -> bool:
        return not self.lines and self.logo is None


@dataclass(frozen=True)
class PageFooter:
    print_label: str
    print_date: str
    page_label: str

    @property
    def left_text(self) -> str:
        return f"{self.print_label}: {self.print_date}"

    def page_text(self, page: int, page_count: int) -> str:
        return f"{self.page_label} {page} / {page_count}"


@dataclass(frozen=True)
class ReportDocument:
    filename: str
    header: PageHeader
    footer: PageFooter
    sections: tuple[Section, ...] = ()
    placeholder: Heading | None = None
    margins: tuple[int, int, int, int] = PAGE_MARGINS


def _rows(
    transactions: Sequence[Transaction], config: ReportConfig, *, negative: bool
) -> tuple[tuple[str, str, str], ...]:
    return tuple(
        (
            tx.description,
            to_display(tx.date, config.date_format),
            format_currency(tx.amount, config.currency, negative=negative),
        )
        for tx in transactions
    )


def _side(
    transactions: Sequence[Transaction],
    *,
    title_key: str,
    empty_key: str,
    total_text: str,
    negative: bool,
    config: ReportConfig,
    t: Translator,
) -> list[Block]:
    if not transactions:
        return [TextLine(t(empty_key), tone="muted")]
    header = (t("archive.description"), t("archive.date"), t("archive.amount"))
    return [
        Heading(t(title_key), style="subheader"),
        TableBlock(header=header, rows=_rows(transactions, config, negative=negative)),
        TextLine(total_text, bold=True, align="right"),
    ]


def build_section(
    report: MonthReport, config: ReportConfig, t: Translator, *, first: bool
) -> Section:
    totals = report.totals
    net = totals.net
    blocks: list[Block] = [
        Heading(f"{month_name(t, int(report.month))} {report.year}"),
    ]
    blocks += _side(
        report.income,
        title_key="transaction_list.income",
        empty_key="transaction_list.no_income_transactions",
        total_text=(
            f"{t('archive.total_income')}: "
            f"{format_currency(totals.income, config.currency)}"
        ),
        negative=False,
        config=config,
        t=t,
    )
    blocks += _side(
        report.expenses,
        title_key="transaction_list.expenses",
        empty_key="transaction_list.no_expense_transactions",
        total_text=(
            f"{t('archive.total_expenses')}: "
            f"{format_currency(totals.expenses, config.currency, negative=True)}"
        ),
        negative=True,
        config=config,
        t=t,
    )
    blocks.append(
        TextLine(
            f"{t('archive.net_balance')}: {format_signed_currency(net, config.currency)}",
            bold=True,
            align="right",
            tone="positive" if net >= 0 else "negative",
            font_size=12,
        )
    )
    return Section(
        year=report.year,
        month=report.month,
        blocks=tuple(blocks),
        page_break_before=not first,
    )


def build_report(
    request: ExportRequest,
    letterhead: LetterheadInfo,
    config: ReportConfig,
    t: Translator,
    *,
    printed_on: dt_date | None = None,
) -> ReportDocument:
    """Lay out the archive document for ``request``.

    Months without transactions are left out. When nothing is left the
    document is a single centred placeholder.
    """

    reports = summarize_export(request)
    header = PageHeader(lines=tuple(letterhead.lines()), logo=letterhead.logo)
    footer = PageFooter(
        print_label=t("archive.print_date"),
        print_date=format_date(printed_on or dt_date.today(), config.date_format),
        page_label=t("archive.page"),
    )

    if not reports:
        return ReportDocument(
            filename=request.filename,
            header=header,
            footer=footer,
            placeholder=Heading(
                f"{t('archive.no_transactions_in_year')} {request.year}", centered=True
            ),
        )

    sections = tuple(
        build_section(report, config, t, first=index == 0)
        for index, report in enumerate(reports)
    )
    return ReportDocument(
        filename=request.filename, header=header, footer=footer, sections=sections
    )
