import logging
from datetime import date as dt_date

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from .aggregate import axis_ticks
from .backend import SqliteBackend
from .db import init_db
from .errors import BackendError, ExportError
from .formatting import format_amount, format_axis_value, to_display
from .models import ChartPoint, LetterheadInfo, Note, Totals, Transaction
from .periods import (
    MAX_MONTH_OFFSET,
    DateRange,
    MonthCursor,
    offset_for,
    parse_range_input,
    today_range,
)
from .services import (
    ArchiveService,
    LedgerService,
    NotesService,
    SettingsService,
)
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _clamp_offset(offset: int) -> int:
    return max(min(offset, MAX_MONTH_OFFSET), -MAX_MONTH_OFFSET)


def _resolve_range(
    start: str | None, end: str | None, period: str, offset: int, date_format: str
) -> DateRange:
    """Pick the filter range: explicit bounds, then the named period."""

    if start or end:
        first = parse_range_input(start or "", date_format)
        last = parse_range_input(end or "", date_format)
        if not first or not last:
            raise HTTPException(
                status_code=400, detail=f"start and end must be dates in {date_format}"
            )
        if first > last:
            raise HTTPException(status_code=400, detail="start must not be after end")
        return DateRange(start=first, end=last)
    if period == "today":
        return today_range()
    if period == "all":
        return DateRange()
    if period != "month":
        raise HTTPException(status_code=400, detail=f"unknown period: {period}")
    return MonthCursor(offset=_clamp_offset(offset)).range()


def _range_json(date_range: DateRange) -> dict:
    return {
        "start": date_range.start,
        "end": date_range.end,
        "offset": offset_for(date_range.start) if date_range.start else None,
    }


def _txn_json(txn: Transaction, date_format: str) -> dict:
    return {
        "id": txn.id,
        "date": txn.date,
        "display_date": to_display(txn.date, date_format),
        "description": txn.description,
        "amount": format_amount(txn.amount),
        "transaction_type": txn.transaction_type,
    }


def _totals_json(totals: Totals) -> dict:
    return {
        "income": format_amount(totals.income),
        "expenses": format_amount(totals.expenses),
        "balance": format_amount(totals.net),
    }


def _point_json(point: ChartPoint, date_format: str) -> dict:
    return {
        "date": point.date,
        "display_date": to_display(point.date, date_format),
        "income": format_amount(point.income),
        "expenses": format_amount(point.expenses),
        "income_descriptions": list(point.income_descriptions),
        "expense_descriptions": list(point.expense_descriptions),
        "marker": point.marker,
    }


def _note_json(note: Note) -> dict:
    return {"id": note.id, "content": note.content}


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("cashbook").setLevel(settings.log_level)
    init_db(settings)

    backend = SqliteBackend(settings.db_path)
    ledger = LedgerService(backend)
    notes = NotesService(backend)
    prefs = SettingsService(backend)
    archive = ArchiveService(
        backend,
        font_path=settings.font_path,
        bold_font_path=settings.bold_font_path,
    )
    prefs.load()

    app = FastAPI()

    @app.exception_handler(BackendError)
    def backend_error_handler(request: Request, exc: BackendError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ExportError)
    def export_error_handler(request: Request, exc: ExportError):
        logger.error("export failed: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/transactions")
    def list_transactions(
        start: str | None = None,
        end: str | None = None,
        period: str = "month",
        offset: int = 0,
    ):
        fmt = prefs.config.date_format
        date_range = _resolve_range(start, end, period, offset, fmt)
        ledger.refresh()
        return {
            **_range_json(date_range),
            "transactions": [
                _txn_json(txn, fmt) for txn in ledger.transactions_in(date_range)
            ],
        }

    @app.post("/transactions", status_code=201)
    def create_transaction(
        description: str = Form(...),
        amount: str = Form(...),
        transaction_type: str = Form(...),
        date: str = Form(...),
    ):
        fmt = prefs.config.date_format
        try:
            txn = ledger.submit_form(
                description=description,
                amount=amount,
                transaction_type=transaction_type,
                display_date=date,
                date_format=fmt,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _txn_json(txn, fmt)

    @app.post("/transactions/{txn_id}")
    def update_transaction(
        txn_id: int,
        description: str = Form(...),
        amount: str = Form(...),
        transaction_type: str = Form(...),
        date: str = Form(...),
    ):
        fmt = prefs.config.date_format
        try:
            txn = ledger.submit_form(
                description=description,
                amount=amount,
                transaction_type=transaction_type,
                display_date=date,
                date_format=fmt,
                txn_id=txn_id,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _txn_json(txn, fmt)

    @app.post("/transactions/{txn_id}/delete")
    def delete_transaction(txn_id: int):
        ledger.delete_transaction(txn_id)
        return {"deleted": txn_id}

    @app.get("/days")
    def list_days():
        return {"days": ledger.days()}

    @app.get("/install-date")
    def install_date():
        return {"install_date": ledger.install_date()}

    @app.get("/periods/month")
    def month_period(offset: int = 0, step: str | None = None):
        cursor = MonthCursor(offset=_clamp_offset(offset))
        moved = True
        if step == "previous":
            moved = cursor.previous()
        elif step == "next":
            moved = cursor.next()
        elif step == "reset":
            cursor.reset()
        elif step:
            raise HTTPException(status_code=400, detail=f"unknown step: {step}")
        date_range = cursor.range()
        return {
            "offset": cursor.offset,
            "moved": moved,
            "start": date_range.start,
            "end": date_range.end,
        }

    @app.get("/summary")
    def summary(
        start: str | None = None,
        end: str | None = None,
        period: str = "month",
        offset: int = 0,
    ):
        date_range = _resolve_range(start, end, period, offset, prefs.config.date_format)
        ledger.refresh()
        return {
            "currency": prefs.config.currency,
            **_range_json(date_range),
            **_totals_json(ledger.summary(date_range)),
        }

    @app.get("/chart")
    def chart(
        start: str | None = None,
        end: str | None = None,
        period: str = "month",
        offset: int = 0,
    ):
        fmt = prefs.config.date_format
        date_range = _resolve_range(start, end, period, offset, fmt)
        ledger.refresh()
        points = ledger.chart(date_range)
        return {
            **_range_json(date_range),
            "points": [_point_json(point, fmt) for point in points],
            "axis": [format_axis_value(tick) for tick in axis_ticks(points)],
        }

    @app.get("/reports/monthly")
    def monthly_report():
        ledger.refresh()
        return {
            "currency": prefs.config.currency,
            "months": [
                {"month": month, **_totals_json(totals)}
                for month, totals in ledger.monthly().items()
            ],
        }

    @app.get("/notes")
    def list_notes():
        return {"notes": [_note_json(note) for note in notes.refresh()]}

    @app.post("/notes", status_code=201)
    def create_note(content: str = Form(...)):
        try:
            note_id = notes.add_note(content)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"id": note_id}

    @app.post("/notes/{note_id}")
    def update_note(note_id: int, content: str = Form(...)):
        try:
            notes.update_note(note_id, content)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"id": note_id}

    @app.post("/notes/{note_id}/delete")
    def delete_note(note_id: int):
        notes.delete_note(note_id)
        return {"deleted": note_id}

    @app.get("/settings")
    def read_settings():
        config = prefs.config
        return {
            "currency": config.currency,
            "date_format": config.date_format,
            "language": config.language,
        }

    @app.post("/settings")
    def update_settings(
        currency: str | None = Form(default=None),
        language: str | None = Form(default=None),
        date_format: str | None = Form(default=None),
    ):
        try:
            prefs.update(
                currency=currency,
                language=language or None,
                date_format=date_format or None,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return read_settings()

    @app.get("/archive")
    def browse_archive(year: str = "", month: str = ""):
        fmt = prefs.config.date_format
        return {
            "years": archive.years(),
            "months": archive.months(),
            "groups": [
                {
                    "year": group_year,
                    "months": [
                        {
                            "month": group.month,
                            "transactions": [
                                _txn_json(txn, fmt) for txn in group.transactions
                            ],
                        }
                        for group in groups
                    ],
                }
                for group_year, groups in archive.browse(year, month)
            ],
        }

    @app.post("/archive/export")
    async def export_archive(
        year: str = Form(...),
        month: str | None = Form(default=None),
        name: str = Form(default=""),
        address: str = Form(default=""),
        postal_code: str = Form(default=""),
        city: str = Form(default=""),
        logo: UploadFile | None = File(default=None),
    ):
        if not year.isdigit() or (month and not (month.isdigit() and 1 <= int(month) <= 12)):
            raise HTTPException(status_code=400, detail="invalid year or month")
        logo_bytes = await logo.read() if logo is not None else None
        letterhead = LetterheadInfo(
            name=name.strip(),
            address=address.strip(),
            postal_code=postal_code.strip(),
            city=city.strip(),
            logo=logo_bytes or None,
        )
        result = await run_in_threadpool(
            archive.export,
            year,
            month or None,
            letterhead,
            prefs.config,
            printed_on=dt_date.today(),
        )
        return Response(
            content=result.content,
            media_type=result.media_type,
            headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
        )

    return app


app = create_app()
