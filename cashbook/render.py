"""Render a ``ReportDocument`` to PDF bytes with reportlab."""

import logging
from dataclasses import dataclass
from functools import partial
from io import BytesIO
from pathlib import Path
from typing import Iterator
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas as pdfcanvas
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.doctemplate import LayoutError

from .errors import ExportError, RendererAssetError
from .report import Heading, ReportDocument, TableBlock, TextLine

logger = logging.getLogger(__name__)

TONE_COLORS = {
    "muted": colors.HexColor("#777777"),
    "positive": colors.HexColor("#2e8033"),
    "negative": colors.HexColor("#9c3f36"),
}
ALIGNMENTS = {"left": TA_LEFT, "right": TA_RIGHT, "center": TA_CENTER}
TABLE_HEADER_FILL = colors.HexColor("#eeeeee")
LOGO_SIZE = 60
HEADER_TOP = 40
FOOTER_BASELINE = 30
CELL_PADDING = 12
PLACEHOLDER_OFFSET = 100


@dataclass(frozen=True)
class FontSet:
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"


def load_fonts(font_path: Path | None = None, bold_font_path: Path | None = None) -> FontSet:
    """Register TrueType fonts for the renderer.

    Without a font path the PDF standard Helvetica faces are used. A font that
    cannot be loaded aborts the export.
    """

    if font_path is None:
        return FontSet()
    try:
        pdfmetrics.registerFont(TTFont("CashbookSans", str(font_path)))
        bold = "CashbookSans"
        if bold_font_path is not None:
            pdfmetrics.registerFont(TTFont("CashbookSans-Bold", str(bold_font_path)))
            bold = "CashbookSans-Bold"
    except (TTFError, OSError) as exc:
        logger.error("font registration failed for %s: %s", font_path, exc)
        raise RendererAssetError(f"failed to load font {font_path}") from exc
    return FontSet(regular="CashbookSans", bold=bold)


def _logo_reader(logo: bytes | None) -> ImageReader | None:
    if logo is None:
        return None
    try:
        reader = ImageReader(BytesIO(logo))
        reader.getSize()
    except (OSError, ValueError, TypeError) as exc:
        raise RendererAssetError("failed to load letterhead logo") from exc
    return reader


class _PageFurniture:
    def __init__(self, document: ReportDocument, fonts: FontSet, logo: ImageReader | None):
        self.document = document
        self.fonts = fonts
        self.logo = logo

    def draw(self, canv: pdfcanvas.Canvas, page: int, page_count: int) -> None:
        width, height = canv._pagesize
        left, _, right, _ = self.document.margins
        header = self.document.header
        footer = self.document.footer

        canv.saveState()
        canv.setFont(self.fonts.regular, 10)
        y = height - HEADER_TOP - 10
        for line in header.lines:
            canv.drawString(left, y, line)
            y -= 12
        if self.logo is not None:
            canv.drawImage(
                self.logo,
                width - right - LOGO_SIZE,
                height - HEADER_TOP - LOGO_SIZE,
                LOGO_SIZE,
                LOGO_SIZE,
                preserveAspectRatio=True,
                anchor="ne",
                mask="auto",
            )

        canv.setFont(self.fonts.regular, 9)
        canv.drawString(left, FOOTER_BASELINE, footer.left_text)
        canv.drawRightString(width - right, FOOTER_BASELINE, footer.page_text(page, page_count))
        canv.restoreState()


class _NumberedCanvas(pdfcanvas.Canvas):
    """Defers page furniture until the page count is known."""

    def __init__(self, *args, furniture: _PageFurniture, **kwargs):
        super().__init__(*args, **kwargs)
        self._furniture = furniture
        self._page_states: list[dict] = []

    def showPage(self):
        self._page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._page_states)
        for state in self._page_states:
            self.__dict__.update(state)
            self._furniture.draw(self, self._pageNumber, page_count)
            super().showPage()
        super().save()


class _Flowables:
    def __init__(self, fonts: FontSet, available_width: float):
        self.fonts = fonts
        self.available_width = available_width
        self.header = ParagraphStyle(
            "header", fontName=fonts.bold, fontSize=16, leading=20, spaceBefore=20, spaceAfter=10
        )
        self.subheader = ParagraphStyle(
            "subheader", fontName=fonts.bold, fontSize=13, leading=16, spaceBefore=10, spaceAfter=5
        )
        self.cell = ParagraphStyle("cell", fontName=fonts.regular, fontSize=10, leading=12)

    def heading(self, block: Heading) -> Paragraph:
        style = self.header if block.style == "header" else self.subheader
        if block.centered:
            style = ParagraphStyle("placeholder", parent=style, alignment=TA_CENTER)
        return Paragraph(escape(block.text), style)

    def line(self, block: TextLine) -> Paragraph:
        if block.tone == "muted":
            space_before, space_after = 5, 10
        elif block.tone in ("positive", "negative"):
            space_before, space_after = 10, 20
        else:
            space_before, space_after = 5, 15
        style = ParagraphStyle(
            "line",
            fontName=self.fonts.bold if block.bold else self.fonts.regular,
            fontSize=block.font_size,
            leading=block.font_size + 3,
            alignment=ALIGNMENTS.get(block.align, TA_LEFT),
            textColor=TONE_COLORS.get(block.tone, colors.black),
            spaceBefore=space_before,
            spaceAfter=space_after,
        )
        return Paragraph(escape(block.text), style)

    def _auto_width(self, texts: list[str], font: str) -> float:
        return max(pdfmetrics.stringWidth(text, font, 10) for text in texts) + CELL_PADDING

    def table(self, block: TableBlock) -> Table:
        widths: list[float | None] = []
        for index, width in enumerate(block.widths):
            if width == "auto":
                widths.append(
                    max(
                        self._auto_width([block.header[index]], self.fonts.bold),
                        self._auto_width([row[index] for row in block.rows] or [""], self.fonts.regular),
                    )
                )
            else:
                widths.append(None)
        fixed = sum(w for w in widths if w is not None)
        flexible = [i for i, w in enumerate(widths) if w is None]
        share = max(self.available_width - fixed, 0) / max(len(flexible), 1)
        for i in flexible:
            widths[i] = share

        data = [list(block.header)]
        for row in block.rows:
            data.append([Paragraph(escape(row[0]), self.cell), row[1], row[2]])
        table = Table(data, colWidths=widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), self.fonts.bold),
                    ("FONTNAME", (0, 1), (-1, -1), self.fonts.regular),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("BACKGROUND", (0, 0), (-1, 0), TABLE_HEADER_FILL),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
                    ("LINEBELOW", (0, 1), (-1, -2), 0.5, colors.HexColor("#aaaaaa")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        return table

    def build(self, document: ReportDocument) -> list:
        if document.placeholder is not None:
            return [Spacer(1, PLACEHOLDER_OFFSET), self.heading(document.placeholder)]
        story: list = []
        for section in document.sections:
            if section.page_break_before:
                story.append(PageBreak())
            for block in section.blocks:
                if isinstance(block, Heading):
                    story.append(self.heading(block))
                elif isinstance(block, TableBlock):
                    story.append(self.table(block))
                else:
                    story.append(self.line(block))
        return story


def _drawn_text(document: ReportDocument) -> Iterator[tuple[str, bool]]:
    """Every string the renderer draws, paired with whether it is set in bold."""

    for line in document.header.lines:
        yield line, False
    yield document.footer.left_text, False
    yield document.footer.page_text(0, 0), False
    if document.placeholder is not None:
        blocks: list = [document.placeholder]
    else:
        blocks = [block for section in document.sections for block in section.blocks]
    for block in blocks:
        if isinstance(block, Heading):
            yield block.text, True
        elif isinstance(block, TableBlock):
            for cell in block.header:
                yield cell, True
            for row in block.rows:
                for cell in row:
                    yield cell, False
        else:
            yield block.text, block.bold


def _missing_glyphs(text: str, font_name: str) -> set[str]:
    font = pdfmetrics.getFont(font_name)
    if isinstance(font, TTFont):
        return {ch for ch in set(text) if ord(ch) not in font.face.charToGlyph}
    missing = set()
    for ch in set(text):
        try:
            ch.encode(font.encName)
        except UnicodeEncodeError:
            missing.add(ch)
    return missing


def check_glyphs(document: ReportDocument, fonts: FontSet) -> None:
    """Raise ``RendererAssetError`` if a font cannot draw some of the text.

    reportlab would otherwise print a filler glyph for each such character.
    The standard PDF fonts only cover Latin-1 and a few extras such as the
    euro sign; other scripts need a TrueType font via ``CASHBOOK_FONT_PATH``.
    """

    missing: dict[str, set[str]] = {}
    for text, bold in _drawn_text(document):
        font_name = fonts.bold if bold else fonts.regular
        chars = _missing_glyphs(text, font_name)
        if chars:
            missing.setdefault(font_name, set()).update(chars)
    if missing:
        detail = "; ".join(
            f"{name} lacks {''.join(sorted(chars))!r}" for name, chars in sorted(missing.items())
        )
        logger.error("cannot render %s: %s", document.filename, detail)
        raise RendererAssetError(f"font cannot draw document text ({detail})")


def render_pdf(document: ReportDocument, fonts: FontSet | None = None) -> bytes:
    fonts = fonts or FontSet()
    check_glyphs(document, fonts)
    left, top, right, bottom = document.margins
    logo = _logo_reader(document.header.logo)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=left,
        topMargin=top,
        rightMargin=right,
        bottomMargin=bottom,
        title=document.filename,
    )
    story = _Flowables(fonts, A4[0] - left - right).build(document)
    furniture = _PageFurniture(document, fonts, logo)
    try:
        doc.build(story, canvasmaker=partial(_NumberedCanvas, furniture=furniture))
    except LayoutError as exc:
        raise ExportError(f"could not lay out {document.filename}") from exc
    logger.info("rendered %s (%d sections)", document.filename, len(document.sections))
    return buffer.getvalue()
