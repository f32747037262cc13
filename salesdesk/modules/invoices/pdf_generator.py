# salesdesk/modules/invoices/pdf_generator.py
"""
Downloadable invoice PDF drawn on fixed coordinates with fpdf2.

Units are millimetres on an A4 page (210 wide). The header blocks sit at
fixed positions; the item grid starts at TABLE_TOP and grows by ROW_HEIGHT
per line, breaking onto new pages when it reaches the bottom margin. The
totals, badge and notes are placed relative to where the grid actually
ended, never at a fixed y.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from fpdf import FPDF

from ...config import FONTS_DIR
from ...constants import APP_NAME
from ...errors import RenderFailure
from ...utils.helpers import short_id
from .assembler import InvoiceViewModel

_log = logging.getLogger(__name__)

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
LEFT_X = 14.0
COMPANY_X = 150.0
DATE_X = 120.0
METHOD_X = 170.0
TABLE_TOP = 65.0
ROW_HEIGHT = 7.0
CELL_PADDING = 1.8
BOTTOM_LIMIT = PAGE_HEIGHT - 15.0
CONTINUATION_TOP = 20.0

# (header, width, align)
COLUMNS = (
    ("Item", 92.0, "L"),
    ("Quantity", 30.0, "L"),
    ("Unit Price", 30.0, "L"),
    ("Amount", 30.0, "R"),
)

SUMMARY_LABEL_X = 130.0
SUMMARY_VALUE_X = 170.0
TOTALS_GAP = 10.0
# Offsets from the first totals line down to the notes body.
TOTALS_BLOCK_HEIGHT = 35.0

HEAD_FILL = (66, 66, 66)
GRID_COLOR = (200, 200, 200)
BADGE_FILL = (39, 174, 96)

# Core PDF fonts only cover Latin-1; product and customer text can be anything.
FONT_FAMILY = "DejaVu"
FONT_FILES = {
    "": "DejaVuSans.ttf",
    "B": "DejaVuSans-Bold.ttf",
}


@dataclass
class PdfLayout:
    """Where things ended up; recorded while drawing."""
    table_top: float
    table_end: float
    table_end_page: int
    totals_top: float
    totals_page: int
    row_count: int
    page_count: int

    def totals_below_table(self) -> bool:
        if self.totals_page != self.table_end_page:
            return self.totals_page > self.table_end_page
        return self.totals_top > self.table_end


def invoice_file_name(sale_id: str) -> str:
    return f"invoice-{short_id(sale_id)}.pdf"


class InvoicePdfGenerator:
    def __init__(self):
        self.layout: PdfLayout | None = None

    # ---- public API -------------------------------------------------------

    def render(self, inv: InvoiceViewModel) -> bytes:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.set_auto_page_break(False)
        pdf.set_title(inv.invoice_number)
        pdf.set_creator(APP_NAME)
        for style, file_name in FONT_FILES.items():
            pdf.add_font(FONT_FAMILY, style, str(FONTS_DIR / file_name))
        pdf.add_page()

        self._draw_header(pdf, inv)
        table_end = self._draw_table(pdf, inv)
        table_end_page = pdf.page_no()

        totals_top = table_end + TOTALS_GAP
        if totals_top + TOTALS_BLOCK_HEIGHT > BOTTOM_LIMIT:
            pdf.add_page()
            totals_top = CONTINUATION_TOP
        self._draw_totals(pdf, inv, totals_top)

        self.layout = PdfLayout(
            table_top=TABLE_TOP,
            table_end=table_end,
            table_end_page=table_end_page,
            totals_top=totals_top,
            totals_page=pdf.page_no(),
            row_count=len(inv.rows),
            page_count=pdf.page_no(),
        )
        return bytes(pdf.output())

    # ---- text helpers -----------------------------------------------------

    @staticmethod
    def _text(pdf: FPDF, x: float, y: float, s: str, align: str = "L") -> None:
        if align == "R":
            x -= pdf.get_string_width(s)
        elif align == "C":
            x -= pdf.get_string_width(s) / 2
        pdf.text(x, y, s)

    @staticmethod
    def _fit(pdf: FPDF, s: str, width: float) -> str:
        room = width - 2 * CELL_PADDING
        if pdf.get_string_width(s) <= room:
            return s
        while s and pdf.get_string_width(s + "...") > room:
            s = s[:-1]
        return s + "..."

    # ---- blocks -----------------------------------------------------------

    def _draw_header(self, pdf: FPDF, inv: InvoiceViewModel) -> None:
        pdf.set_text_color(0, 0, 0)
        pdf.set_font(FONT_FAMILY, "B", 20)
        self._text(pdf, LEFT_X, 20, "INVOICE")
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, LEFT_X, 26, inv.invoice_number)

        # Company block, right-aligned on a fixed anchor
        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, COMPANY_X, 20, inv.company_name, "R")
        pdf.set_font(FONT_FAMILY, "", 10)
        for i, line in enumerate(inv.company_lines):
            self._text(pdf, COMPANY_X, 25 + 5 * i, line, "R")

        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, LEFT_X, 45, "BILL TO")
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, LEFT_X, 50, f"Customer ID: {inv.customer_id}")
        self._text(pdf, LEFT_X, 55, inv.customer_contact)

        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, DATE_X, 45, "INVOICE DATE")
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, DATE_X, 50, inv.invoice_date)

        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, METHOD_X, 45, "PAYMENT METHOD")
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, METHOD_X, 50, inv.payment_method)

    def _draw_row(self, pdf: FPDF, y: float, cells: list[str], *, head: bool = False) -> None:
        x = LEFT_X
        pdf.set_draw_color(*GRID_COLOR)
        if head:
            pdf.set_fill_color(*HEAD_FILL)
            pdf.set_text_color(255, 255, 255)
            pdf.set_font(FONT_FAMILY, "B", 9)
        else:
            pdf.set_text_color(0, 0, 0)
            pdf.set_font(FONT_FAMILY, "", 9)
        baseline = y + ROW_HEIGHT / 2 + 1.2
        for (_, width, align), value in zip(COLUMNS, cells):
            pdf.rect(x, y, width, ROW_HEIGHT, style="FD" if head else "D")
            value = self._fit(pdf, value, width)
            if align == "R":
                self._text(pdf, x + width - CELL_PADDING, baseline, value, "R")
            else:
                self._text(pdf, x + CELL_PADDING, baseline, value)
            x += width
        pdf.set_text_color(0, 0, 0)

    def _draw_table(self, pdf: FPDF, inv: InvoiceViewModel) -> float:
        """Draw the grid and return the y of its bottom edge on the current page."""
        headers = [c[0] for c in COLUMNS]
        y = TABLE_TOP
        self._draw_row(pdf, y, headers, head=True)
        y += ROW_HEIGHT
        for row in inv.rows:
            if y + ROW_HEIGHT > BOTTOM_LIMIT:
                pdf.add_page()
                y = CONTINUATION_TOP
                self._draw_row(pdf, y, headers, head=True)
                y += ROW_HEIGHT
            self._draw_row(
                pdf,
                y,
                [row.product_name, str(row.quantity), row.unit_price_text, row.amount_text],
            )
            y += ROW_HEIGHT
        return y

    def _draw_totals(self, pdf: FPDF, inv: InvoiceViewModel, top: float) -> None:
        pdf.set_draw_color(0, 0, 0)
        pdf.set_text_color(0, 0, 0)
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, SUMMARY_LABEL_X, top, "Subtotal:")
        self._text(pdf, SUMMARY_VALUE_X, top, inv.subtotal_text, "R")

        self._text(pdf, SUMMARY_LABEL_X, top + 5, f"{inv.discount_label}:")
        self._text(pdf, SUMMARY_VALUE_X, top + 5, inv.discount_text, "R")

        pdf.line(SUMMARY_LABEL_X, top + 7, SUMMARY_VALUE_X, top + 7)

        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, SUMMARY_LABEL_X, top + 12, "Total:")
        self._text(pdf, SUMMARY_VALUE_X, top + 12, inv.total_text, "R")

        # Status badge
        pdf.set_fill_color(*BADGE_FILL)
        pdf.rect(SUMMARY_LABEL_X, top + 15, SUMMARY_VALUE_X - SUMMARY_LABEL_X, 7, style="F")
        pdf.set_text_color(255, 255, 255)
        pdf.set_font(FONT_FAMILY, "B", 8)
        self._text(pdf, (SUMMARY_LABEL_X + SUMMARY_VALUE_X) / 2, top + 20, inv.status, "C")
        pdf.set_text_color(0, 0, 0)

        pdf.set_font(FONT_FAMILY, "B", 10)
        self._text(pdf, LEFT_X, top + 30, "Notes")
        pdf.set_font(FONT_FAMILY, "", 10)
        self._text(pdf, LEFT_X, top + 35, inv.notes)


def build_invoice_pdf(inv: InvoiceViewModel) -> bytes:
    """Render the document in memory; any drawing error becomes RenderFailure."""
    try:
        return InvoicePdfGenerator().render(inv)
    except Exception as e:
        _log.error("PDF generation failed for sale %s: %s", inv.sale_id, e)
        raise RenderFailure(f"Failed to generate PDF: {e}") from e


def save_invoice_pdf(inv: InvoiceViewModel, directory: str | Path) -> Path:
    """
    Generate the invoice and write it as invoice-<id8>.pdf in `directory`.

    The bytes are produced completely before anything touches the disk and
    land via a temp file + atomic rename, so a failure emits no file.
    """
    data = build_invoice_pdf(inv)
    directory = Path(directory)
    target = directory / invoice_file_name(inv.sale_id)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(suffix=".pdf", prefix=".invoice_", dir=str(directory))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        except OSError:
            try:
                os.remove(tmp)
            except OSError:
                pass
            raise
    except OSError as e:
        _log.error("could not write %s: %s", target, e)
        raise RenderFailure(f"Could not save {target.name}: {e}") from e
    _log.info("invoice PDF written to %s (%d bytes)", target, len(data))
    return target
