# salesdesk/modules/invoices/rendering.py
"""HTML rendering of invoices (screen and print layouts) and print-to-PDF export."""
from __future__ import annotations

import logging
import os
import tempfile
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...config import TEMPLATES_DIR
from ...constants import TEMPLATE_NOT_FOUND, TEMPLATE_PRINT, TEMPLATE_SCREEN
from ...errors import RenderFailure
from .assembler import InvoiceViewModel

_log = logging.getLogger(__name__)

# CSS applied on top of the print template when exporting through WeasyPrint.
_PRINT_PDF_CSS = """
    @page {
        margin: 10mm;
        size: A4;
    }
    body {
        margin: 0 !important;
        padding: 0 !important;
        width: 100% !important;
    }
"""


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def render_invoice_html(inv: InvoiceViewModel, template: str = TEMPLATE_SCREEN) -> str:
    return _environment().get_template(template).render(inv=inv)


def render_print_html(inv: InvoiceViewModel) -> str:
    return render_invoice_html(inv, TEMPLATE_PRINT)


def render_not_found_html(sale_id: str) -> str:
    return _environment().get_template(TEMPLATE_NOT_FOUND).render(sale_id=sale_id)


def export_print_pdf(html: str, target: str | Path) -> Path:
    """
    Write the print layout to a PDF with WeasyPrint.

    The PDF is produced in a temp file beside the target and moved into
    place only when complete, so a failure leaves nothing behind.
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(suffix=".pdf", prefix=".print_", dir=str(target.parent))
    os.close(fd)
    try:
        from weasyprint import CSS, HTML

        HTML(string=html).write_pdf(tmp, stylesheets=[CSS(string=_PRINT_PDF_CSS)])
        os.replace(tmp, target)
    except Exception as e:
        _log.error("print-layout PDF export failed for %s: %s", target, e)
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise RenderFailure(f"Could not export the print layout: {e}") from e
    _log.info("print layout exported to %s", target)
    return target
