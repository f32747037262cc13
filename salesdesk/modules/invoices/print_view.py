# salesdesk/modules/invoices/print_view.py
"""
Print layout for a single invoice.

The page is static: it loads the sale by id, renders the print template and,
once the data is in, opens the print flow a single time after a short delay
so the layout has painted. A missing sale shows a not-found page and never
prints.
"""
from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import Qt, QTimer, QUrl, Signal
from PySide6.QtGui import QDesktopServices, QTextDocument
from PySide6.QtPrintSupport import QPrintDialog, QPrinter, QPrinterInfo
from PySide6.QtWidgets import QTextBrowser, QVBoxLayout, QWidget

from ...api import run
from ...api.client import ApiClient
from ...constants import PRINT_DELAY_MS
from ...errors import DomainError, FetchFailure, NotFound
from ...utils.helpers import short_id
from ...utils.ui_helpers import error, info
from .assembler import InvoiceViewModel, load_invoice
from .rendering import export_print_pdf, render_not_found_html, render_print_html

_log = logging.getLogger(__name__)


class InvoicePrintView(QWidget):
    # Emitted with the sale id right after the print flow was started.
    printStarted = Signal(str)

    def __init__(
        self,
        client: ApiClient,
        sale_id: str,
        parent: QWidget | None = None,
        *,
        print_delay_ms: int = PRINT_DELAY_MS,
        print_flow: Optional[Callable[["InvoicePrintView"], None]] = None,
    ):
        super().__init__(parent)
        self.client = client
        self.sale_id = sale_id
        self.print_delay_ms = print_delay_ms
        self._print_flow = print_flow or InvoicePrintView.print_document

        self.invoice: InvoiceViewModel | None = None
        self.html: str = ""
        # Set once the print flow has run; never reset for this view.
        self._print_triggered = False
        self._print_scheduled = False

        self.setWindowTitle(f"Print invoice {short_id(sale_id)}")
        self.resize(820, 1000)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        self.page = QTextBrowser()
        self.page.setTextInteractionFlags(Qt.NoTextInteraction)
        self.page.setOpenLinks(False)
        lay.addWidget(self.page)

    # ---- loading ----------------------------------------------------------

    def load(self) -> bool:
        """Fetch and render; schedule printing on success. Returns True when loaded."""
        self.page.setHtml("<p>Loading invoice…</p>")
        try:
            inv = run(load_invoice(self.client, self.sale_id))
        except NotFound:
            _log.warning("print requested for unknown sale %s", self.sale_id)
            self.invoice = None
            self.html = render_not_found_html(self.sale_id)
            self.page.setHtml(self.html)
            error(self, "Invoice not found", "The requested invoice could not be found.")
            return False
        except FetchFailure as e:
            self.invoice = None
            self.html = ""
            self.page.setHtml("<h2>Failed to load invoice data.</h2>")
            error(self, "Error", f"Failed to load invoice data. {e}")
            return False

        self.invoice = inv
        self.html = render_print_html(inv)
        self.page.setHtml(self.html)
        self._schedule_print()
        return True

    # ---- print trigger ----------------------------------------------------

    @property
    def print_triggered(self) -> bool:
        return self._print_triggered

    def _schedule_print(self) -> None:
        if self._print_triggered or self._print_scheduled:
            return
        self._print_scheduled = True
        QTimer.singleShot(self.print_delay_ms, self._trigger_print)

    def _trigger_print(self) -> None:
        if self._print_triggered or self.invoice is None:
            return
        self._print_triggered = True
        _log.info("opening print flow for sale %s", self.sale_id)
        try:
            self._print_flow(self)
        except DomainError as e:
            error(self, "Print Error", str(e))
            return
        self.printStarted.emit(self.sale_id)

    # ---- print flows ------------------------------------------------------

    def print_document(self) -> None:
        """
        System print dialog when a printer is installed; otherwise export the
        print layout to PDF and hand it to the default viewer for printing.
        """
        if not QPrinterInfo.availablePrinters():
            self.print_via_pdf()
            return
        printer = QPrinter(QPrinter.HighResolution)
        printer.setDocName(f"Invoice_{short_id(self.sale_id)}")
        dlg = QPrintDialog(printer, self)
        if dlg.exec() == QPrintDialog.Accepted:
            doc = QTextDocument()
            doc.setHtml(self.html)
            doc.print_(printer)

    def print_via_pdf(self, directory: str | Path | None = None) -> Path:
        pdf_dir = Path(directory) if directory else Path(tempfile.gettempdir()) / "salesdesk_print"
        target = export_print_pdf(self.html, pdf_dir / f"print-{short_id(self.sale_id)}.pdf")
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(str(target))):
            info(self, "Print", f"PDF saved to: {target}. Please open it to print.")
        return target
