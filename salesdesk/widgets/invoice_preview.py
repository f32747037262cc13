from PySide6.QtWidgets import QWidget, QVBoxLayout, QToolBar, QTextBrowser
from PySide6.QtCore import Signal
from PySide6.QtGui import QAction, QKeySequence, QShortcut

from ..modules.invoices.assembler import InvoiceViewModel
from ..modules.invoices.rendering import render_invoice_html


class InvoicePreview(QWidget):
    """
    On-screen invoice. Print and Download only hand the sale id over; the
    print view and the PDF generator load their own copy of the data.
    """
    printRequested = Signal(str)
    downloadRequested = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._sale_id: str | None = None
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QToolBar()
        layout.addWidget(toolbar)

        self.print_action = QAction("Print", self)
        self.print_action.triggered.connect(self.print_invoice)
        toolbar.addAction(self.print_action)

        self.download_action = QAction("Download", self)
        self.download_action.triggered.connect(self.download_invoice)
        toolbar.addAction(self.download_action)

        print_shortcut = QShortcut(QKeySequence("Ctrl+P"), self)
        print_shortcut.activated.connect(self.print_invoice)

        self.web_view = QTextBrowser()
        self.web_view.setOpenExternalLinks(False)
        layout.addWidget(self.web_view)

        self.clear()

    @property
    def sale_id(self) -> str | None:
        return self._sale_id

    def set_invoice(self, inv: InvoiceViewModel):
        self._sale_id = inv.sale_id
        self.web_view.setHtml(render_invoice_html(inv))
        self._sync_actions()

    def clear(self, message: str = "Select an invoice to preview it here."):
        self._sale_id = None
        self.web_view.setHtml(f"<p style='color:#6B7280'>{message}</p>")
        self._sync_actions()

    def _sync_actions(self):
        enabled = self._sale_id is not None
        self.print_action.setEnabled(enabled)
        self.download_action.setEnabled(enabled)

    def print_invoice(self):
        if self._sale_id:
            self.printRequested.emit(self._sale_id)

    def download_invoice(self):
        if self._sale_id:
            self.downloadRequested.emit(self._sale_id)
