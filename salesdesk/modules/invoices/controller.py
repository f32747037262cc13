from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...api import run
from ...api.client import ApiClient
from ...config import DOWNLOAD_DIR
from ...constants import DOWNLOAD_DELAY_MS, PRINT_DELAY_MS
from ...errors import FetchFailure, NotFound, RenderFailure
from ...utils.ui_helpers import error, info
from .assembler import InvoiceViewModel, fetch_snapshot, load_invoice
from .date_filter import DateBucket
from .model import InvoiceFilterProxy, InvoicesTableModel
from .pdf_generator import save_invoice_pdf
from .print_view import InvoicePrintView
from .view import InvoicesView

_log = logging.getLogger(__name__)


class InvoicesController(BaseModule):
    """
    Invoice list with date buckets and search, plus the selected invoice's
    preview. Print opens a separate print view; Download writes the PDF
    into the download directory.
    """

    def __init__(
        self,
        client: ApiClient,
        *,
        download_dir: str | Path | None = None,
        print_delay_ms: int = PRINT_DELAY_MS,
        download_delay_ms: int = DOWNLOAD_DELAY_MS,
        print_flow: Optional[Callable[[InvoicePrintView], None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__()
        self.client = client
        self.download_dir = Path(download_dir) if download_dir else DOWNLOAD_DIR
        self.print_delay_ms = print_delay_ms
        self.download_delay_ms = download_delay_ms
        self.print_flow = print_flow
        self.view = InvoicesView()
        self.base = InvoicesTableModel([])
        self.proxy = InvoiceFilterProxy(self.view, clock=clock)
        self.proxy.setSourceModel(self.base)
        self.view.tbl.setModel(self.proxy)
        self.print_views: list[InvoicePrintView] = []
        self.last_saved: Path | None = None
        self._wired = False
        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self):
        self._reload()

    def _connect_signals(self):
        if self._wired:
            return
        self.view.btn_refresh.clicked.connect(self._reload)
        self.view.search.textChanged.connect(self._on_search)
        self.view.bucketChanged.connect(self._on_bucket)
        self.view.custom_date.dateChanged.connect(self._on_custom_date)
        self.view.custom_date.editingFinished.connect(
            lambda: self._on_custom_date(self.view.custom_date.date())
        )
        self.view.tbl.selectionModel().selectionChanged.connect(self._on_select)
        self.view.preview.printRequested.connect(self.print_invoice)
        self.view.preview.downloadRequested.connect(self.download_invoice)
        self._wired = True

    # ---- list ----------------------------------------------------------

    def _reload(self):
        try:
            sales, _products = run(fetch_snapshot(self.client))
        except FetchFailure as e:
            _log.error("failed to load invoices: %s", e)
            self.base.replace([])
            self.view.preview.clear()
            self.view.empty_label.setText("Failed to load invoice data.")
            error(self.view, "Error", "Failed to load invoice data.")
            return
        self.base.replace(sales)
        self.view.tbl.resizeColumnsToContents()
        self.view.preview.clear()
        self._update_empty_label()

    def _update_empty_label(self):
        if self.proxy.rowCount() == 0:
            self.view.empty_label.setText("No invoices found")
        else:
            self.view.empty_label.setText(f"{self.proxy.rowCount()} invoice(s)")

    def _on_search(self, text: str):
        self.proxy.set_search(text)
        self._update_empty_label()

    def _on_bucket(self, value: str):
        bucket = DateBucket(value)
        if bucket is DateBucket.CUSTOM:
            # no date until one is picked
            self.proxy.set_custom_date(None)
        else:
            self.proxy.set_bucket(bucket)
        self._update_empty_label()

    def _on_custom_date(self, qdate):
        if self.view.current_bucket() is not DateBucket.CUSTOM:
            return
        self.proxy.set_custom_date(qdate.toPython())
        self._update_empty_label()

    def visible_sale_ids(self) -> list[str]:
        out = []
        for r in range(self.proxy.rowCount()):
            src = self.proxy.mapToSource(self.proxy.index(r, 0))
            out.append(self.base.at(src.row()).sale_id)
        return out

    def _selected_sale_id(self) -> str | None:
        idxs = self.view.tbl.selectionModel().selectedRows()
        if not idxs:
            return None
        src = self.proxy.mapToSource(idxs[0])
        return self.base.at(src.row()).sale_id

    # ---- preview -------------------------------------------------------

    def _on_select(self, *_):
        sale_id = self._selected_sale_id()
        if sale_id is None:
            self.view.preview.clear()
            return
        self.open_invoice(sale_id)

    def open_invoice(self, sale_id: str) -> InvoiceViewModel | None:
        try:
            inv = run(load_invoice(self.client, sale_id))
        except NotFound:
            _log.warning("invoice %s no longer exists", sale_id)
            error(self.view, "Invoice not found", "The requested invoice could not be found.")
            self.view.preview.clear()
            self._reload()
            return None
        except FetchFailure as e:
            _log.error("failed to load invoice %s: %s", sale_id, e)
            self.view.preview.clear("Failed to load invoice data.")
            error(self.view, "Error", "Failed to load invoice data.")
            return None
        self.view.preview.set_invoice(inv)
        return inv

    # ---- actions -------------------------------------------------------

    def print_invoice(self, sale_id: str) -> InvoicePrintView:
        info(self.view, "Print initiated", "The print dialog should open shortly.")
        pv = InvoicePrintView(
            self.client,
            sale_id,
            print_delay_ms=self.print_delay_ms,
            print_flow=self.print_flow,
        )
        self.print_views.append(pv)
        pv.show()
        pv.load()
        return pv

    def download_invoice(self, sale_id: str):
        info(self.view, "Download started", "Your invoice PDF is being generated.")
        QTimer.singleShot(self.download_delay_ms, lambda: self.save_pdf(sale_id))

    def save_pdf(self, sale_id: str) -> Path | None:
        try:
            inv = run(load_invoice(self.client, sale_id))
            path = save_invoice_pdf(inv, self.download_dir)
        except NotFound:
            error(self.view, "Invoice not found", "The requested invoice could not be found.")
            return None
        except FetchFailure as e:
            _log.error("download of %s failed: %s", sale_id, e)
            error(self.view, "Error", "Failed to load invoice data.")
            return None
        except RenderFailure as e:
            _log.error("download of %s failed: %s", sale_id, e)
            error(self.view, "Error", f"Failed to generate the invoice PDF. {e}")
            return None
        self.last_saved = path
        _log.info("invoice %s saved to %s", sale_id, path)
        info(self.view, "Download complete", f"Saved to: {path}")
        return path
