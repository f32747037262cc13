from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel,
    QSplitter, QButtonGroup, QDateEdit
)
from PySide6.QtCore import Qt, QDate, Signal

from ...widgets.table_view import TableView
from ...widgets.invoice_preview import InvoicePreview
from .date_filter import DateBucket


class InvoicesView(QWidget):
    # Emits the DateBucket value of the toggled button.
    bucketChanged = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        # --- Date buckets ---
        bucketbar = QHBoxLayout()
        bucketbar.addWidget(QLabel("Show:"))
        self._bucket_group = QButtonGroup(self)
        self._bucket_group.setExclusive(True)
        self.bucket_buttons: dict[DateBucket, QPushButton] = {}
        for bucket in DateBucket:
            b = QPushButton(bucket.label)
            b.setCheckable(True)
            b.setProperty("bucket", bucket.value)
            self._bucket_group.addButton(b)
            self.bucket_buttons[bucket] = b
            bucketbar.addWidget(b)
        self.bucket_buttons[DateBucket.ALL].setChecked(True)

        self.custom_date = QDateEdit()
        self.custom_date.setCalendarPopup(True)
        self.custom_date.setDisplayFormat("yyyy-MM-dd")
        self.custom_date.setDate(QDate.currentDate())
        self.custom_date.setEnabled(False)
        bucketbar.addWidget(self.custom_date)
        bucketbar.addStretch(1)
        root.addLayout(bucketbar)

        # --- Toolbar ---
        bar = QHBoxLayout()
        self.btn_refresh = QPushButton("Refresh")
        bar.addWidget(self.btn_refresh)
        bar.addStretch(1)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search invoices (customer, sale id)…")
        bar.addWidget(QLabel("Search:"))
        bar.addWidget(self.search, 2)
        root.addLayout(bar)

        # --- List | preview ---
        split = QSplitter(Qt.Horizontal)
        self.tbl = TableView()
        split.addWidget(self.tbl)
        self.preview = InvoicePreview()
        split.addWidget(self.preview)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

        self.empty_label = QLabel("")
        self.empty_label.setStyleSheet("color: #6B7280;")
        root.addWidget(self.empty_label)

        self._bucket_group.buttonToggled.connect(self._on_bucket_toggled)

    def current_bucket(self) -> DateBucket:
        b = self._bucket_group.checkedButton()
        return DateBucket(b.property("bucket")) if b else DateBucket.ALL

    def set_bucket(self, bucket: DateBucket | str):
        self.bucket_buttons[DateBucket(bucket)].setChecked(True)

    def _on_bucket_toggled(self, button, checked: bool):
        if not checked:
            return
        bucket = DateBucket(button.property("bucket"))
        self.custom_date.setEnabled(bucket is DateBucket.CUSTOM)
        self.bucketChanged.emit(bucket.value)
