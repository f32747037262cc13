from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex, QSortFilterProxyModel

from ...api.repositories.sales_repo import Sale
from ...utils.helpers import fmt_currency, fmt_local_date, to_local
from .assembler import invoice_number
from .date_filter import DateBucket, DateRangeFilter


class InvoicesTableModel(QAbstractTableModel):
    HEADERS = ["Invoice #", "Customer", "Date", "Amount", "Status"]

    def __init__(self, rows: list[Sale] | None = None):
        super().__init__()
        self._rows = rows or []

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        s = self._rows[index.row()]
        c = index.column()
        if role == Qt.DisplayRole:
            return [
                invoice_number(s.sale_id),
                s.customer_id,
                fmt_local_date(s.created_at),
                fmt_currency(s.final_amount),
                "Paid",
            ][c]
        if role == Qt.UserRole:
            # sort keys
            when = to_local(s.created_at) if s.created_at else datetime.min
            return [s.sale_id, s.customer_id.lower(), when, s.final_amount, "paid"][c]
        if role == Qt.TextAlignmentRole and c == 3:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Sale:
        return self._rows[row]

    def replace(self, rows: list[Sale]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()


class InvoiceFilterProxy(QSortFilterProxyModel):
    """
    Applies the DateRangeFilter (bucket AND search text) to invoice rows.
    The controller changes the filter through the set_* methods.
    """

    def __init__(self, parent=None, *, clock: Optional[Callable[[], datetime]] = None):
        super().__init__(parent)
        self.filter = DateRangeFilter()
        self._clock = clock
        self.setSortRole(Qt.UserRole)

    def set_bucket(self, bucket: DateBucket | str):
        self.filter.select(bucket)
        self.invalidateFilter()

    def set_custom_date(self, day):
        self.filter.select_custom(day)
        self.invalidateFilter()

    def set_search(self, text: str):
        self.filter.set_search(text)
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row, source_parent):
        src = self.sourceModel()
        if not hasattr(src, "at"):
            return True
        now = self._clock() if self._clock else None
        return self.filter.accepts(src.at(source_row), now)

    def lessThan(self, left, right):
        a = left.data(Qt.UserRole)
        b = right.data(Qt.UserRole)
        try:
            return a < b
        except TypeError:
            return str(a) < str(b)
