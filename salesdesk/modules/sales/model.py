from datetime import datetime

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex, QSortFilterProxyModel

from ...api.repositories.sales_repo import Sale
from ...utils.helpers import fmt_currency, fmt_local_date, short_id


class SalesTableModel(QAbstractTableModel):
    HEADERS = ["Sale ID", "Customer", "Items", "Total", "Payment Method", "Date"]

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
                f"{short_id(s.sale_id)}...",
                s.customer_id,
                f"{s.item_count} items",
                fmt_currency(s.final_amount),
                s.payment_method,
                fmt_local_date(s.created_at),
            ][c]
        if role == Qt.UserRole:
            return [
                s.sale_id,
                s.customer_id.lower(),
                s.item_count,
                s.final_amount,
                s.payment_method,
                s.created_at or datetime.min,
            ][c]
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


class SalesFilterProxy(QSortFilterProxyModel):
    """Case-insensitive match on the customer id."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._needle = ""
        self.setSortRole(Qt.UserRole)

    def set_search(self, text: str):
        self._needle = (text or "").strip().lower()
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row, source_parent):
        if not self._needle:
            return True
        model = self.sourceModel()
        try:
            sale = model.at(source_row)
        except AttributeError:
            return True
        return self._needle in sale.customer_id.lower()

    def visible_sales(self) -> list[Sale]:
        src = self.sourceModel()
        return [src.at(self.mapToSource(self.index(r, 0)).row()) for r in range(self.rowCount())]
