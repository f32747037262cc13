from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex, QSortFilterProxyModel

from ...api.repositories.products_repo import Product
from ...utils.helpers import fmt_currency


class ProductsTableModel(QAbstractTableModel):
    HEADERS = ["Name", "Category", "Price", "Stock", "Description"]

    def __init__(self, rows: list[Product] | None = None, category_names: dict[str, str] | None = None):
        super().__init__()
        self._rows = rows or []
        self._category_names = category_names or {}

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def _category(self, p: Product) -> str:
        if not p.category_id:
            return ""
        return self._category_names.get(p.category_id, "")

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        p = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                p.name,
                self._category(p),
                fmt_currency(p.price),
                str(p.stock),
                p.description,
            ][c]
        if role == Qt.TextAlignmentRole and c in (2, 3):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Product:
        return self._rows[row]

    def replace(self, rows: list[Product], category_names: dict[str, str] | None = None):
        self.beginResetModel()
        self._rows = rows
        if category_names is not None:
            self._category_names = category_names
        self.endResetModel()

    # helper for proxy filtering
    def row_as_text(self, row: int) -> str:
        p = self._rows[row]
        return f"{p.product_id} {p.name} {self._category(p)} {p.description}"


class ProductFilterProxy(QSortFilterProxyModel):
    def filterAcceptsRow(self, source_row, source_parent):
        if not self.filterRegularExpression().pattern():
            return True
        model = self.sourceModel()
        try:
            text = model.row_as_text(source_row)
        except AttributeError:
            return True
        return self.filterRegularExpression().match(text).hasMatch()
