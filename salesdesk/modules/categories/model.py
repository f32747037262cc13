from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...api.repositories.categories_repo import Category


class CategoriesTableModel(QAbstractTableModel):
    HEADERS = ["Name", "Description", "Products"]

    def __init__(self, rows: list[Category] | None = None):
        super().__init__()
        self._rows = rows or []

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        c = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [c.name, c.description, str(c.product_count)][index.column()]
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Category:
        return self._rows[row]

    def replace(self, rows: list[Category]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
