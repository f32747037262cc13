import logging

from PySide6.QtCore import Qt, QSortFilterProxyModel, QRegularExpression
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...api import run
from ...api.client import ApiClient
from ...api.repositories.categories_repo import CategoriesRepo, Category
from ...errors import CategoryNotEmpty, FetchFailure
from ...utils.ui_helpers import confirm, error, info
from .form import CategoryForm
from .model import CategoriesTableModel
from .view import CategoriesView

_log = logging.getLogger(__name__)


class CategoriesController(BaseModule):
    def __init__(self, client: ApiClient):
        super().__init__()
        self.repo = CategoriesRepo(client)
        self.view = CategoriesView()
        self.base_model = CategoriesTableModel([])
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base_model)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.view.table.setModel(self.proxy)
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
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.btn_del.clicked.connect(self._delete)
        self.view.search.textChanged.connect(self._apply_filter)
        self._wired = True

    def _reload(self):
        try:
            rows = run(self.repo.list_categories())
        except FetchFailure as e:
            _log.error("failed to load categories: %s", e)
            rows = []
            error(self.view, "Error", f"Failed to load categories. {e}")
        self.base_model.replace(rows)
        self.view.table.resizeColumnsToContents()

    def _apply_filter(self, text: str):
        self.proxy.setFilterRegularExpression(
            QRegularExpression(QRegularExpression.escape(text))
        )

    def _selected(self) -> Category | None:
        idxs = self.view.table.selectionModel().selectedRows()
        if not idxs:
            return None
        src = self.proxy.mapToSource(idxs[0])
        return self.base_model.at(src.row())

    def _add(self):
        dlg = CategoryForm(self.view)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            cat = run(self.repo.create(**data))
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to create category. {e}")
            return
        info(self.view, "Saved", f"Category '{cat.name}' created.")
        self._reload()

    def _edit(self):
        cat = self._selected()
        if cat is None:
            info(self.view, "Select", "Please select a category to edit.")
            return
        dlg = CategoryForm(self.view, initial=cat)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            run(self.repo.update(cat.category_id, **data))
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to update category. {e}")
            return
        info(self.view, "Saved", f"Category '{data['name']}' updated.")
        self._reload()

    def delete_category(self, cat: Category) -> bool:
        """Delete unless it still has products; reports the outcome either way."""
        try:
            run(self.repo.delete(cat))
        except CategoryNotEmpty as e:
            error(self.view, "Cannot delete category", str(e))
            return False
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to delete category. {e}")
            return False
        info(self.view, "Deleted", f"Category '{cat.name}' deleted.")
        self._reload()
        return True

    def _delete(self):
        cat = self._selected()
        if cat is None:
            info(self.view, "Select", "Please select a category to delete.")
            return
        if cat.can_delete() and not confirm(
            self.view, "Delete category", f"Delete category '{cat.name}'?"
        ):
            return
        self.delete_category(cat)
