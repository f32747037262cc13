import asyncio
import logging

from PySide6.QtCore import Qt, QRegularExpression
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...api import run
from ...api.client import ApiClient
from ...api.repositories.categories_repo import CategoriesRepo, Category
from ...api.repositories.products_repo import Product, ProductsRepo
from ...errors import FetchFailure
from ...utils.ui_helpers import confirm, error, info
from .form import ProductForm
from .model import ProductFilterProxy, ProductsTableModel
from .view import ProductView

_log = logging.getLogger(__name__)


class ProductController(BaseModule):
    def __init__(self, client: ApiClient):
        super().__init__()
        self.repo = ProductsRepo(client)
        self.categories_repo = CategoriesRepo(client)
        self.categories: list[Category] = []
        self.view = ProductView()
        self.base_model = ProductsTableModel([])
        self.proxy = ProductFilterProxy(self.view)
        self.proxy.setSourceModel(self.base_model)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.view.table.setModel(self.proxy)
        self._wired = False
        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self):
        self._reload()

    def _connect_signals(self):
        # Guard against double-connecting when controller/view is re-created
        if self._wired:
            return
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.btn_del.clicked.connect(self._delete)
        self.view.search.textChanged.connect(self._apply_filter)
        self.view.category.currentIndexChanged.connect(lambda _=None: self._reload_products())
        self._wired = True

    def current_category_id(self) -> str | None:
        return self.view.category.currentData()

    async def _fetch(self, category_id: str | None):
        return await asyncio.gather(
            self.categories_repo.list_categories(),
            self.repo.list_by_category(category_id),
        )

    def _reload(self):
        """Refresh the category filter and the product list together."""
        selected = self.current_category_id()
        try:
            cats, rows = run(self._fetch(selected))
        except FetchFailure as e:
            _log.error("failed to load products: %s", e)
            error(self.view, "Error", f"Failed to load products. {e}")
            cats, rows = [], []
        self.categories = cats

        combo = self.view.category
        combo.blockSignals(True)
        combo.clear()
        combo.addItem("All categories", None)
        for c in cats:
            combo.addItem(c.name, c.category_id)
        i = combo.findData(selected)
        combo.setCurrentIndex(i if i >= 0 else 0)
        combo.blockSignals(False)

        if selected is not None and combo.currentData() is None:
            # the selected category is gone
            self._reload_products()
            return
        self._show(rows)

    def _reload_products(self):
        try:
            rows = run(self.repo.list_by_category(self.current_category_id()))
        except FetchFailure as e:
            _log.error("failed to load products: %s", e)
            error(self.view, "Error", f"Failed to load products. {e}")
            rows = []
        self._show(rows)

    def _show(self, rows: list[Product]):
        names = {c.category_id: c.name for c in self.categories}
        self.base_model.replace(rows, names)
        self.view.table.resizeColumnsToContents()

    def _apply_filter(self, text: str):
        self.proxy.setFilterRegularExpression(
            QRegularExpression(QRegularExpression.escape(text), QRegularExpression.CaseInsensitiveOption)
        )

    def _selected(self) -> Product | None:
        idxs = self.view.table.selectionModel().selectedRows()
        if not idxs:
            return None
        src_index = self.proxy.mapToSource(idxs[0])
        return self.base_model.at(src_index.row())

    def _add(self):
        dlg = ProductForm(self.view, categories=self.categories)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            p = run(self.repo.create(**data))
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to create product. {e}")
            return
        info(self.view, "Saved", f"Product '{p.name}' created.")
        self._reload()

    def _edit(self):
        current = self._selected()
        if current is None:
            info(self.view, "Select", "Please select a product to edit.")
            return
        dlg = ProductForm(self.view, categories=self.categories, initial=current)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            run(self.repo.update(current.product_id, **data))
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to update product. {e}")
            return
        info(self.view, "Saved", f"Product '{data['name']}' updated.")
        self._reload()

    def delete_product(self, p: Product) -> bool:
        try:
            run(self.repo.delete(p.product_id))
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to delete product. {e}")
            return False
        info(self.view, "Deleted", f"Product '{p.name}' deleted.")
        self._reload()
        return True

    def _delete(self):
        p = self._selected()
        if p is None:
            info(self.view, "Select", "Please select a product to delete.")
            return
        if not confirm(self.view, "Delete product", f"Delete product '{p.name}'?"):
            return
        self.delete_product(p)
