import logging
from decimal import Decimal

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...api import run
from ...api.client import ApiClient
from ...api.repositories.products_repo import ProductsRepo
from ...api.repositories.sales_repo import Sale, SalesRepo
from ...errors import FetchFailure
from ...utils.helpers import fmt_currency, short_id
from ...utils.ui_helpers import error, info
from .form import SaleForm
from .model import SalesFilterProxy, SalesTableModel
from .view import SalesView

_log = logging.getLogger(__name__)


def summarize(sales: list[Sale]) -> tuple[Decimal, Decimal, int]:
    """(total revenue, average sale, items sold) over the given sales."""
    revenue = sum((s.final_amount for s in sales), Decimal("0"))
    average = revenue / len(sales) if sales else Decimal("0")
    units = sum(s.units_sold for s in sales)
    return revenue, average, units


class SalesController(BaseModule):
    def __init__(self, client: ApiClient):
        super().__init__()
        self.client = client
        self.sales = SalesRepo(client)
        self.products = ProductsRepo(client)
        self.view = SalesView()
        self.base = SalesTableModel([])
        self.proxy = SalesFilterProxy(self.view)
        self.proxy.setSourceModel(self.base)
        self.view.tbl.setModel(self.proxy)
        self.last_created: Sale | None = None
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
        self.view.btn_refresh.clicked.connect(self._reload)
        self.view.search.textChanged.connect(self._apply_filter)
        self._wired = True

    def _reload(self):
        try:
            rows = run(self.sales.list_sales())
        except FetchFailure as e:
            _log.error("failed to load sales: %s", e)
            rows = []
            error(self.view, "Error", f"Failed to load sales. {e}")
        self.base.replace(rows)
        self.view.tbl.resizeColumnsToContents()
        self._update_summary()

    def _apply_filter(self, text: str):
        self.proxy.set_search(text)
        self._update_summary()

    def _update_summary(self):
        visible = self.proxy.visible_sales()
        revenue, average, units = summarize(visible)
        self.view.card_revenue.set_value(fmt_currency(revenue))
        self.view.card_average.set_value(fmt_currency(average))
        self.view.card_items.set_value(str(units))
        self.view.empty_label.setText("" if visible else "No sales found")

    def _open_form(self) -> SaleForm | None:
        try:
            catalog = run(self.products.list_products())
        except FetchFailure as e:
            error(self.view, "Error", f"Failed to load products. {e}")
            return None
        return SaleForm(self.view, products=catalog)

    def _add(self):
        dlg = self._open_form()
        if dlg is None or not dlg.exec():
            return
        payload = dlg.payload()
        if payload:
            self.create_sale(payload)

    def create_sale(self, payload: dict) -> Sale | None:
        """POST a validated form payload and report the server's figures."""
        try:
            sale = run(self.sales.create(**payload))
        except FetchFailure as e:
            _log.error("sale creation failed: %s", e)
            error(self.view, "Error", "Failed to create the sale. Please try again.")
            return None
        self.last_created = sale
        _log.info("sale %s created for %s", sale.sale_id, sale.customer_id)
        info(
            self.view,
            "Sale created",
            f"Sale {short_id(sale.sale_id)} created. Total: {fmt_currency(sale.final_amount)}",
        )
        self._reload()
        return sale
