from decimal import Decimal

from PySide6.QtWidgets import (
    QDialog, QFormLayout, QDialogButtonBox, QVBoxLayout, QHBoxLayout, QComboBox,
    QLineEdit, QLabel, QGroupBox, QTableWidget, QTableWidgetItem, QPushButton,
    QAbstractItemView, QSpinBox, QHeaderView, QGridLayout
)
from PySide6.QtCore import Qt

from ...api.repositories.products_repo import Product
from ...api.repositories.sales_repo import SaleItem
from ...constants import DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS
from ...errors import ValidationFailure
from ...utils.helpers import fmt_currency, fmt_percent
from ...utils.ui_helpers import info
from ...utils.validators import non_empty, try_parse_decimal
from .calculations import line_amount, sale_totals


class SaleForm(QDialog):
    """
    New sale: customer id, payment method, order discount % and product lines.

    Picking a product copies its current price into the line; later catalog
    changes do not touch an open form. Totals below the grid are a preview
    only, the server computes the stored figures.
    """
    COLS = ["#", "Product", "Quantity", "Unit Price", "Amount", ""]

    def __init__(self, parent=None, products: list[Product] | None = None):
        super().__init__(parent)
        self.setWindowTitle("New Sale")
        self.setModal(True)
        self.products = list(products or [])
        self._by_id = {p.product_id: p for p in self.products}
        self._payload = None

        # --- header ---
        self.edt_customer = QLineEdit()
        self.edt_customer.setPlaceholderText("Customer ID")
        self.cmb_method = QComboBox()
        self.cmb_method.addItems(list(PAYMENT_METHODS))
        self.cmb_method.setCurrentText(DEFAULT_PAYMENT_METHOD)
        self.txt_discount = QLineEdit()
        self.txt_discount.setPlaceholderText("0")
        for w in (self.edt_customer, self.cmb_method, self.txt_discount):
            w.setMaximumWidth(320)

        form = QFormLayout()
        form.addRow("Customer ID*", self.edt_customer)
        form.addRow("Payment Method", self.cmb_method)
        form.addRow("Discount (%)", self.txt_discount)

        # --- items ---
        box = QGroupBox("Items")
        ib = QVBoxLayout(box)
        self.tbl = QTableWidget(0, len(self.COLS))
        self.tbl.setHorizontalHeaderLabels(self.COLS)
        self.tbl.verticalHeader().setVisible(False)
        self.tbl.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.tbl.setEditTriggers(QAbstractItemView.NoEditTriggers)
        header = self.tbl.horizontalHeader()
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        header.resizeSection(0, 32)
        ib.addWidget(self.tbl, 1)

        self.btn_add_row = QPushButton("Add Item")
        self.btn_add_row.clicked.connect(lambda: self._add_row())
        row_bar = QHBoxLayout()
        row_bar.addWidget(self.btn_add_row)
        row_bar.addStretch(1)
        ib.addLayout(row_bar)

        # --- totals preview ---
        tot = QGridLayout()
        self.lab_sub = QLabel("$0.00")
        self.lab_disc_caption = QLabel("Discount (0%)")
        self.lab_disc = QLabel("-$0.00")
        self.lab_total = QLabel("$0.00")
        self.lab_total.setStyleSheet("font-weight: bold;")
        for r, (cap, lab) in enumerate(
            ((QLabel("Subtotal"), self.lab_sub),
             (self.lab_disc_caption, self.lab_disc),
             (QLabel("Total"), self.lab_total))
        ):
            lab.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            tot.addWidget(cap, r, 0)
            tot.addWidget(lab, r, 1)
        tot.setColumnStretch(0, 1)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.button(QDialogButtonBox.Ok).setText("Create Sale")
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(box, 1)
        root.addLayout(tot)
        root.addWidget(btns)

        self.txt_discount.textChanged.connect(lambda _=None: self._refresh_totals())

        # start with one empty line
        self._add_row()
        self.resize(760, 520)

    # ---- rows ---------------------------------------------------------

    def _add_row(self, product_id: str | None = None, quantity: int = 1):
        r = self.tbl.rowCount()
        self.tbl.insertRow(r)

        num = QTableWidgetItem(str(r + 1))
        self.tbl.setItem(r, 0, num)

        cmb = QComboBox()
        cmb.addItem("Select product…", None)
        for p in self.products:
            cmb.addItem(f"{p.name} ({fmt_currency(p.price)})", p.product_id)
        self.tbl.setCellWidget(r, 1, cmb)

        qty = QSpinBox()
        qty.setRange(1, 1_000_000)
        qty.setValue(max(1, int(quantity)))
        self.tbl.setCellWidget(r, 2, qty)

        unit = QTableWidgetItem("")
        unit.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.tbl.setItem(r, 3, unit)

        amount = QTableWidgetItem("")
        amount.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.tbl.setItem(r, 4, amount)

        btn = QPushButton("✕")
        btn.clicked.connect(lambda: self._remove_row(self._row_of(cmb)))
        self.tbl.setCellWidget(r, 5, btn)

        def on_prod():
            row = self._row_of(cmb)
            if row < 0:
                return
            p = self._by_id.get(cmb.currentData())
            # price snapshot
            self.tbl.item(row, 3).setData(Qt.UserRole, str(p.price) if p else None)
            self._recalc_row(row)
            self._refresh_totals()

        def on_qty():
            row = self._row_of(cmb)
            if row >= 0:
                self._recalc_row(row)
                self._refresh_totals()

        cmb.currentIndexChanged.connect(lambda _=None: on_prod())
        qty.valueChanged.connect(lambda _=None: on_qty())

        if product_id is not None:
            i = cmb.findData(product_id)
            if i >= 0:
                cmb.setCurrentIndex(i)
        self._recalc_row(r)
        self._refresh_totals()

    def _row_of(self, combo) -> int:
        for r in range(self.tbl.rowCount()):
            if self.tbl.cellWidget(r, 1) is combo:
                return r
        return -1

    def _remove_row(self, r: int):
        if r < 0:
            return
        self.tbl.removeRow(r)
        for i in range(self.tbl.rowCount()):
            self.tbl.item(i, 0).setText(str(i + 1))
        self._refresh_totals()

    def _recalc_row(self, r: int):
        price = self._price(r)
        if price is None:
            self.tbl.item(r, 3).setText("")
            self.tbl.item(r, 4).setText("")
            return
        item = SaleItem(product_id="", quantity=self._qty(r), price=price)
        self.tbl.item(r, 3).setText(fmt_currency(price))
        self.tbl.item(r, 4).setText(fmt_currency(line_amount(item)))

    def _qty(self, r: int) -> int:
        return int(self.tbl.cellWidget(r, 2).value())

    def _price(self, r: int) -> Decimal | None:
        raw = self.tbl.item(r, 3).data(Qt.UserRole)
        return Decimal(raw) if raw else None

    # ---- totals ---------------------------------------------------------

    def _discount_or_zero(self) -> Decimal:
        txt = (self.txt_discount.text() or "").strip()
        if not txt:
            return Decimal("0")
        ok, val = try_parse_decimal(txt)
        return val if ok and val.is_finite() else Decimal("0")

    def priced_items(self) -> list[SaleItem]:
        """Lines that already have a product picked."""
        out = []
        for r in range(self.tbl.rowCount()):
            pid = self.tbl.cellWidget(r, 1).currentData()
            price = self._price(r)
            if pid and price is not None:
                out.append(SaleItem(product_id=pid, quantity=self._qty(r), price=price))
        return out

    def _refresh_totals(self):
        pct = self._discount_or_zero()
        totals = sale_totals(self.priced_items(), pct)
        self.lab_sub.setText(fmt_currency(totals.subtotal))
        self.lab_disc_caption.setText(f"Discount ({fmt_percent(pct)}%)")
        self.lab_disc.setText(fmt_currency(totals.discount_amount, negative=True))
        self.lab_total.setText(fmt_currency(totals.final_amount))

    # ---- validation / payload -------------------------------------------

    def validate(self) -> dict:
        """Returns the sale fields or raises ValidationFailure."""
        customer = (self.edt_customer.text() or "").strip()
        if not non_empty(customer):
            raise ValidationFailure("Please enter a customer ID", field="customer_id")

        txt = (self.txt_discount.text() or "").strip()
        if txt:
            ok, pct = try_parse_decimal(txt)
            if not (ok and pct.is_finite() and Decimal("0") <= pct <= Decimal("100")):
                raise ValidationFailure(
                    "Discount must be a number between 0 and 100", field="discount_percentage"
                )
        else:
            pct = Decimal("0")

        if self.tbl.rowCount() == 0:
            raise ValidationFailure("Please add at least one item", field="items")

        items = []
        for r in range(self.tbl.rowCount()):
            pid = self.tbl.cellWidget(r, 1).currentData()
            price = self._price(r)
            if not pid or price is None:
                raise ValidationFailure("Please select a product for each item", field="items", row=r)
            qty = self._qty(r)
            if qty < 1:
                raise ValidationFailure("Quantity must be at least 1", field="quantity", row=r)
            items.append(SaleItem(product_id=pid, quantity=qty, price=price))

        return {
            "customer_id": customer,
            "items": items,
            "payment_method": self.cmb_method.currentText(),
            "discount_percentage": pct,
        }

    def _warn(self, title: str, message: str, focus_widget=None, row_to_select: int | None = None):
        info(self, title, message)
        if focus_widget:
            focus_widget.setFocus()
        if row_to_select is not None and 0 <= row_to_select < self.tbl.rowCount():
            self.tbl.clearSelection()
            self.tbl.selectRow(row_to_select)

    def get_payload(self) -> dict | None:
        try:
            return self.validate()
        except ValidationFailure as e:
            focus = {
                "customer_id": self.edt_customer,
                "discount_percentage": self.txt_discount,
            }.get(e.field)
            self._warn("Invalid sale", str(e), focus, e.row)
            return None

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
