from PySide6.QtWidgets import (
    QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QVBoxLayout, QHBoxLayout,
    QComboBox, QLabel
)

from ...api.repositories.categories_repo import Category
from ...api.repositories.products_repo import Product
from ...utils.validators import (
    is_non_negative_int, is_non_negative_number, non_empty, try_parse_decimal, try_parse_int
)


class ProductForm(QDialog):
    def __init__(self, parent=None, categories: list[Category] | None = None, initial: Product | None = None):
        super().__init__(parent)
        self.setWindowTitle("Edit Product" if initial else "New Product")
        self.setModal(True)
        self._payload = None

        self.name = QLineEdit()
        self.price = QLineEdit()
        self.price.setPlaceholderText("0.00")
        self.stock = QLineEdit()
        self.stock.setPlaceholderText("0")
        self.desc = QLineEdit()
        self.category = QComboBox()
        self.category.addItem("(none)", None)
        for c in categories or []:
            self.category.addItem(c.name, c.category_id)

        field_width = 240
        for w in (self.name, self.price, self.stock, self.desc, self.category):
            w.setMaximumWidth(field_width)

        self.name_error = QLabel()
        self.price_error = QLabel()
        self.stock_error = QLabel()
        for lab in (self.name_error, self.price_error, self.stock_error):
            lab.setStyleSheet("color: red;")
            lab.setMaximumWidth(180)

        form = QFormLayout()
        for caption, edit, err in (
            ("Name*", self.name, self.name_error),
            ("Price*", self.price, self.price_error),
            ("Stock*", self.stock, self.stock_error),
        ):
            row = QHBoxLayout()
            row.addWidget(edit, 1)
            row.addWidget(err)
            form.addRow(caption, row)
        form.addRow("Category", self.category)
        form.addRow("Description", self.desc)

        if initial:
            self.name.setText(initial.name)
            self.price.setText(f"{initial.price:.2f}")
            self.stock.setText(str(initial.stock))
            self.desc.setText(initial.description)
            i = self.category.findData(initial.category_id)
            if i >= 0:
                self.category.setCurrentIndex(i)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)

    def get_payload(self) -> dict | None:
        ok = True
        name = (self.name.text() or "").strip()
        if not non_empty(name):
            self.name_error.setText("Name is required")
            ok = False
        else:
            self.name_error.setText("")

        price_txt = (self.price.text() or "").strip()
        if not is_non_negative_number(price_txt):
            self.price_error.setText("Enter a price ≥ 0")
            ok = False
        else:
            self.price_error.setText("")

        stock_txt = (self.stock.text() or "").strip() or "0"
        if not is_non_negative_int(stock_txt):
            self.stock_error.setText("Enter a whole number ≥ 0")
            ok = False
        else:
            self.stock_error.setText("")

        if not ok:
            return None
        return {
            "name": name,
            "price": try_parse_decimal(price_txt)[1],
            "description": (self.desc.text() or "").strip(),
            "stock": try_parse_int(stock_txt)[1],
            "category_id": self.category.currentData(),
        }

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
