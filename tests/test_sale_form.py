# tests/test_sale_form.py
from decimal import Decimal

import pytest

from salesdesk.api.repositories import Product
from salesdesk.errors import ValidationFailure
from salesdesk.modules.sales.form import SaleForm

D = Decimal


@pytest.fixture
def products():
    return [
        Product("p-1", "Widget", D("10.00"), "", 40, "c-1"),
        Product("p-2", "Gadget", D("5.50"), "", 12, "c-1"),
    ]


@pytest.fixture
def form(qtbot, products, notes):
    f = SaleForm(products=products)
    qtbot.addWidget(f)
    return f


def _pick(form, row, product_id, qty):
    cmb = form.tbl.cellWidget(row, 1)
    cmb.setCurrentIndex(cmb.findData(product_id))
    form.tbl.cellWidget(row, 2).setValue(qty)


def test_starts_with_one_empty_line_and_default_method(form):
    assert form.tbl.rowCount() == 1
    assert form.cmb_method.currentText() == "Credit Card"
    assert [form.cmb_method.itemText(i) for i in range(form.cmb_method.count())] == [
        "Credit Card", "Cash", "Bank Transfer",
    ]
    assert form.lab_total.text() == "$0.00"


def test_live_totals(form):
    _pick(form, 0, "p-1", 2)
    form._add_row("p-2", 1)
    form.txt_discount.setText("10")
    assert form.lab_sub.text() == "$25.50"
    assert form.lab_disc_caption.text() == "Discount (10%)"
    assert form.lab_disc.text() == "-$2.55"
    assert form.lab_total.text() == "$22.95"
    assert form.tbl.item(0, 4).text() == "$20.00"


def test_price_is_snapshotted_when_product_is_picked(form, products):
    _pick(form, 0, "p-1", 1)
    products[0].price = D("99.00")
    form.tbl.cellWidget(0, 2).setValue(3)
    assert form.tbl.item(0, 3).text() == "$10.00"
    form.edt_customer.setText("CUST-1")
    assert form.validate()["items"][0].price == D("10.00")


def test_missing_customer(form):
    _pick(form, 0, "p-1", 1)
    with pytest.raises(ValidationFailure) as ei:
        form.validate()
    assert str(ei.value) == "Please enter a customer ID"


def test_line_without_product(form):
    form.edt_customer.setText("CUST-1")
    _pick(form, 0, "p-1", 1)
    form._add_row()
    with pytest.raises(ValidationFailure) as ei:
        form.validate()
    assert str(ei.value) == "Please select a product for each item"
    assert ei.value.row == 1


def test_no_lines(form):
    form.edt_customer.setText("CUST-1")
    form._remove_row(0)
    with pytest.raises(ValidationFailure):
        form.validate()


@pytest.mark.parametrize("text", ["-1", "100.5", "abc"])
def test_discount_out_of_range_is_rejected(form, text):
    form.edt_customer.setText("CUST-1")
    _pick(form, 0, "p-1", 1)
    form.txt_discount.setText(text)
    with pytest.raises(ValidationFailure) as ei:
        form.validate()
    assert ei.value.field == "discount_percentage"


def test_valid_payload(form):
    form.edt_customer.setText("  CUST-1 ")
    form.cmb_method.setCurrentText("Cash")
    _pick(form, 0, "p-2", 4)
    form.txt_discount.setText("12.5")
    p = form.validate()
    assert p["customer_id"] == "CUST-1"
    assert p["payment_method"] == "Cash"
    assert p["discount_percentage"] == D("12.5")
    assert [(i.product_id, i.quantity, i.price) for i in p["items"]] == [("p-2", 4, D("5.50"))]


def test_get_payload_reports_instead_of_raising(form, notes):
    assert form.get_payload() is None
    assert ("info", "Invalid sale", "Please enter a customer ID") in notes.items
    form.accept()
    assert form.payload() is None
