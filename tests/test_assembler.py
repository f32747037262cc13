# tests/test_assembler.py
from decimal import Decimal

import pytest

from salesdesk.api import run
from salesdesk.api.repositories import Product, Sale, SaleItem
from salesdesk.errors import FetchFailure, NotFound
from salesdesk.modules.invoices.assembler import (
    assemble_invoice,
    find_sale,
    invoice_number,
    load_invoice,
    product_names,
)

from conftest import SALE_1, SALE_2

D = Decimal


def _sale(**kw):
    base = dict(
        sale_id="0123456789abcdef",
        customer_id="CUST-7",
        items=(SaleItem("p-1", 2, D("10.00")), SaleItem("p-x", 1, D("5.50"))),
        payment_method="Bank Transfer",
        discount_percentage=D("10"),
        total_amount=D("25.50"),
        final_amount=D("22.95"),
    )
    base.update(kw)
    return Sale(**base)


PRODUCTS = [Product("p-1", "Widget", D("12.00"), "", 4, None)]


def test_invoice_number_uses_first_eight_chars():
    assert invoice_number("0123456789abcdef") == "INV-01234567"


def test_assemble_invoice_rows_and_totals():
    inv = assemble_invoice(_sale(), PRODUCTS)
    assert inv.invoice_number == "INV-01234567"
    assert [r.product_name for r in inv.rows] == ["Widget", "Unknown Product"]
    # snapshot price, not the catalog's current price
    assert inv.rows[0].unit_price == D("10.00")
    assert inv.rows[0].amount == D("20.00")
    assert inv.subtotal_text == "$25.50"
    assert inv.discount_label == "Discount (10%)"
    assert inv.discount_text == "-$2.55"
    assert inv.total_text == "$22.95"
    assert inv.status == "PAID"
    assert inv.payment_method == "Bank Transfer"


def test_server_totals_are_authoritative():
    inv = assemble_invoice(_sale(final_amount=D("22.90")), PRODUCTS)
    assert inv.total == D("22.90")


def test_assembly_is_idempotent():
    sale = _sale()
    assert assemble_invoice(sale, PRODUCTS) == assemble_invoice(sale, PRODUCTS)


def test_empty_sale_assembles():
    inv = assemble_invoice(_sale(items=(), total_amount=D("0"), final_amount=D("0")), [])
    assert inv.rows == ()
    assert inv.subtotal_text == "$0.00"


def test_find_sale_exact_match_only():
    sales = [_sale(sale_id="abc"), _sale(sale_id="abcd")]
    assert find_sale(sales, "abcd").sale_id == "abcd"
    with pytest.raises(NotFound) as ei:
        find_sale(sales, "ab")
    assert ei.value.sale_id == "ab"


def test_product_names_map():
    assert product_names(PRODUCTS) == {"p-1": "Widget"}


def test_load_invoice_fetches_and_assembles(client, fake_api):
    inv = run(load_invoice(client, SALE_1))
    assert inv.customer_id == "CUST-001"
    assert [r.product_name for r in inv.rows] == ["Widget", "Gadget"]
    assert inv.total_text == "$22.95"
    assert len(fake_api.calls("GET", "/sales")) == 1
    assert len(fake_api.calls("GET", "/products")) == 1


def test_load_invoice_unknown_product(client):
    inv = run(load_invoice(client, SALE_2))
    assert inv.rows[0].product_name == "Unknown Product"


def test_load_invoice_not_found(client):
    with pytest.raises(NotFound):
        run(load_invoice(client, "does-not-exist"))


def test_load_invoice_fails_when_either_fetch_fails(client, fake_api):
    fake_api.fail["/products"] = 503
    with pytest.raises(FetchFailure):
        run(load_invoice(client, SALE_1))


def test_negative_discount_reads_as_surcharge():
    inv = assemble_invoice(
        _sale(discount_percentage=D("-10"), final_amount=D("28.05")), PRODUCTS
    )
    assert inv.discount_amount == D("-2.55")
    assert inv.discount_label == "Discount (-10%)"
    assert inv.discount_text == "+$2.55"
    assert inv.total_text == "$28.05"
