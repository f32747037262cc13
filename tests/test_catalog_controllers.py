# tests/test_catalog_controllers.py
from decimal import Decimal

import pytest

import salesdesk.modules.categories.controller as categories_ctl
import salesdesk.modules.product.controller as product_ctl
from salesdesk.modules.categories.controller import CategoriesController
from salesdesk.modules.product.controller import ProductController
from salesdesk.modules.product.form import ProductForm


def _stub(payload, accepted=True):
    class Stub:
        def __init__(self, *a, **k):
            pass

        def exec(self):
            return accepted

        def payload(self):
            return payload

    return Stub


# ---- categories ----

@pytest.fixture
def cats(qtbot, client, notes):
    c = CategoriesController(client)
    qtbot.addWidget(c.get_widget())
    return c


def _category(ctrl, name):
    m = ctrl.base_model
    return next(m.at(r) for r in range(m.rowCount()) if m.at(r).name == name)


def test_categories_listed_with_counts(cats):
    m = cats.base_model
    assert m.rowCount() == 2
    tools = [m.data(m.index(r, 2)) for r in range(2) if m.at(r).name == "Tools"]
    assert tools == ["2"]


def test_category_with_products_cannot_be_deleted(cats, fake_api, notes):
    assert cats.delete_category(_category(cats, "Tools")) is False
    assert "Cannot delete category" in notes.titles("error")
    assert fake_api.calls("DELETE", "/categories/c-1") == []
    assert cats.base_model.rowCount() == 2


def test_empty_category_is_deleted(cats, fake_api, notes):
    assert cats.delete_category(_category(cats, "Empty")) is True
    assert cats.base_model.rowCount() == 1
    assert "Deleted" in notes.titles("info")


def test_delete_button_asks_first(cats, fake_api, monkeypatch):
    monkeypatch.setattr(categories_ctl, "confirm", lambda *a: False)
    monkeypatch.setattr(cats, "_selected", lambda: _category(cats, "Empty"))
    cats._delete()
    assert fake_api.calls("DELETE", "/categories/c-2") == []
    monkeypatch.setattr(categories_ctl, "confirm", lambda *a: True)
    cats._delete()
    assert len(fake_api.calls("DELETE", "/categories/c-2")) == 1


def test_add_category(cats, fake_api, monkeypatch):
    monkeypatch.setattr(categories_ctl, "CategoryForm", _stub({"name": "Garden", "description": ""}))
    cats._add()
    assert fake_api.calls("POST", "/categories") == [{"name": "Garden", "description": ""}]
    assert cats.base_model.rowCount() == 3


# ---- products ----

@pytest.fixture
def prods(qtbot, client, notes):
    c = ProductController(client)
    qtbot.addWidget(c.get_widget())
    return c


def test_products_listed_with_category_names(prods):
    m = prods.base_model
    assert m.rowCount() == 3
    names = {m.data(m.index(r, 0)): m.data(m.index(r, 1)) for r in range(3)}
    assert names == {"Widget": "Tools", "Gadget": "Tools", "Cable": ""}
    assert prods.view.category.count() == 3  # All + two categories


def test_category_filter_uses_category_endpoint(prods, fake_api):
    combo = prods.view.category
    combo.setCurrentIndex(combo.findData("c-1"))
    assert prods.base_model.rowCount() == 2
    assert len(fake_api.calls("GET", "/products/category/c-1")) == 1
    combo.setCurrentIndex(combo.findData("c-2"))
    assert prods.base_model.rowCount() == 0
    combo.setCurrentIndex(0)
    assert prods.base_model.rowCount() == 3


def test_add_and_delete_product(prods, fake_api, monkeypatch):
    payload = {"name": "Hammer", "price": Decimal("12.5"), "description": "", "stock": 3, "category_id": "c-1"}
    monkeypatch.setattr(product_ctl, "ProductForm", _stub(payload))
    prods._add()
    assert fake_api.calls("POST", "/products")[0]["price"] == 12.5
    assert prods.base_model.rowCount() == 4

    m = prods.base_model
    hammer = next(m.at(r) for r in range(m.rowCount()) if m.at(r).name == "Hammer")
    assert prods.delete_product(hammer) is True
    assert prods.base_model.rowCount() == 3


def test_product_form_validation(qtbot):
    f = ProductForm()
    qtbot.addWidget(f)
    assert f.get_payload() is None
    f.name.setText("Saw")
    f.price.setText("-1")
    assert f.get_payload() is None
    assert f.price_error.text()
    f.price.setText("7.25")
    f.stock.setText("4")
    p = f.get_payload()
    assert p == {
        "name": "Saw",
        "price": Decimal("7.25"),
        "description": "",
        "stock": 4,
        "category_id": None,
    }
