# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - The REST service is an in-memory FakeApi behind httpx.MockTransport
# - Every test gets a fresh copy of the sample data
# - Notifications (info/error) are captured by patching the names the
#   controller modules imported
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import copy
import json
import os
import re
import uuid
from decimal import Decimal

import httpx
import pytest
from PySide6 import QtCore

from salesdesk.api.client import ApiClient

# headless runs
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

BASE_URL = "http://salesdesk.test/api/v1"

SALE_1 = "a1b2c3d4-5e6f-4a0b-9c1d-000000000001"
SALE_2 = "ffee0011-2233-4455-8899-000000000002"

PRODUCTS = [
    {"id": "p-1", "name": "Widget", "price": 10.0, "description": "Blue widget", "stock": 40, "categoryId": "c-1"},
    {"id": "p-2", "name": "Gadget", "price": 5.5, "description": "Small gadget", "stock": 12, "categoryId": "c-1"},
    {"id": "p-3", "name": "Cable", "price": 2.25, "description": "", "stock": 0, "categoryId": None},
]

CATEGORIES = [
    {"id": "c-1", "name": "Tools", "description": "Hand tools", "products": PRODUCTS[:2]},
    {"id": "c-2", "name": "Empty", "description": "", "products": []},
]

SALES = [
    {
        "saleId": SALE_1,
        "customerId": "CUST-001",
        "saleItems": [
            {"productId": "p-1", "quantity": 2, "price": 10.0},
            {"productId": "p-2", "quantity": 1, "price": 5.5},
        ],
        "paymentMethod": "Credit Card",
        "discountPercentage": 10,
        "totalAmount": 25.5,
        "finalAmount": 22.95,
        "createdAt": "2026-10-15T10:30:00",
        "updatedAt": "2026-10-15T10:30:00",
    },
    {
        "saleId": SALE_2,
        "customerId": "acme-corp",
        "saleItems": [
            {"productId": "p-gone", "quantity": 3, "price": 1.0},
        ],
        "paymentMethod": "Cash",
        "discountPercentage": 0,
        "totalAmount": 3.0,
        "finalAmount": 3.0,
        "createdAt": "2026-10-01T09:00:00",
        "updatedAt": "2026-10-01T09:00:00",
    },
]


# deliberately out of order; the client sorts them
MONTHLY_REVENUE = [
    {"month": "2026-10", "revenue": 25.95},
    {"month": "2026-08", "revenue": 120.5},
    {"month": "2026-09", "revenue": 80},
]

DAILY_SALES = [
    {"date": "2026-10-17", "totalSales": 0},
    {"date": "2026-10-11", "totalSales": 3},
    {"date": "2026-10-12", "totalSales": 0},
    {"date": "2026-10-13", "totalSales": 2},
    {"date": "2026-10-14", "totalSales": 0},
    {"date": "2026-10-15", "totalSales": 3},
    {"date": "2026-10-16", "totalSales": 0},
]

class FakeApi:
    """Just enough of the REST service for the client and the screens."""

    def __init__(self):
        self.products = copy.deepcopy(PRODUCTS)
        self.categories = copy.deepcopy(CATEGORIES)
        self.sales = copy.deepcopy(SALES)
        self.revenue = copy.deepcopy(MONTHLY_REVENUE)
        self.daily = copy.deepcopy(DAILY_SALES)
        self.requests: list[tuple[str, str, object]] = []
        # path -> status code to answer with instead of the normal response
        self.fail: dict[str, int] = {}
        # paths answered with a body that is not JSON
        self.garbage: set[str] = set()

    # ---- transport ----

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        prefix = httpx.URL(BASE_URL).path
        if path.startswith(prefix):
            path = path[len(prefix):]
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if path in self.fail:
            return httpx.Response(self.fail[path], json={"message": "boom"})
        if path in self.garbage:
            return httpx.Response(200, content=b"<html>not json</html>")
        return self._route(request.method, path, body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> ApiClient:
        return ApiClient(BASE_URL, transport=self.transport())

    def calls(self, method: str, path: str) -> list:
        return [b for (m, p, b) in self.requests if m == method and p == path]

    # ---- routes ----

    def _route(self, method: str, path: str, body):
        if path == "/stats/revenue/monthly" and method == "GET":
            return httpx.Response(200, json=self.revenue)
        if path == "/stats/sales/last7days" and method == "GET":
            return httpx.Response(200, json=self.daily)
        if path == "/sales" and method == "GET":
            return httpx.Response(200, json=self.sales)
        if path == "/sales" and method == "POST":
            return httpx.Response(201, json=self._create_sale(body))
        if path == "/products" and method == "GET":
            return httpx.Response(200, json=self.products)
        if path == "/products" and method == "POST":
            rec = dict(body, id=f"p-{uuid.uuid4().hex[:6]}")
            self.products.append(rec)
            return httpx.Response(201, json=rec)
        m = re.fullmatch(r"/products/category/([\w-]+)", path)
        if m and method == "GET":
            return httpx.Response(200, json=[p for p in self.products if p.get("categoryId") == m.group(1)])
        m = re.fullmatch(r"/products/([\w-]+)", path)
        if m and method == "PUT":
            rec = dict(body, id=m.group(1))
            self.products = [rec if p["id"] == m.group(1) else p for p in self.products]
            return httpx.Response(200, json=rec)
        if m and method == "DELETE":
            self.products = [p for p in self.products if p["id"] != m.group(1)]
            return httpx.Response(204)
        if path == "/categories" and method == "GET":
            return httpx.Response(200, json=self.categories)
        if path == "/categories" and method == "POST":
            rec = dict(body, id=f"c-{uuid.uuid4().hex[:6]}", products=[])
            self.categories.append(rec)
            return httpx.Response(201, json=rec)
        m = re.fullmatch(r"/categories/([\w-]+)", path)
        if m and method == "PUT":
            for c in self.categories:
                if c["id"] == m.group(1):
                    c.update(body)
                    return httpx.Response(200, json=c)
            return httpx.Response(404)
        if m and method == "DELETE":
            self.categories = [c for c in self.categories if c["id"] != m.group(1)]
            return httpx.Response(204)
        return httpx.Response(404, json={"message": "no route"})

    def _create_sale(self, body: dict) -> dict:
        total = sum(
            Decimal(str(i["quantity"])) * Decimal(str(i["price"])) for i in body["saleItems"]
        )
        pct = Decimal(str(body.get("discountPercentage") or 0))
        final = total - total * pct / 100
        rec = dict(
            body,
            saleId=str(uuid.uuid4()),
            totalAmount=float(total),
            finalAmount=float(final.quantize(Decimal("0.01"))),
            createdAt="2026-10-17T12:00:00",
            updatedAt="2026-10-17T12:00:00",
        )
        self.sales.append(rec)
        return rec


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def client(fake_api) -> ApiClient:
    return fake_api.client()


class Notes:
    """Captures info()/error() calls as (kind, title, text)."""

    def __init__(self):
        self.items: list[tuple[str, str, str]] = []

    def info(self, parent, title, text):
        self.items.append(("info", title, text))

    def error(self, parent, title, text):
        self.items.append(("error", title, text))

    def titles(self, kind: str | None = None) -> list[str]:
        return [t for (k, t, _) in self.items if kind is None or k == kind]

    def texts(self, kind: str | None = None) -> list[str]:
        return [x for (k, _, x) in self.items if kind is None or k == kind]


@pytest.fixture
def notes(monkeypatch) -> Notes:
    """Patch the notification helpers where each module imported them."""
    import salesdesk.modules.categories.controller as categories_ctl
    import salesdesk.modules.invoices.controller as invoices_ctl
    import salesdesk.modules.invoices.print_view as print_view
    import salesdesk.modules.product.controller as product_ctl
    import salesdesk.modules.sales.controller as sales_ctl
    import salesdesk.modules.sales.form as sales_form

    n = Notes()
    for mod in (categories_ctl, invoices_ctl, print_view, product_ctl, sales_ctl):
        monkeypatch.setattr(mod, "info", n.info, raising=False)
        monkeypatch.setattr(mod, "error", n.error, raising=False)
    monkeypatch.setattr(sales_form, "info", n.info, raising=False)
    return n


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):  # alias to match code that expects an `app` fixture
    return qapp


# ---------- Silence benign Qt warnings ----------
_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QObject::disconnect: Unexpected null parameter",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
]


@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    """Filter common harmless Qt messages during tests."""
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]

    def handler(msg_type, context, message):
        text = str(message)
        if any(r.search(text) for r in rx):
            return

    original = QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(original)
