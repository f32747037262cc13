# tests/test_dashboard.py
from datetime import date, datetime
from decimal import Decimal

import pytest
from PySide6.QtCore import Qt

from salesdesk.api import run
from salesdesk.api.repositories import DailySales, MonthlyRevenue, StatsRepo
from salesdesk.errors import FetchFailure
from salesdesk.modules.dashboard.controller import (
    LOAD_FAILED,
    NO_REVENUE,
    NO_SALES,
    DashboardController,
)
from salesdesk.modules.dashboard.model import bar_fractions, day_label, month_label, summarize

NOW = datetime(2026, 10, 17, 12, 0)


@pytest.fixture
def ctrl(qtbot, client):
    c = DashboardController(client, clock=lambda: NOW)
    qtbot.addWidget(c.get_widget())
    return c


def _column(model, col):
    return [model.item(r, col).text() for r in range(model.rowCount())]


# ---- repository ----

def test_stats_are_parsed_and_sorted(client):
    repo = StatsRepo(client)
    revenue = run(repo.monthly_revenue())
    assert [r.month for r in revenue] == ["2026-08", "2026-09", "2026-10"]
    assert revenue[0].revenue == Decimal("120.5")
    daily = run(repo.sales_last_7_days())
    assert [d.day for d in daily] == [date(2026, 10, d) for d in range(11, 18)]
    assert daily[0] == DailySales(date(2026, 10, 11), 3)


def test_malformed_month_is_a_fetch_failure(client, fake_api):
    fake_api.revenue = [{"month": "October", "revenue": 1}]
    with pytest.raises(FetchFailure):
        run(StatsRepo(client).monthly_revenue())


# ---- pure helpers ----

def test_summary_figures():
    revenue = [MonthlyRevenue("2026-09", Decimal("80")), MonthlyRevenue("2026-10", Decimal("25.95"))]
    daily = [DailySales(date(2026, 10, 11), 3), DailySales(date(2026, 10, 15), 3), DailySales(date(2026, 10, 16), 1)]
    s = summarize(revenue, daily, date(2026, 10, 17))
    assert s.revenue_this_month == Decimal("25.95")
    assert s.revenue_listed_months == Decimal("105.95")
    assert s.sales_last_7_days == 7
    assert s.best_day.day == date(2026, 10, 11)


def test_summary_without_data():
    s = summarize([], [DailySales(date(2026, 10, 16), 0)], date(2026, 10, 17))
    assert s.revenue_this_month == Decimal("0")
    assert s.sales_last_7_days == 0
    assert s.best_day is None


def test_bar_fractions():
    assert bar_fractions([Decimal("50"), Decimal("100"), Decimal("0")]) == [0.5, 1.0, 0.0]
    assert bar_fractions([0, 0]) == [0.0, 0.0]
    assert bar_fractions([]) == []


# ---- page ----

def test_dashboard_shows_both_series(ctrl):
    v = ctrl.view
    assert _column(v.model_revenue, 0) == [month_label(r) for r in ctrl.revenue]
    assert _column(v.model_revenue, 1) == ["$120.50", "$80.00", "$25.95"]
    assert v.model_revenue.item(0, 2).data(Qt.UserRole) == 1.0
    assert v.model_sales.rowCount() == 7
    assert _column(v.model_sales, 0)[0] == day_label(date(2026, 10, 11))
    assert v.lbl_revenue_empty.text() == ""
    assert v.lbl_sales_empty.text() == ""


def test_cards(ctrl):
    v = ctrl.view
    assert v.kpi_value("revenue_month") == "$25.95"
    assert v.kpi_value("sales_week") == "8"
    # tie between the 11th and the 15th goes to the earlier day
    assert v.kpi_value("best_day") == day_label(date(2026, 10, 11))
    assert v._kpi_cards["best_day"].lbl_caption.text() == "3 sale(s)"


def test_empty_series_show_messages(qtbot, client, fake_api):
    fake_api.revenue = []
    fake_api.daily = []
    c = DashboardController(client, clock=lambda: NOW)
    qtbot.addWidget(c.get_widget())
    assert c.view.lbl_revenue_empty.text() == NO_REVENUE
    assert c.view.lbl_sales_empty.text() == NO_SALES
    assert c.view.kpi_value("revenue_month") == "$0.00"
    assert c.view.kpi_value("best_day") == "—"


def test_one_failing_series_does_not_hide_the_other(qtbot, client, fake_api):
    fake_api.fail["/stats/sales/last7days"] = 500
    c = DashboardController(client, clock=lambda: NOW)
    qtbot.addWidget(c.get_widget())
    assert c.view.lbl_sales_empty.text() == LOAD_FAILED
    assert c.view.model_sales.rowCount() == 0
    assert c.view.model_revenue.rowCount() == 3
    assert c.view.kpi_value("sales_week") == "0"


def test_refresh_button_refetches(qtbot, ctrl, fake_api):
    before = len(fake_api.calls("GET", "/stats/revenue/monthly"))
    fake_api.revenue.append({"month": "2026-11", "revenue": 10})
    qtbot.mouseClick(ctrl.view.btn_refresh, Qt.LeftButton)
    assert len(fake_api.calls("GET", "/stats/revenue/monthly")) == before + 1
    assert ctrl.view.model_revenue.rowCount() == 4
