# salesdesk/modules/dashboard/controller.py
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...api import run
from ...api.client import ApiClient
from ...api.repositories.stats_repo import DailySales, MonthlyRevenue, StatsRepo
from ...errors import FetchFailure
from ...utils.helpers import fmt_currency, now_local
from .model import bar_fractions, day_label, month_label, summarize
from .view import DashboardView

_log = logging.getLogger(__name__)

NO_REVENUE = "No revenue data available"
NO_SALES = "No sales data available"
LOAD_FAILED = "Failed to load chart data."


class DashboardController(BaseModule):
    """
    Home page. Pulls the monthly revenue and last-7-days series from the
    stats endpoints and pushes them to the view. A failing series shows
    its own message; the other one still renders.
    """

    def __init__(self, client: ApiClient, *, clock: Optional[Callable[[], datetime]] = None) -> None:
        super().__init__()
        self.client = client
        self.repo = StatsRepo(client)
        self._clock = clock or now_local
        self.revenue: List[MonthlyRevenue] = []
        self.daily: List[DailySales] = []
        self.view = DashboardView()
        self.view.refresh_requested.connect(self.refresh)
        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    async def _fetch(self):
        return await asyncio.gather(
            self.repo.monthly_revenue(),
            self.repo.sales_last_7_days(),
            return_exceptions=True,
        )

    def refresh(self) -> None:
        revenue, daily = run(self._fetch())
        revenue_msg = self._series(revenue, "monthly revenue", NO_REVENUE)
        daily_msg = self._series(daily, "daily sales", NO_SALES)
        self.revenue = [] if isinstance(revenue, BaseException) else revenue
        self.daily = [] if isinstance(daily, BaseException) else daily

        fractions = bar_fractions([r.revenue for r in self.revenue])
        self.view.set_revenue(
            [(month_label(r), fmt_currency(r.revenue), f) for r, f in zip(self.revenue, fractions)],
            revenue_msg,
        )
        fractions = bar_fractions([d.total_sales for d in self.daily])
        self.view.set_daily_sales(
            [(day_label(d.day), str(d.total_sales), f) for d, f in zip(self.daily, fractions)],
            daily_msg,
        )
        self._update_cards(self._clock().date())

    @staticmethod
    def _series(result, what: str, empty_text: str) -> str:
        if isinstance(result, FetchFailure):
            _log.warning("could not load %s: %s", what, result)
            return LOAD_FAILED
        if isinstance(result, BaseException):
            raise result
        return "" if result else empty_text

    def _update_cards(self, today: date) -> None:
        s = summarize(self.revenue, self.daily, today)
        self.view.set_kpi_value("revenue_month", fmt_currency(s.revenue_this_month))
        self.view.set_kpi_value("sales_week", str(s.sales_last_7_days))
        if s.best_day is None:
            self.view.set_kpi_value("best_day", "—", "most sales in the last 7 days")
        else:
            self.view.set_kpi_value(
                "best_day",
                day_label(s.best_day.day),
                f"{s.best_day.total_sales} sale(s)",
            )
