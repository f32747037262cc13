# salesdesk/modules/dashboard/model.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from PySide6.QtCore import QDate, QLocale

from ...api.repositories.stats_repo import DailySales, MonthlyRevenue


@dataclass(frozen=True)
class DashboardSummary:
    revenue_this_month: Decimal
    revenue_listed_months: Decimal
    sales_last_7_days: int
    best_day: Optional[DailySales]


def summarize(
    revenue: Sequence[MonthlyRevenue],
    daily: Sequence[DailySales],
    today: date,
) -> DashboardSummary:
    """Headline figures for the cards above the two tables."""
    current = f"{today.year:04d}-{today.month:02d}"
    this_month = sum((r.revenue for r in revenue if r.month == current), Decimal("0"))
    listed = sum((r.revenue for r in revenue), Decimal("0"))
    count = sum(d.total_sales for d in daily)
    # earliest day wins a tie
    best = max(daily, key=lambda d: (d.total_sales, -d.day.toordinal()), default=None)
    if best is not None and best.total_sales <= 0:
        best = None
    return DashboardSummary(this_month, listed, count, best)


def month_label(row: MonthlyRevenue) -> str:
    """'Oct 2026' in the viewer's locale."""
    name = QLocale.system().monthName(row.month_number, QLocale.ShortFormat)
    return f"{name} {row.year}"


def day_label(day: date) -> str:
    return QLocale.system().toString(QDate(day.year, day.month, day.day), "MMM d")


def bar_fractions(values: Sequence[Decimal | int]) -> List[float]:
    """Each value relative to the largest one; all zero when nothing is positive."""
    top = max(values, default=0)
    if top <= 0:
        return [0.0 for _ in values]
    return [max(float(v) / float(top), 0.0) for v in values]
