# salesdesk/api/repositories/stats_repo.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ..client import ApiClient
from ...errors import FetchFailure
from ...utils.helpers import to_decimal

_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class MonthlyRevenue:
    month: str  # "YYYY-MM"
    revenue: Decimal

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "MonthlyRevenue":
        try:
            month = str(d["month"]).strip()
            m = _MONTH.match(month)
            if not m or not 1 <= int(m.group(2)) <= 12:
                raise ValueError(f"bad month {month!r}")
            return cls(month=month, revenue=to_decimal(d.get("revenue")))
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"Malformed revenue record: {e}") from e

    @property
    def year(self) -> int:
        return int(self.month[:4])

    @property
    def month_number(self) -> int:
        return int(self.month[5:7])


@dataclass(frozen=True)
class DailySales:
    day: date
    total_sales: int

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "DailySales":
        try:
            return cls(
                day=date.fromisoformat(str(d["date"])[:10]),
                total_sales=int(d.get("totalSales") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"Malformed daily sales record: {e}") from e


class StatsRepo:
    """Aggregates computed by the server for the dashboard."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def monthly_revenue(self) -> List[MonthlyRevenue]:
        """Revenue per month, oldest month first."""
        rows = await self.client.get_list("/stats/revenue/monthly")
        return sorted((MonthlyRevenue.from_api(r) for r in rows), key=lambda r: r.month)

    async def sales_last_7_days(self) -> List[DailySales]:
        """Number of sales per day for the last week, oldest day first."""
        rows = await self.client.get_list("/stats/sales/last7days")
        return sorted((DailySales.from_api(r) for r in rows), key=lambda r: r.day)
