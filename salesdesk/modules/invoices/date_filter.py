# salesdesk/modules/invoices/date_filter.py
"""
Date buckets for the invoice list.

All comparisons happen on naive local datetimes at millisecond resolution,
with inclusive bounds: a day runs from 00:00:00.000 to 23:59:59.999.
Weeks start on Monday.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Tuple

from ...api.repositories.sales_repo import Sale
from ...utils.helpers import now_local, to_local

_MS = timedelta(milliseconds=1)

Range = Tuple[datetime, datetime]


class DateBucket(str, Enum):
    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "thisWeek"
    THIS_MONTH = "thisMonth"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    DateBucket.ALL: "All",
    DateBucket.TODAY: "Today",
    DateBucket.YESTERDAY: "Yesterday",
    DateBucket.THIS_WEEK: "This Week",
    DateBucket.THIS_MONTH: "This Month",
    DateBucket.CUSTOM: "Custom",
}


# ---- calendar edges ----

def start_of_day(d: datetime | date) -> datetime:
    day = d.date() if isinstance(d, datetime) else d
    return datetime.combine(day, time.min)


def end_of_day(d: datetime | date) -> datetime:
    return start_of_day(d) + timedelta(days=1) - _MS


def start_of_week(d: datetime) -> datetime:
    return start_of_day(d) - timedelta(days=d.weekday())


def end_of_week(d: datetime) -> datetime:
    return start_of_week(d) + timedelta(days=7) - _MS


def start_of_month(d: datetime) -> datetime:
    return datetime(d.year, d.month, 1)


def end_of_month(d: datetime) -> datetime:
    if d.month == 12:
        nxt = datetime(d.year + 1, 1, 1)
    else:
        nxt = datetime(d.year, d.month + 1, 1)
    return nxt - _MS


def _truncate_ms(ts: datetime) -> datetime:
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


# ---- classification ----

def bucket_range(
    bucket: DateBucket,
    now: datetime,
    custom_date: Optional[date] = None,
) -> Optional[Range]:
    """
    Inclusive (start, end) for a bucket relative to `now`.
    None means unbounded: ALL, or CUSTOM with no date picked yet.
    """
    if bucket is DateBucket.TODAY:
        return start_of_day(now), end_of_day(now)
    if bucket is DateBucket.YESTERDAY:
        y = now - timedelta(days=1)
        return start_of_day(y), end_of_day(y)
    if bucket is DateBucket.THIS_WEEK:
        return start_of_week(now), end_of_week(now)
    if bucket is DateBucket.THIS_MONTH:
        return start_of_month(now), end_of_month(now)
    if bucket is DateBucket.CUSTOM and custom_date is not None:
        return start_of_day(custom_date), end_of_day(custom_date)
    return None


def in_bucket(
    ts: Optional[datetime],
    bucket: DateBucket,
    now: datetime,
    custom_date: Optional[date] = None,
) -> bool:
    rng = bucket_range(bucket, now, custom_date)
    if rng is None:
        return True
    if ts is None:
        return False
    t = _truncate_ms(to_local(ts))
    start, end = rng
    return start <= t <= end


def matches_search(sale: Sale, text: str) -> bool:
    """Case-insensitive substring match on customer id or sale id."""
    needle = (text or "").strip().lower()
    if not needle:
        return True
    return needle in sale.customer_id.lower() or needle in sale.sale_id.lower()


class DateRangeFilter:
    """
    Current list filter: one bucket (plus a date when custom) and search text.

    Selecting any bucket other than CUSTOM forgets the custom date.
    """

    def __init__(self):
        self.bucket: DateBucket = DateBucket.ALL
        self.custom_date: Optional[date] = None
        self.search_text: str = ""

    def select(self, bucket: DateBucket | str) -> None:
        bucket = DateBucket(bucket)
        self.bucket = bucket
        if bucket is not DateBucket.CUSTOM:
            self.custom_date = None

    def select_custom(self, day: Optional[date]) -> None:
        self.bucket = DateBucket.CUSTOM
        self.custom_date = day

    def set_search(self, text: str) -> None:
        self.search_text = text or ""

    def accepts(self, sale: Sale, now: Optional[datetime] = None) -> bool:
        now = now if now is not None else now_local()
        return (
            in_bucket(sale.created_at, self.bucket, now, self.custom_date)
            and matches_search(sale, self.search_text)
        )
