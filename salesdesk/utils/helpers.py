# salesdesk/utils/helpers.py
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging
import re
from typing import Union, Optional

from PySide6.QtCore import QDate, QLocale

from ..constants import SHORT_ID_LENGTH

NumberLike = Union[Decimal, float, int, str]

_log = logging.getLogger(__name__)

_CENT = Decimal("0.01")

# Seconds fraction of any length; fromisoformat on 3.10 only takes 3 or 6 digits.
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


def to_decimal(v: NumberLike | None, default: Decimal = Decimal("0")) -> Decimal:
    """
    Convert a JSON number (or string) to Decimal without binary float noise.

    Floats go through ``str()`` first so 10.1 stays 10.1 rather than
    10.0999999999999996447286321199499070644378662109375.
    """
    if v is None or v == "":
        return default
    if isinstance(v, Decimal):
        return v
    try:
        return Decimal(str(v))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Could not parse {v!r} as a number.") from e


def round_money(v: NumberLike) -> Decimal:
    """Round half-up to exactly two fractional digits."""
    return to_decimal(v).quantize(_CENT, rounding=ROUND_HALF_UP)


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Rounding is half-up and only happens here, at presentation time.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = to_decimal(v)
    except ValueError as e:
        _log.debug("fmt_money: failed to parse %r: %s", v, e)
        if strict:
            raise
        return str(sentinel) if sentinel is not None else str(v)
    q = Decimal(1).scaleb(-places)
    return f"{x.quantize(q, rounding=ROUND_HALF_UP):,.{places}f}"


def fmt_currency(v: NumberLike, *, negative: bool = False) -> str:
    """
    '$1,234.50'; with negative=True the amount is shown as a deduction ('-$2.55').

    A negative deduction is a surcharge and shows as '+$2.55'.
    """
    text = fmt_money(v, strict=True)
    if text.startswith("-"):
        return f"+${text[1:]}" if negative else f"-${text[1:]}"
    return f"-${text}" if negative else f"${text}"


def fmt_percent(v: NumberLike) -> str:
    """Render a percentage the way users typed it: 10 -> '10', 12.50 -> '12.5'."""
    d = to_decimal(v)
    if d == d.to_integral_value():
        return str(d.quantize(Decimal(1)))
    return format(d.normalize(), "f")


def short_id(value: str, length: int = SHORT_ID_LENGTH) -> str:
    return (value or "")[:length]


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp from the API.

    Offsets (including a trailing 'Z') are honoured; timestamps without an
    offset are taken as local wall-clock time. Second fractions of any length
    are cut or padded to microseconds. Returns None for empty input.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Could not parse {value!r} as an ISO-8601 timestamp.") from e


def to_local(ts: datetime) -> datetime:
    """Naive local datetime for comparisons against the viewer's clock."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def now_local() -> datetime:
    return datetime.now(timezone.utc).astimezone().replace(tzinfo=None)


def fmt_local_date(ts: datetime | None) -> str:
    """Short date in the viewer's locale and time zone; '' when unknown."""
    if ts is None:
        return ""
    d = to_local(ts).date()
    return QLocale.system().toString(QDate(d.year, d.month, d.day), QLocale.ShortFormat)
