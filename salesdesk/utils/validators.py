# salesdesk/utils/validators.py
from decimal import Decimal, InvalidOperation


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to Decimal.

    Returns:
        (ok: bool, value: Decimal|None)

    ok == False means parsing failed and value is None.
    """
    try:
        return True, Decimal(str(x).replace(",", "").strip())
    except (InvalidOperation, ValueError, TypeError):
        return False, None


def try_parse_int(x):
    try:
        return True, int(str(x).strip())
    except (ValueError, TypeError):
        return False, None


def is_non_negative_number(x) -> bool:
    """
    True iff x parses to a number and value >= 0.
    """
    ok, val = try_parse_decimal(x)
    return bool(ok and val is not None and val.is_finite() and val >= 0)


def is_non_negative_int(x) -> bool:
    ok, val = try_parse_int(x)
    return bool(ok and val is not None and val >= 0)
