"""
sales/calculations.py

Pure helpers for sale totals, used for the live preview in the sale form and
for invoice figures derived from a stored sale.

Do not import repos or touch the network here.
Only compute numbers; rounding and formatting belong in the UI
(utils.helpers.fmt_money rounds half-up at display time).
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

__all__ = [
    "SaleTotals",
    "line_amount",
    "subtotal",
    "discount_amount",
    "final_amount",
    "sale_totals",
]

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class PricedLine(Protocol):
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    discount_amount: Decimal
    final_amount: Decimal


def line_amount(item: PricedLine) -> Decimal:
    """quantity x unit price snapshot, unrounded."""
    return Decimal(item.quantity) * Decimal(item.price)


def subtotal(items: Iterable[PricedLine]) -> Decimal:
    """Sum of line amounts; 0 for no items."""
    return sum((line_amount(i) for i in items), _ZERO)


def discount_amount(sub: Decimal, discount_percentage: Decimal) -> Decimal:
    """
    sub * pct / 100.

    Percentages outside 0..100 are not clamped: a negative value yields a
    surcharge and a value above 100 drives the final amount below zero.
    Range checks are the caller's job.
    """
    return Decimal(sub) * (Decimal(discount_percentage) / _HUNDRED)


def final_amount(sub: Decimal, discount_percentage: Decimal) -> Decimal:
    return Decimal(sub) - discount_amount(sub, discount_percentage)


def sale_totals(items: Iterable[PricedLine], discount_percentage: Decimal) -> SaleTotals:
    sub = subtotal(items)
    disc = discount_amount(sub, discount_percentage)
    return SaleTotals(subtotal=sub, discount_amount=disc, final_amount=sub - disc)
