"""
Sales module package exports.

- SalesController: sales list, summary figures and the new-sale flow.
- calculations: pure totals helpers shared with the invoices module.
"""

from .calculations import SaleTotals, discount_amount, final_amount, line_amount, sale_totals, subtotal
from .controller import SalesController

__all__ = [
    "SalesController",
    "SaleTotals",
    "discount_amount",
    "final_amount",
    "line_amount",
    "sale_totals",
    "subtotal",
]
