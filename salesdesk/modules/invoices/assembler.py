# salesdesk/modules/invoices/assembler.py
"""
Builds the render-ready invoice from a stored sale and the product catalog.

The screen, print and PDF renderers all consume ``InvoiceViewModel`` so they
show the same fields, in the same order, with the same amounts. A view model
is rebuilt for every render; nothing here caches.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Sequence, Tuple

from ...api.client import ApiClient
from ...api.repositories.products_repo import Product, ProductsRepo
from ...api.repositories.sales_repo import Sale, SalesRepo
from ...constants import (
    COMPANY_LINES,
    COMPANY_NAME,
    CUSTOMER_CONTACT_PLACEHOLDER,
    INVOICE_NOTES,
    INVOICE_PREFIX,
    INVOICE_STATUS,
    UNKNOWN_PRODUCT,
)
from ...errors import NotFound
from ...utils.helpers import fmt_currency, fmt_local_date, fmt_percent, short_id
from ..sales.calculations import discount_amount, line_amount

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceRow:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    amount: Decimal

    @property
    def unit_price_text(self) -> str:
        return fmt_currency(self.unit_price)

    @property
    def amount_text(self) -> str:
        return fmt_currency(self.amount)


@dataclass(frozen=True)
class InvoiceViewModel:
    sale_id: str
    invoice_number: str
    customer_id: str
    customer_contact: str
    invoice_date: str
    payment_method: str
    rows: Tuple[InvoiceRow, ...]
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    total: Decimal
    status: str = INVOICE_STATUS
    company_name: str = COMPANY_NAME
    company_lines: Tuple[str, ...] = COMPANY_LINES
    notes: str = INVOICE_NOTES

    # Display strings, rounded half-up to cents at this point only.
    @property
    def subtotal_text(self) -> str:
        return fmt_currency(self.subtotal)

    @property
    def discount_label(self) -> str:
        return f"Discount ({fmt_percent(self.discount_percentage)}%)"

    @property
    def discount_text(self) -> str:
        return fmt_currency(self.discount_amount, negative=True)

    @property
    def total_text(self) -> str:
        return fmt_currency(self.total)


def find_sale(sales: Iterable[Sale], sale_id: str) -> Sale:
    """Locate a sale by exact id in a freshly fetched collection."""
    for s in sales:
        if s.sale_id == sale_id:
            return s
    raise NotFound(sale_id)


def product_names(products: Iterable[Product]) -> Dict[str, str]:
    return {p.product_id: p.name for p in products}


def invoice_number(sale_id: str) -> str:
    return f"{INVOICE_PREFIX}{short_id(sale_id)}"


def assemble_invoice(sale: Sale, products: Sequence[Product]) -> InvoiceViewModel:
    """
    Join a sale with the current catalog.

    Products that have since disappeared show as "Unknown Product"; that is
    ordinary catalog drift, not an error. Totals are the server's figures.
    """
    names = product_names(products)
    rows = []
    for item in sale.items:
        name = names.get(item.product_id)
        if name is None:
            _log.debug("sale %s references unknown product %r", sale.sale_id, item.product_id)
            name = UNKNOWN_PRODUCT
        rows.append(
            InvoiceRow(
                product_id=item.product_id,
                product_name=name,
                quantity=item.quantity,
                unit_price=item.price,
                amount=line_amount(item),
            )
        )

    return InvoiceViewModel(
        sale_id=sale.sale_id,
        invoice_number=invoice_number(sale.sale_id),
        customer_id=sale.customer_id,
        customer_contact=CUSTOMER_CONTACT_PLACEHOLDER,
        invoice_date=fmt_local_date(sale.created_at),
        payment_method=sale.payment_method,
        rows=tuple(rows),
        subtotal=sale.total_amount,
        discount_percentage=sale.discount_percentage,
        discount_amount=discount_amount(sale.total_amount, sale.discount_percentage),
        total=sale.final_amount,
    )


async def fetch_snapshot(client: ApiClient) -> Tuple[list[Sale], list[Product]]:
    """Fetch sales and products concurrently; both must succeed."""
    sales, products = await asyncio.gather(
        SalesRepo(client).list_sales(),
        ProductsRepo(client).list_products(),
    )
    return sales, products


async def load_invoice(client: ApiClient, sale_id: str) -> InvoiceViewModel:
    """
    Fetch the whole sales collection plus the catalog, pick the sale by id
    and assemble it. Raises FetchFailure or NotFound.
    """
    sales, products = await fetch_snapshot(client)
    return assemble_invoice(find_sale(sales, sale_id), products)
