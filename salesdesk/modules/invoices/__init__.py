"""
Invoices module package.

Only the Qt-free pieces are exported here; the preview widget imports the
assembler and rendering from this package, so the controller and views are
imported from their own modules.
"""

from .assembler import (
    InvoiceRow,
    InvoiceViewModel,
    assemble_invoice,
    fetch_snapshot,
    find_sale,
    load_invoice,
)
from .pdf_generator import build_invoice_pdf, invoice_file_name, save_invoice_pdf

__all__ = [
    "InvoiceRow",
    "InvoiceViewModel",
    "assemble_invoice",
    "fetch_snapshot",
    "find_sale",
    "load_invoice",
    "build_invoice_pdf",
    "invoice_file_name",
    "save_invoice_pdf",
]
