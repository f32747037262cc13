"""SalesDesk: desktop console for categories, products, sales and invoices."""

__version__ = "0.3.0"
