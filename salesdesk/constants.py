# salesdesk/constants.py
APP_NAME = "SalesDesk"

# ---- Remote API ----
DEFAULT_API_BASE_URL = "http://localhost:8080/api/v1"
HTTP_TIMEOUT_SECONDS = 30.0

# ---- Sales ----
PAYMENT_METHODS = ("Credit Card", "Cash", "Bank Transfer")
DEFAULT_PAYMENT_METHOD = "Credit Card"

# ---- Invoices ----
UNKNOWN_PRODUCT = "Unknown Product"
INVOICE_PREFIX = "INV-"
SHORT_ID_LENGTH = 8
INVOICE_STATUS = "PAID"

COMPANY_NAME = "Your Company Name"
COMPANY_LINES = (
    "123 Business Street",
    "City, State 12345",
    "contact@yourcompany.com",
)
CUSTOMER_CONTACT_PLACEHOLDER = "customer@example.com"
INVOICE_NOTES = (
    "Thank you for your business. Please contact us if you have any "
    "questions about this invoice."
)

# Delay before the print dialog opens, so the layout can paint first.
PRINT_DELAY_MS = 1000
# Delay before the PDF is generated after data arrives.
DOWNLOAD_DELAY_MS = 500

TEMPLATE_SCREEN = "invoices/invoice_screen.html"
TEMPLATE_PRINT = "invoices/invoice_print.html"
TEMPLATE_NOT_FOUND = "invoices/invoice_not_found.html"
