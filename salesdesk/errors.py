# salesdesk/errors.py
"""
Error taxonomy shared by repositories, invoice rendering and the UI.

Controllers catch these at the boundary of the operation that raised them
and surface ``str(exc)`` through a notification; none of them is fatal.
"""


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (toast/snackbar)."""
    pass


class FetchFailure(DomainError):
    """Network, HTTP status or JSON decoding problem talking to the API."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(DomainError):
    """A sale id had no match in the fetched collection."""

    def __init__(self, sale_id: str):
        super().__init__(f"Invoice {sale_id} could not be found.")
        self.sale_id = sale_id


class RenderFailure(DomainError):
    """Invoice document generation failed; nothing was written."""
    pass


class ValidationFailure(DomainError):
    """Local form validation failed; nothing was sent to the server."""

    def __init__(self, message: str, *, field: str | None = None, row: int | None = None):
        super().__init__(message)
        self.field = field
        self.row = row


class CategoryNotEmpty(DomainError):
    """Categories that still hold products cannot be deleted."""
    pass
