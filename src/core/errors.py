"""
Exceptions raised by the invoicing pipeline and the accounting client.
"""


class ConfigurationError(ValueError):
    """Invalid or incomplete configuration (columns, targets, config files)."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class RowParseError(ValueError):
    """A timesheet row whose date cannot be parsed. Aborts the whole sheet."""

    def __init__(self, row_number: int, message: str, row: list[str] | None = None):
        super().__init__(
            f"Error mapping new invoice row {row_number}: {message} - row data: {row!r}"
        )
        self.row_number = row_number
        self.row = row


class AuthenticationError(RuntimeError):
    """The OAuth token endpoint rejected a refresh or code exchange."""


class VatResolutionError(RuntimeError):
    """VAT exclusion requested but no 0% tax rate exists in the administration."""


class RemoteApiError(RuntimeError):
    """Unexpected status code from the accounting API."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(f"{message}: {status_code} {body}")
        self.status_code = status_code
        self.body = body


class SheetSourceError(RuntimeError):
    """The spreadsheet source could not deliver rows."""
