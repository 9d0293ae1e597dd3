"""Domain errors raised by reporting services.

Each error carries the HTTP status the API layer answers with; the handlers in
``orderboard.main`` turn them into the ``{"ok": false, "error": ...}`` envelope.
"""


class ReportError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReportError):
    """Raised for missing or malformed request parameters."""

    status_code = 400


class NotFoundError(ReportError):
    """Raised when a site or order identifier does not resolve."""

    status_code = 404


class CapabilityError(ReportError):
    """Raised when the order store cannot group by local calendar day."""

    status_code = 500
