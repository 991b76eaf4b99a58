from typing import Any


class FreshDeskError(Exception):
    """Base exception for FreshDesk client errors"""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class FreshDeskConfigurationError(FreshDeskError):
    """Raised when the client configuration is invalid"""


class FreshDeskTransportError(FreshDeskError):
    """Raised when a request never reached or never returned from FreshDesk.

    The underlying httpx exception is chained and kept on `cause`.
    """

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__, {"type": type(cause).__name__})


class FreshDeskAPIError(FreshDeskError):
    """Raised when FreshDesk answers with a status the operation does not expect.

    `body` is the raw response text, verbatim. The message is the same text
    unless the body is empty.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        message = body if body else f"Invalid status received: {status_code}"
        super().__init__(message, {"status_code": status_code})


class FreshDeskNotFoundError(FreshDeskError):
    """Raised when a search that must yield exactly one record yields none"""


class FreshDeskDecodeError(FreshDeskError):
    """Raised when a successful response cannot be decoded into the expected shape"""
