"""
Domain errors for the owner-statement pipeline.

Routers translate these into HTTP responses; nothing below the router layer
knows about status codes.

    StatementError
    ├── InvalidStatementInput   bad property id / dates / format
    ├── PropertyNotFound        no such property in the portal database
    ├── UpstreamUnavailable     Hostkit could not be reached or answered garbage
    │   └── UpstreamTimeout     Hostkit did not answer within the timeout
    └── AmountParseError        a monetary value could not be read
"""
from typing import Optional


class StatementError(Exception):
    """Base class for every error raised while building a statement."""


class InvalidStatementInput(StatementError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class PropertyNotFound(StatementError):
    def __init__(self, property_id: int):
        self.property_id = property_id
        super().__init__(f"Property {property_id} not found")


class UpstreamUnavailable(StatementError):
    """The invoice source failed. Never folded into an empty invoice list."""

    def __init__(self, property_id: Optional[int], cause: str):
        self.property_id = property_id
        self.cause = cause
        super().__init__(f"Could not fetch invoices for property {property_id}: {cause}")


class UpstreamTimeout(UpstreamUnavailable):
    def __init__(self, property_id: Optional[int], timeout: float):
        self.timeout = timeout
        super().__init__(property_id, f"no response within {timeout:g}s")


class AmountParseError(StatementError, ValueError):
    def __init__(self, raw, reason: str = ""):
        self.raw = raw
        message = f"Cannot read monetary amount from {raw!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
