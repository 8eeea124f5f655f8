"""Error types raised by the sheets store."""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """Base exception class for store errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class SchemaViolationError(StoreError, TypeError):
    """Raised when a value does not match its column's declared type."""
    pass


class TransactionClosedError(StoreError):
    """Raised when a store is used after its transaction settled."""
    pass


class IntegrityError(StoreError):
    """Raised when the backing service breaks a response invariant."""
    pass


class SheetsServiceError(StoreError):
    """Raised when the backing service rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code


class NotConnectedError(StoreError):
    """Raised when the database is used before connect()."""
    pass
