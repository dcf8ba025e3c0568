"""
Data-access error taxonomy

Every failure that crosses the data-access layer is one of these. Remote
store operations raise them instead of leaking client-library exceptions,
so repositories can decide per entity whether to fall back or surface.

Author: Dicompel
Date: 2026-09-02
"""
from typing import Optional


class DataAccessError(Exception):
    """Base class for all data-access failures"""
    pass


class TransportError(DataAccessError):
    """Remote store unreachable, misconfigured, or answered with a malformed payload"""

    def __init__(self, message: str, table: Optional[str] = None, operation: Optional[str] = None):
        self.table = table
        self.operation = operation
        super().__init__(message)


class ConstraintError(DataAccessError):
    """Backend rejected a write because of a schema rule (check, unique, FK, enum)"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[str] = None
    ):
        self.table = table
        self.code = code
        self.details = details
        super().__init__(message)


class ValidationError(DataAccessError):
    """Caller-supplied data is incomplete; raised before any store call"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class PartialWriteError(DataAccessError):
    """
    Order header was created but the line-item batch failed.

    The header is left in place (no compensating delete); `order_id`
    identifies it so an administrative read can find the orphan.
    """

    def __init__(self, message: str, order_id: str, cause: Optional[Exception] = None):
        self.order_id = order_id
        self.cause = cause
        super().__init__(message)


class DeserializationError(DataAccessError):
    """Cached data unreadable. Never escapes LocalCache."""
    pass


class InvalidCredentialsError(DataAccessError):
    """A healthy backend rejected the email/password pair"""
    pass
