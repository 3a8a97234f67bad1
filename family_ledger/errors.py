"""
Domain exceptions raised by the registry and the ledger.

The service facade catches these and turns them into tagged results,
so they never reach a caller directly.
"""

from typing import Optional

from family_ledger.models.result import ErrorKind


class LedgerError(Exception):
    """Base exception for registry and ledger operations."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, entity_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity_id = entity_id


class NotFoundError(LedgerError):
    """Requested id is absent from the relevant store."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(LedgerError):
    """Caller is not the creator of the family it tried to change."""

    kind = ErrorKind.PERMISSION_DENIED


class ValidationFailedError(LedgerError):
    """An expense referenced a family that does not exist."""

    kind = ErrorKind.VALIDATION_FAILED
