"""
Tagged results returned by the service facade.

Every exposed operation returns a Result instead of raising, so callers
always get either a value or an error they can branch on.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error taxonomy exposed to callers."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION_FAILED = "validation_failed"
    STORAGE_ERROR = "storage_error"


class ServiceError(BaseModel):
    """An error returned from an operation."""

    kind: ErrorKind
    message: str = Field(
        ...,
        description="Human-readable message naming the operation and offending id"
    )


class Result(BaseModel, Generic[T]):
    """
    Outcome of a single operation.

    Exactly one of `value` / `error` is meaningful, selected by `ok`.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(ok=False, error=ServiceError(kind=kind, message=message))

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    def unwrap(self) -> T:
        """Return the value, or raise ValueError carrying the error message."""
        if not self.ok:
            raise ValueError(self.error.message if self.error else "Operation failed")
        return self.value
