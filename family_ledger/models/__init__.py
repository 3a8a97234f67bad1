"""
Data Models Package

This package contains all Pydantic models used in the Family Ledger service.
All data flowing through the system must conform to these schemas.
"""

from family_ledger.models.family import (
    Family,
    FamilyExpense,
    FamilyExpensePayload,
    FamilyPayload,
    Principal,
)
from family_ledger.models.result import (
    ErrorKind,
    Result,
    ServiceError,
)
from family_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Family models
    "Family",
    "FamilyExpense",
    "FamilyExpensePayload",
    "FamilyPayload",
    "Principal",
    # Results
    "ErrorKind",
    "Result",
    "ServiceError",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
