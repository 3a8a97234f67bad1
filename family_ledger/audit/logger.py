"""
Audit Logger

DESIGN DECISION: Every write against the registry or the ledger is logged,
including the ones that were refused. This provides:
1. A history of who changed which family
2. Visibility into permission-denied attempts
3. Debugging capability when storage fails

The audit logger:
- Gracefully handles failures (a broken audit sink never fails an operation)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from family_ledger.models.audit import AuditEvent, AuditEventBuilder
from family_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("family_ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_family_created(
        self,
        family_id: str,
        name: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.family_created(
            family_id=family_id,
            name=name,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_family_updated(
        self,
        family_id: str,
        name: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.family_updated(
            family_id=family_id,
            name=name,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_family_deleted(
        self,
        family_id: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.family_deleted(
            family_id=family_id,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_expense_added(
        self,
        expense_id: str,
        family_id: str,
        amount: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            family_id=family_id,
            amount=amount,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_expense_deleted(
        self,
        expense_id: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_permission_denied(
        self,
        operation: str,
        family_id: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a refused update/delete by someone other than the creator."""
        self.log(AuditEventBuilder.permission_denied(
            operation=operation,
            family_id=family_id,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_operation_failed(
        self,
        operation: str,
        error_code: str,
        error_message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        principal: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.operation_failed(
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            entity_type=entity_type,
            entity_id=entity_id,
            principal=principal,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a caller's action and pass it through
    every operation that belongs to it.
    """
    return uuid4()
