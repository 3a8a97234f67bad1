"""
Service Facade for Family Ledger

This module ties the components together and exposes the operations
callers use:

    get_families, get_family, get_family_expenses        (read)
    add_family, update_family, delete_family             (write)
    add_family_expense, delete_family_expense            (write)

DESIGN DECISION: The stores are owned by an explicit LedgerContext that is
built once at startup (or fresh per test) and handed to the service. There
are no module-level stores.

DESIGN DECISION: Every operation returns a Result. Domain exceptions from
the registry and ledger, and storage failures, are caught here and turned
into tagged errors; nothing is raised to the caller.

Every write is audited, including refused ones.
"""

from typing import Callable, Optional, TypeVar
from uuid import UUID

from pydantic import ValidationError

from family_ledger.audit import AuditLogger
from family_ledger.config import LedgerSettings, get_settings
from family_ledger.errors import LedgerError, PermissionDeniedError
from family_ledger.ledger import ExpenseLedger
from family_ledger.models.family import (
    Family,
    FamilyExpense,
    FamilyExpensePayload,
    FamilyPayload,
    Principal,
)
from family_ledger.models.result import ErrorKind, Result
from family_ledger.registry import FamilyRegistry
from family_ledger.services.runtime import Clock, IdGenerator, SystemClock
from family_ledger.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStore,
    InMemoryAuditStorage,
    InMemoryStore,
    KeyValueStore,
    StorageError,
)

T = TypeVar("T")


class LedgerContext:
    """
    Everything one running service instance owns.

    The two stores live as long as the context does. Tests build a fresh
    context per test to get isolated stores.
    """

    def __init__(
        self,
        family_store: Optional[KeyValueStore] = None,
        expense_store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        enforce_ownership: bool = True,
        denormalize_family_name: bool = True,
    ):
        self.family_store = family_store if family_store is not None else InMemoryStore("families")
        self.expense_store = expense_store if expense_store is not None else InMemoryStore("family_expenses")
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or IdGenerator()
        self.audit_logger = audit_logger or AuditLogger()

        self.registry = FamilyRegistry(
            store=self.family_store,
            clock=self.clock,
            id_generator=self.id_generator,
            enforce_ownership=enforce_ownership,
        )
        self.ledger = ExpenseLedger(
            store=self.expense_store,
            registry=self.registry,
            clock=self.clock,
            id_generator=self.id_generator,
            denormalize_family_name=denormalize_family_name,
        )


class FamilyLedgerService:
    """
    The exposed operations.

    Each call is synchronous and independent; it either fully applies its
    effect or has none.
    """

    def __init__(self, context: Optional[LedgerContext] = None):
        self._context = context or LedgerContext()
        self._registry = self._context.registry
        self._ledger = self._context.ledger
        self._audit_logger = self._context.audit_logger

    @property
    def context(self) -> LedgerContext:
        return self._context

    def _call(
        self,
        operation: str,
        action: Callable[[], T],
        caller: Optional[Principal] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
        audit_failures: bool = True,
    ) -> Result[T]:
        """Run `action`, converting failures into a failed Result."""
        try:
            return Result.success(action())
        except PermissionDeniedError as e:
            self._audit_logger.log_permission_denied(
                operation=operation,
                family_id=e.entity_id or entity_id or "",
                principal=caller or "",
                correlation_id=correlation_id,
            )
            return Result.failure(e.kind, f"{operation}: {e.message}")
        except LedgerError as e:
            if audit_failures:
                self._audit_logger.log_operation_failed(
                    operation=operation,
                    error_code=e.kind.value,
                    error_message=e.message,
                    entity_type=entity_type,
                    entity_id=e.entity_id or entity_id,
                    principal=caller,
                    correlation_id=correlation_id,
                )
            return Result.failure(e.kind, f"{operation}: {e.message}")
        except (StorageError, ValidationError) as e:
            # A ValidationError here means a stored record no longer fits the model
            self._audit_logger.log_error(
                error_type="storage_error",
                error_message=str(e),
                details={"operation": operation, "entity_id": entity_id},
                correlation_id=correlation_id,
            )
            return Result.failure(
                ErrorKind.STORAGE_ERROR,
                f"{operation} failed: {e}",
            )

    # =========================================================================
    # READS
    # =========================================================================

    def get_families(self) -> Result[list[Family]]:
        return self._call(
            "get_families",
            self._registry.list_families,
            audit_failures=False,
        )

    def get_family(self, family_id: str) -> Result[Family]:
        return self._call(
            "get_family",
            lambda: self._registry.get_family(family_id),
            entity_type="family",
            entity_id=family_id,
            audit_failures=False,
        )

    def get_family_expenses(self, family_id: str) -> Result[list[FamilyExpense]]:
        """Expenses recorded against `family_id`; empty if there are none."""
        return self._call(
            "get_family_expenses",
            lambda: self._ledger.list_family_expenses(family_id),
            entity_type="family",
            entity_id=family_id,
            audit_failures=False,
        )

    # =========================================================================
    # WRITES
    # =========================================================================

    def add_family(
        self,
        payload: FamilyPayload,
        caller: Principal,
        correlation_id: Optional[UUID] = None,
    ) -> Result[Family]:
        """Create a family owned by `caller`."""
        result = self._call(
            "add_family",
            lambda: self._registry.add_family(payload, caller),
            caller=caller,
            entity_type="family",
            correlation_id=correlation_id,
        )
        if result.ok:
            self._audit_logger.log_family_created(
                family_id=result.value.id,
                name=result.value.name,
                principal=caller,
                correlation_id=correlation_id,
            )
        return result

    def update_family(
        self,
        family_id: str,
        payload: FamilyPayload,
        caller: Principal,
        correlation_id: Optional[UUID] = None,
    ) -> Result[Family]:
        """
        Replace a family's name, members and address.

        Fails with NOT_FOUND for an unknown id and PERMISSION_DENIED when
        ownership is enforced and `caller` is not the creator.
        """
        result = self._call(
            "update_family",
            lambda: self._registry.update_family(family_id, payload, caller),
            caller=caller,
            entity_type="family",
            entity_id=family_id,
            correlation_id=correlation_id,
        )
        if result.ok:
            self._audit_logger.log_family_updated(
                family_id=family_id,
                name=result.value.name,
                principal=caller,
                correlation_id=correlation_id,
            )
        return result

    def delete_family(
        self,
        family_id: str,
        caller: Principal,
        correlation_id: Optional[UUID] = None,
    ) -> Result[Family]:
        """
        Remove a family and return it.

        The family's expenses are left in the ledger.
        """
        result = self._call(
            "delete_family",
            lambda: self._registry.delete_family(family_id, caller),
            caller=caller,
            entity_type="family",
            entity_id=family_id,
            correlation_id=correlation_id,
        )
        if result.ok:
            self._audit_logger.log_family_deleted(
                family_id=family_id,
                principal=caller,
                correlation_id=correlation_id,
            )
        return result

    def add_family_expense(
        self,
        payload: FamilyExpensePayload,
        caller: Principal,
        correlation_id: Optional[UUID] = None,
    ) -> Result[FamilyExpense]:
        """
        Record an expense against an existing family.

        Fails with VALIDATION_FAILED if the family does not exist.
        """
        result = self._call(
            "add_family_expense",
            lambda: self._ledger.add_family_expense(payload),
            caller=caller,
            entity_type="family",
            entity_id=payload.family_id,
            correlation_id=correlation_id,
        )
        if result.ok:
            self._audit_logger.log_expense_added(
                expense_id=result.value.id,
                family_id=result.value.family_id,
                amount=result.value.amount,
                principal=caller,
                correlation_id=correlation_id,
            )
        return result

    def delete_family_expense(
        self,
        expense_id: str,
        caller: Principal,
        correlation_id: Optional[UUID] = None,
    ) -> Result[FamilyExpense]:
        result = self._call(
            "delete_family_expense",
            lambda: self._ledger.delete_family_expense(expense_id),
            caller=caller,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
        )
        if result.ok:
            self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                principal=caller,
                correlation_id=correlation_id,
            )
        return result


def create_context(
    settings: Optional[LedgerSettings] = None,
    sheets_client: Optional[GoogleSheetsClient] = None,
    clock: Optional[Clock] = None,
    id_generator: Optional[IdGenerator] = None,
) -> LedgerContext:
    """
    Factory function to build a LedgerContext from configuration.

    Args:
        settings: Ledger settings. Loaded from the environment if None.
        sheets_client: Client to use for the Google Sheets backend.
                    Built from GOOGLE_SHEETS_* settings if None.

    Returns:
        A context with stores, audit logger and flags wired up
    """
    settings = settings or get_settings().ledger

    if settings.uses_google_sheets:
        client = sheets_client or GoogleSheetsClient()
        family_store = GoogleSheetsStore(client.settings.families_sheet_name, client)
        expense_store = GoogleSheetsStore(client.settings.expenses_sheet_name, client)
        audit_storage = GoogleSheetsAuditStorage(client) if settings.audit_to_storage else None
    else:
        family_store = InMemoryStore("families")
        expense_store = InMemoryStore("family_expenses")
        audit_storage = InMemoryAuditStorage() if settings.audit_to_storage else None

    return LedgerContext(
        family_store=family_store,
        expense_store=expense_store,
        clock=clock,
        id_generator=id_generator,
        audit_logger=AuditLogger(audit_storage),
        enforce_ownership=settings.enforce_ownership,
        denormalize_family_name=settings.denormalize_family_name,
    )


def create_service(
    settings: Optional[LedgerSettings] = None,
    sheets_client: Optional[GoogleSheetsClient] = None,
) -> FamilyLedgerService:
    """Build a ready-to-use service from configuration."""
    return FamilyLedgerService(create_context(settings, sheets_client))
