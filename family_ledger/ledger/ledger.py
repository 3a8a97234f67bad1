"""
Expense Ledger

Owns the expense store: expense-id -> FamilyExpense.

The only link to the registry is the existence check made when an expense
is added. After that the two stores are independent: deleting a family
leaves its expenses behind, and renaming a family does not touch the
`family_name` snapshot on expenses recorded earlier.
"""

from typing import Optional

from family_ledger.errors import NotFoundError, ValidationFailedError
from family_ledger.models.family import FamilyExpense, FamilyExpensePayload
from family_ledger.registry import FamilyRegistry
from family_ledger.services.runtime import Clock, IdGenerator, SystemClock
from family_ledger.services.storage import KeyValueStore


class ExpenseLedger:
    """
    Create, list and delete family expenses.

    There is no update: an expense is changed by deleting and re-adding it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        registry: FamilyRegistry,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        denormalize_family_name: bool = True,
    ):
        self._store = store
        self._registry = registry
        self._clock = clock or SystemClock()
        self._ids = id_generator or IdGenerator()
        self.denormalize_family_name = denormalize_family_name

    def _new_id(self) -> str:
        expense_id = self._ids.new_id()
        while self._store.contains(expense_id):
            expense_id = self._ids.new_id()
        return expense_id

    def list_expenses(self) -> list[FamilyExpense]:
        return [FamilyExpense.model_validate(doc) for doc in self._store.values()]

    def list_family_expenses(self, family_id: str) -> list[FamilyExpense]:
        """
        All expenses recorded against `family_id`, in store order.

        Returns an empty list when there are none, including when the
        family does not exist (or no longer exists).
        """
        return [
            expense for expense in self.list_expenses()
            if expense.family_id == family_id
        ]

    def add_family_expense(self, payload: FamilyExpensePayload) -> FamilyExpense:
        """
        Record an expense against an existing family.

        Raises:
            ValidationFailedError: If `payload.family_id` is not in the
                registry. Nothing is inserted.
        """
        try:
            family = self._registry.get_family(payload.family_id)
        except NotFoundError:
            raise ValidationFailedError(
                f"Family with id={payload.family_id} not found.",
                payload.family_id,
            )

        expense = FamilyExpense(
            id=self._new_id(),
            family_id=family.id,
            family_name=family.name if self.denormalize_family_name else None,
            amount=payload.amount,
            attachment_url=payload.attachment_url,
            labels=list(payload.labels),
            created_at=self._clock.now(),
        )
        self._store.insert(expense.id, expense.to_document())
        return expense

    def delete_family_expense(self, expense_id: str) -> FamilyExpense:
        """
        Remove an expense and return the removed record.

        Raises:
            NotFoundError: If no expense has this id
        """
        document = self._store.remove(expense_id)
        if document is None:
            raise NotFoundError(
                f"Family expense with id={expense_id} not found.",
                expense_id,
            )
        return FamilyExpense.model_validate(document)
