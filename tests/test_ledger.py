"""Tests for the expense ledger."""

import pytest

from family_ledger.errors import NotFoundError, ValidationFailedError
from family_ledger.ledger import ExpenseLedger
from family_ledger.models.family import FamilyExpensePayload, FamilyPayload
from family_ledger.registry import FamilyRegistry
from family_ledger.services.runtime import FixedClock, IdGenerator
from family_ledger.services.storage import InMemoryStore


@pytest.fixture
def clock():
    return FixedClock(start=2_000)


@pytest.fixture
def registry(clock):
    return FamilyRegistry(
        store=InMemoryStore("families"),
        clock=clock,
        id_generator=IdGenerator.counting("family"),
    )


@pytest.fixture
def expense_store():
    return InMemoryStore("family_expenses")


@pytest.fixture
def ledger(expense_store, registry, clock):
    return ExpenseLedger(
        store=expense_store,
        registry=registry,
        clock=clock,
        id_generator=IdGenerator.counting("expense"),
    )


@pytest.fixture
def smith(registry):
    return registry.add_family(
        FamilyPayload(name="Smith", members=["John", "Jane"], address="153 Lincoln St"),
        caller="alice",
    )


@pytest.fixture
def jones(registry):
    return registry.add_family(
        FamilyPayload(name="Jones", members=["Tom"], address="7 Oak Ave"),
        caller="bob",
    )


def expense_for(family_id, amount="105.60", **extra):
    return FamilyExpensePayload(
        family_id=family_id,
        amount=amount,
        attachment_url="url/x",
        **extra,
    )


class TestAddExpense:
    """Tests for recording expenses."""

    def test_add_expense(self, ledger, smith):
        """Test a recorded expense references its family."""
        expense = ledger.add_family_expense(expense_for(smith.id, labels=["food"]))
        assert expense.id == "expense-0001"
        assert expense.family_id == smith.id
        assert expense.family_name == "Smith"
        assert expense.amount == "105.60"
        assert expense.attachment_url == "url/x"
        assert expense.labels == ["food"]
        assert expense.created_at == 2_000

    def test_missing_family_fails_validation(self, ledger, expense_store):
        """Test an unknown family id is refused and nothing is stored."""
        with pytest.raises(ValidationFailedError, match="Family with id=ghost not found."):
            ledger.add_family_expense(expense_for("ghost"))
        assert len(expense_store) == 0

    def test_family_name_snapshot_is_not_refreshed(self, ledger, registry, smith):
        """Test renaming a family leaves earlier snapshots stale."""
        expense = ledger.add_family_expense(expense_for(smith.id))
        registry.update_family(
            smith.id,
            FamilyPayload(name="Smyth", members=[], address=""),
            caller="alice",
        )
        stored = ledger.list_family_expenses(smith.id)[0]
        assert stored.family_name == "Smith"
        assert stored == expense

        later = ledger.add_family_expense(expense_for(smith.id))
        assert later.family_name == "Smyth"

    def test_no_snapshot_when_disabled(self, expense_store, registry, clock, smith):
        """Test family_name is left empty when denormalization is off."""
        ledger = ExpenseLedger(
            store=expense_store,
            registry=registry,
            clock=clock,
            denormalize_family_name=False,
        )
        expense = ledger.add_family_expense(expense_for(smith.id))
        assert expense.family_name is None


class TestListExpenses:
    """Tests for listing expenses by family."""

    def test_filters_by_family(self, ledger, smith, jones):
        """Test only the family's own expenses are returned."""
        a = ledger.add_family_expense(expense_for(smith.id, amount="1"))
        ledger.add_family_expense(expense_for(jones.id, amount="2"))
        c = ledger.add_family_expense(expense_for(smith.id, amount="3"))

        found = ledger.list_family_expenses(smith.id)
        assert {e.id for e in found} == {a.id, c.id}
        assert ledger.list_family_expenses(smith.id) == found

    def test_unknown_family_lists_empty(self, ledger):
        """Test an unknown family gives an empty list, not an error."""
        assert ledger.list_family_expenses("ghost") == []

    def test_expenses_survive_family_deletion(self, ledger, registry, smith):
        """Test deleting a family does not cascade to its expenses."""
        expense = ledger.add_family_expense(expense_for(smith.id))
        registry.delete_family(smith.id, caller="alice")
        assert ledger.list_family_expenses(smith.id) == [expense]

    def test_list_all_expenses(self, ledger, smith, jones):
        """Test the full ledger listing."""
        ledger.add_family_expense(expense_for(smith.id))
        ledger.add_family_expense(expense_for(jones.id))
        assert len(ledger.list_expenses()) == 2


class TestDeleteExpense:
    """Tests for deleting expenses."""

    def test_delete_returns_removed(self, ledger, smith):
        """Test deletion returns the removed record."""
        expense = ledger.add_family_expense(expense_for(smith.id))
        assert ledger.delete_family_expense(expense.id) == expense
        assert ledger.list_family_expenses(smith.id) == []

    def test_delete_unknown_id(self, ledger):
        """Test deleting a missing expense raises not found."""
        with pytest.raises(NotFoundError, match="Family expense with id=nope not found."):
            ledger.delete_family_expense("nope")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
