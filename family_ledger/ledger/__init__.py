"""Expense ledger package."""

from family_ledger.ledger.ledger import ExpenseLedger

__all__ = ["ExpenseLedger"]
