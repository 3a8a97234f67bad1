"""Family registry package."""

from family_ledger.registry.registry import FamilyRegistry

__all__ = ["FamilyRegistry"]
