"""
Family Registry

Owns the family store: family-id -> Family.

DESIGN DECISION: Ownership enforcement is a constructor flag rather than a
property of the deployment. With it on, only the principal recorded as
`created_by` may update or delete a family. With it off, anyone may.
`created_by` is recorded either way.

The registry raises domain exceptions; turning them into results for
callers is the service facade's job.
"""

from typing import Optional

from family_ledger.errors import NotFoundError, PermissionDeniedError
from family_ledger.models.family import Family, FamilyPayload, Principal
from family_ledger.services.runtime import Clock, IdGenerator, SystemClock
from family_ledger.services.storage import KeyValueStore


class FamilyRegistry:
    """
    CRUD over the family store.

    Iteration order is the store's key order, not creation order.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        enforce_ownership: bool = True,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._ids = id_generator or IdGenerator()
        self.enforce_ownership = enforce_ownership

    def _new_id(self) -> str:
        family_id = self._ids.new_id()
        while self._store.contains(family_id):
            family_id = self._ids.new_id()
        return family_id

    def _load(self, family_id: str) -> Family:
        document = self._store.get(family_id)
        if document is None:
            raise NotFoundError(f"Family with id={family_id} not found.", family_id)
        return Family.model_validate(document)

    def _check_owner(self, family: Family, caller: Principal, action: str) -> None:
        if self.enforce_ownership and caller != family.created_by:
            raise PermissionDeniedError(
                f"You don't have permission to {action} this family (id={family.id}).",
                family.id,
            )

    def list_families(self) -> list[Family]:
        return [Family.model_validate(doc) for doc in self._store.values()]

    def get_family(self, family_id: str) -> Family:
        """
        Look up a family.

        Raises:
            NotFoundError: If no family has this id
        """
        return self._load(family_id)

    def family_exists(self, family_id: str) -> bool:
        return self._store.contains(family_id)

    def add_family(self, payload: FamilyPayload, caller: Principal) -> Family:
        """
        Create a family owned by `caller`.

        The new record gets a fresh id, `created_at` set to now and no
        `updated_at`.
        """
        family = Family(
            id=self._new_id(),
            name=payload.name,
            members=list(payload.members),
            address=payload.address,
            created_by=caller,
            created_at=self._clock.now(),
            updated_at=None,
        )
        self._store.insert(family.id, family.to_document())
        return family

    def update_family(
        self,
        family_id: str,
        payload: FamilyPayload,
        caller: Principal,
    ) -> Family:
        """
        Replace a family's name, members and address.

        `id`, `created_by` and `created_at` are kept; `updated_at` is set
        to now.

        Raises:
            NotFoundError: If no family has this id
            PermissionDeniedError: If ownership is enforced and `caller`
                did not create the family. The stored record is untouched.
        """
        family = self._load(family_id)
        self._check_owner(family, caller, "update")

        updated = family.with_payload(payload, updated_at=self._clock.now())
        self._store.insert(updated.id, updated.to_document())
        return updated

    def delete_family(self, family_id: str, caller: Principal) -> Family:
        """
        Remove a family and return the removed record.

        Expenses recorded against the family are not touched.

        Raises:
            NotFoundError: If no family has this id
            PermissionDeniedError: If ownership is enforced and `caller`
                did not create the family
        """
        family = self._load(family_id)
        self._check_owner(family, caller, "delete")

        self._store.remove(family_id)
        return family
