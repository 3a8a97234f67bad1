"""
Core Data Models for Family Ledger

These models define the schemas for the two collections the service keeps:
families (the registry) and family expenses (the ledger).

DESIGN DECISION: Field names are snake_case in Python and camelCase on the
wire. Stored documents are dumped by alias, so a row written by this service
uses the same field names (createdBy, attachmentURL, ...) as the records it
replaces.

DESIGN DECISION: `amount` stays a display string. The service records what
it was given and performs no numeric validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Identity of the caller invoking an operation, as supplied by the host.
Principal = str


# =============================================================================
# PAYLOADS - What callers send in
# =============================================================================

class FamilyPayload(BaseModel):
    """
    The full replaceable field set of a family.

    Used for both creation and update. Partial updates are not supported,
    so every field is required.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ...,
        description="Display name of the household"
    )
    members: list[str] = Field(
        ...,
        description="Member names, in the order given"
    )
    address: str = Field(
        ...,
        description="Display address"
    )


class FamilyExpensePayload(BaseModel):
    """Input for recording a new expense against an existing family."""
    model_config = ConfigDict(populate_by_name=True)

    family_id: str = Field(
        ...,
        alias="familyId",
        description="ID of the family this expense belongs to"
    )
    amount: str = Field(
        ...,
        description="Decimal amount as a display string"
    )
    attachment_url: str = Field(
        ...,
        alias="attachmentURL",
        description="Reference to an external resource, e.g. a receipt image"
    )
    labels: list[str] = Field(
        default_factory=list,
        description="Free-text tags"
    )


# =============================================================================
# STORED RECORDS
# =============================================================================

class Family(BaseModel):
    """
    A household record held by the family registry.

    `id`, `created_by` and `created_at` are set once on insertion and never
    change. `updated_at` is None until the first update.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique family ID, never reused"
    )
    name: str
    members: list[str] = Field(default_factory=list)
    address: str
    created_by: Principal = Field(
        ...,
        alias="createdBy",
        description="Principal that created the family"
    )
    created_at: int = Field(
        ...,
        ge=0,
        alias="createdAt",
        description="Creation time in nanoseconds"
    )
    updated_at: Optional[int] = Field(
        default=None,
        ge=0,
        alias="updatedAt",
        description="Time of the most recent update in nanoseconds"
    )

    def with_payload(self, payload: FamilyPayload, updated_at: int) -> "Family":
        """Return a copy with the replaceable fields taken from `payload`."""
        return self.model_copy(
            update={
                "name": payload.name,
                "members": list(payload.members),
                "address": payload.address,
                "updated_at": updated_at,
            }
        )

    def to_document(self) -> dict:
        """Serialize for a key-value store."""
        return self.model_dump(mode="json", by_alias=True)


class FamilyExpense(BaseModel):
    """
    An expense attributed to a family.

    Expenses are immutable once recorded; they can only be deleted.

    `family_name` is a copy-on-create snapshot of the parent family's name.
    It is never refreshed, so it goes stale if the family is renamed later.
    It is None when the ledger is configured not to denormalize.

    `family_id` is checked only at creation time. Deleting the family later
    leaves the expense in place.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique expense ID"
    )
    family_id: str = Field(
        ...,
        alias="familyId"
    )
    family_name: Optional[str] = Field(
        default=None,
        alias="familyName",
        description="Parent family's name at the time the expense was recorded"
    )
    amount: str
    attachment_url: str = Field(
        ...,
        alias="attachmentURL"
    )
    labels: list[str] = Field(default_factory=list)
    created_at: int = Field(
        ...,
        ge=0,
        alias="createdAt",
        description="Creation time in nanoseconds"
    )

    def to_document(self) -> dict:
        """Serialize for a key-value store."""
        return self.model_dump(mode="json", by_alias=True)
