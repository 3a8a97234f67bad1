"""
Tests for Family Ledger

Test strategy:
1. Unit tests for individual components (models, stores, registry, ledger)
2. Integration tests for the service facade (in-memory stores)
3. No real API calls in tests (Google Sheets is faked)
"""

import pytest
from uuid import uuid4

from family_ledger.models.family import (
    Family,
    FamilyExpense,
    FamilyExpensePayload,
    FamilyPayload,
)
from family_ledger.models.result import ErrorKind, Result, ServiceError
from family_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestFamilyModels:
    """Tests for family-related Pydantic models."""

    def test_family_payload_creation(self):
        """Test FamilyPayload model creation."""
        payload = FamilyPayload(
            name="Smith",
            members=["John", "Jane"],
            address="153 Lincoln St",
        )
        assert payload.name == "Smith"
        assert payload.members == ["John", "Jane"]

    def test_family_payload_requires_all_fields(self):
        """Test that partial payloads are rejected."""
        with pytest.raises(ValueError):
            FamilyPayload(name="Smith", members=["John"])

    def test_family_document_uses_wire_names(self):
        """Test that stored documents use camelCase field names."""
        family = Family(
            id="f-1",
            name="Smith",
            members=["John"],
            address="153 Lincoln St",
            created_by="alice",
            created_at=10,
        )
        doc = family.to_document()
        assert doc["createdBy"] == "alice"
        assert doc["createdAt"] == 10
        assert doc["updatedAt"] is None
        assert Family.model_validate(doc) == family

    def test_family_with_payload_keeps_identity(self):
        """Test that applying a payload keeps id and creation fields."""
        family = Family(
            id="f-1",
            name="Smith",
            members=["John"],
            address="153 Lincoln St",
            created_by="alice",
            created_at=10,
        )
        updated = family.with_payload(
            FamilyPayload(name="Smyth", members=["John", "Jim"], address="1 Elm St"),
            updated_at=20,
        )
        assert updated.id == "f-1"
        assert updated.created_by == "alice"
        assert updated.created_at == 10
        assert updated.updated_at == 20
        assert updated.name == "Smyth"
        assert family.name == "Smith"

    def test_family_rejects_negative_timestamp(self):
        """Test that timestamps cannot be negative."""
        with pytest.raises(ValueError):
            Family(
                id="f-1",
                name="Smith",
                members=[],
                address="",
                created_by="alice",
                created_at=-1,
            )

    def test_expense_payload_accepts_aliases(self):
        """Test FamilyExpensePayload accepts the wire field names."""
        payload = FamilyExpensePayload(
            familyId="f-1",
            amount="105.60",
            attachmentURL="url/x",
        )
        assert payload.family_id == "f-1"
        assert payload.attachment_url == "url/x"
        assert payload.labels == []

    def test_expense_amount_is_not_validated(self):
        """Test that amount is kept verbatim as a display string."""
        payload = FamilyExpensePayload(
            family_id="f-1",
            amount="about a hundred",
            attachment_url="url/x",
        )
        assert payload.amount == "about a hundred"

    def test_expense_document_round_trip(self):
        """Test FamilyExpense serialization keeps the snapshot and labels."""
        expense = FamilyExpense(
            id="e-1",
            family_id="f-1",
            family_name="Smith",
            amount="105.60",
            attachment_url="url/x",
            labels=["groceries", "weekly"],
            created_at=5,
        )
        doc = expense.to_document()
        assert doc["familyId"] == "f-1"
        assert doc["familyName"] == "Smith"
        assert doc["attachmentURL"] == "url/x"
        assert FamilyExpense.model_validate(doc) == expense


class TestResult:
    """Tests for the tagged Result model."""

    def test_success(self):
        """Test a successful result carries its value."""
        result = Result.success(42)
        assert result.ok is True
        assert result.value == 42
        assert result.error is None
        assert result.unwrap() == 42

    def test_failure(self):
        """Test a failed result carries kind and message."""
        result = Result.failure(ErrorKind.NOT_FOUND, "Family with id=x not found.")
        assert result.ok is False
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error == ServiceError(
            kind=ErrorKind.NOT_FOUND,
            message="Family with id=x not found.",
        )

    def test_unwrap_failure_raises(self):
        """Test unwrap on a failure raises with the message."""
        result = Result.failure(ErrorKind.PERMISSION_DENIED, "nope")
        with pytest.raises(ValueError, match="nope"):
            result.unwrap()

    def test_error_kind_values(self):
        """Test error kind string values."""
        assert ErrorKind.NOT_FOUND.value == "not_found"
        assert ErrorKind.PERMISSION_DENIED.value == "permission_denied"
        assert ErrorKind.VALIDATION_FAILED.value == "validation_failed"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.FAMILY_CREATED,
            description="Family created",
        )
        assert event.event_type == AuditEventType.FAMILY_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.expense_added(
            expense_id="e-1",
            family_id="f-1",
            amount="105.60",
            principal="alice",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_added"
        assert log_dict["details"]["amount"] == "105.60"
        assert log_dict["principal"] == "alice"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        correlation_id = uuid4()
        event = AuditEventBuilder.family_deleted(
            family_id="f-1",
            principal="alice",
            correlation_id=correlation_id,
        )
        row = event.to_sheets_row()
        assert len(row) == 12  # Expected number of columns
        assert row[2] == "family_deleted"
        assert row[5] == "f-1"
        assert row[6] == "alice"
        assert row[7] == str(correlation_id)

    def test_permission_denied_is_warning(self):
        """Test AuditEventBuilder.permission_denied."""
        event = AuditEventBuilder.permission_denied(
            operation="update_family",
            family_id="f-1",
            principal="mallory",
        )
        assert event.event_type == AuditEventType.PERMISSION_DENIED
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "f-1"
        assert event.details["operation"] == "update_family"

    def test_system_error_is_error(self):
        """Test AuditEventBuilder.system_error."""
        event = AuditEventBuilder.system_error(
            error_type="storage_error",
            error_message="sheet unavailable",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "sheet unavailable"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
