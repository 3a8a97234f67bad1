"""
Abstract Storage Interface

DESIGN DECISION: The registry and the ledger each sit on an ordered,
string-keyed map. We define that map as an abstract interface so we can:
1. Keep data in Google Sheets so it survives restarts
2. Use in-memory storage for testing (a fresh store per test)
3. Keep business logic decoupled from storage implementation

Values are plain JSON-compatible dicts. Converting to and from the
pydantic models is the caller's job, so a store never needs to know
what it holds.

Iteration order is ascending key order, like a B-tree map.
It is NOT creation order.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
from uuid import UUID

from family_ledger.models.audit import AuditEvent


class KeyValueStore(ABC):
    """
    Abstract ordered key-value map.

    Any storage implementation (in-memory, Google Sheets, ...)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[dict]:
        """
        Look up a value by key.

        Returns:
            A copy of the stored value, or None if the key is absent
        """
        pass

    @abstractmethod
    def insert(self, key: str, value: dict) -> Optional[dict]:
        """
        Insert or replace the value stored under `key`.

        Returns:
            The previous value if the key existed, None otherwise

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> Optional[dict]:
        """
        Remove a key.

        Returns:
            The removed value, or None if the key was absent
        """
        pass

    @abstractmethod
    def items(self) -> list[tuple[str, dict]]:
        """
        All (key, value) pairs in ascending key order.
        """
        pass

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self) -> list[str]:
        return [key for key, _ in self.items()]

    def values(self) -> list[dict]:
        return [value for _, value in self.items()]

    def __len__(self) -> int:
        return len(self.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
