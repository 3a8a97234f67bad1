"""
In-memory storage.

Used for tests and for the default "memory" backend. Data lives as long
as the store object does.
"""

import copy
from typing import Optional
from uuid import UUID

from family_ledger.models.audit import AuditEvent
from family_ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
)


class InMemoryStore(KeyValueStore):
    """
    Ordered map held in a dict.

    Values are deep-copied on the way in and out, so mutating a returned
    dict never changes what is stored.
    """

    def __init__(self, name: str = "store"):
        self.name = name
        self._data: dict[str, dict] = {}

    def get(self, key: str) -> Optional[dict]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def insert(self, key: str, value: dict) -> Optional[dict]:
        previous = self._data.get(key)
        self._data[key] = copy.deepcopy(value)
        return previous

    def remove(self, key: str) -> Optional[dict]:
        return self._data.pop(key, None)

    def items(self) -> list[tuple[str, dict]]:
        return [
            (key, copy.deepcopy(self._data[key]))
            for key in sorted(self._data)
        ]

    def contains(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        # Reversed append order; equal timestamps keep newest-first.
        return list(reversed(self._events))[:limit]
