"""Services package."""

from family_ledger.services.runtime import (
    Clock,
    FixedClock,
    IdGenerator,
    SystemClock,
)
from family_ledger.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStore,
    InMemoryAuditStorage,
    InMemoryStore,
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Platform collaborators
    "Clock",
    "FixedClock",
    "IdGenerator",
    "SystemClock",
    # Storage services
    "AuditStorageInterface",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsStore",
    "InMemoryAuditStorage",
    "InMemoryStore",
    "KeyValueStore",
    "StorageConnectionError",
    "StorageError",
]
