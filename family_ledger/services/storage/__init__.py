"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
In-memory storage is the default; Google Sheets is the persistent backend.
"""

from family_ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)
from family_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStore,
)
from family_ledger.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryStore",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsStore",
]
