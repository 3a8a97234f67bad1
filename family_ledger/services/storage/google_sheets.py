"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the persistent backend because:
1. Household admins can look at their data directly in Sheets
2. No database setup required
3. Data survives process restarts

TRADEOFFS:
- Not suitable for high-volume data (fine for household records)
- No transactions (one row per key keeps every write a single call)
- Lookups scan the sheet (we filter in Python)

Each key-value store gets its own worksheet with two columns:
the key and the value as JSON.
"""

import json
from datetime import datetime
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from family_ledger.config import GoogleSheetsSettings, get_settings
from family_ledger.models.audit import AuditEvent, AuditEventType, AuditSeverity
from family_ledger.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
    StorageConnectionError,
    StorageError,
)


# Column mappings for key-value sheets
STORE_COLUMNS = [
    "key",
    "value_json",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "principal",
    "correlation_id",
    "description",
    "details_json",
    "error_code",
    "error_message",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str], rows: int = 1000) -> gspread.Worksheet:
        """Get or create a worksheet with the given header row."""
        if title in self._worksheets:
            return self._worksheets[title]

        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)

        self._worksheets[title] = sheet
        return sheet


class GoogleSheetsStore(KeyValueStore):
    """
    Google Sheets implementation of the ordered key-value map.

    One row per key. Row 1 is the header.

    Only the API calls are retried. A cell that does not hold valid JSON
    fails straight away with StorageError.
    """

    def __init__(self, sheet_name: str, client: Optional[GoogleSheetsClient] = None):
        self.name = sheet_name
        self._client = client or GoogleSheetsClient()

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(self.name, STORE_COLUMNS)

    @staticmethod
    def _find_row(all_rows: list, key: str) -> Optional[int]:
        """1-based sheet row index holding `key`, skipping the header."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    def _decode(self, row: list) -> Optional[dict]:
        if len(row) < 2 or not row[1]:
            return None
        try:
            return json.loads(row[1])
        except ValueError as e:
            raise StorageError(f"Corrupt value for {row[0]} in {self.name}: {e}")

    # =========================================================================
    # API CALLS (retried)
    # =========================================================================

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _read_rows(self) -> list[list[str]]:
        try:
            return self._sheet().get_all_values()
        except Exception as e:
            raise StorageError(f"Failed to read {self.name}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write_row(self, key: str, encoded: str) -> None:
        """Update the row for `key` in place, or append one if there is none."""
        try:
            sheet = self._sheet()
            idx = self._find_row(sheet.get_all_values(), key)
            if idx is None:
                sheet.append_row([key, encoded], value_input_option="RAW")
            else:
                sheet.update_cell(idx, 2, encoded)
        except Exception as e:
            raise StorageError(f"Failed to write {key} to {self.name}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _delete_row(self, key: str) -> None:
        """Delete the row for `key`. A retry that finds it gone is done."""
        try:
            sheet = self._sheet()
            idx = self._find_row(sheet.get_all_values(), key)
            if idx is not None:
                sheet.delete_rows(idx)
        except Exception as e:
            raise StorageError(f"Failed to remove {key} from {self.name}: {e}")

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def get(self, key: str) -> Optional[dict]:
        all_rows = self._read_rows()
        idx = self._find_row(all_rows, key)
        if idx is None:
            return None
        return self._decode(all_rows[idx - 1])

    def insert(self, key: str, value: dict) -> Optional[dict]:
        encoded = json.dumps(value)
        all_rows = self._read_rows()
        idx = self._find_row(all_rows, key)
        previous = None if idx is None else self._decode(all_rows[idx - 1])

        self._write_row(key, encoded)
        return previous

    def remove(self, key: str) -> Optional[dict]:
        all_rows = self._read_rows()
        idx = self._find_row(all_rows, key)
        if idx is None:
            return None

        previous = self._decode(all_rows[idx - 1])
        self._delete_row(key)
        return previous

    def items(self) -> list[tuple[str, dict]]:
        pairs = []
        for row in self._read_rows()[1:]:  # Skip header
            if not row or not row[0]:  # Skip empty rows
                continue
            value = self._decode(row)
            if value is not None:
                pairs.append((row[0], value))

        pairs.sort(key=lambda pair: pair[0])
        return pairs


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(
            self._client.settings.audit_sheet_name,
            AUDIT_COLUMNS,
            rows=5000,  # More rows for audit log
        )

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AuditEvent(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=safe_get(5) or None,
            principal=safe_get(6) or None,
            correlation_id=UUID(safe_get(7)) if safe_get(7) else None,
            description=safe_get(8),
            details=json.loads(safe_get(9)) if safe_get(9) else {},
            error_code=safe_get(10) or None,
            error_message=safe_get(11) or None,
        )

    def _all_events(self) -> list[AuditEvent]:
        try:
            all_rows = self._sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except (ValueError, KeyError):
                continue  # Skip malformed rows
        return events

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            self._sheet().append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to write audit event: {e}")

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        events = [
            e for e in self._all_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        events = [e for e in self._all_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        events = self._all_events()
        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
