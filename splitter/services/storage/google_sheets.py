"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the persistent storage backend because:
1. Everyone in the group can look at the ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (a shared household ledger is small)
- No transactions (fine: the ledger is append-only)
- Limited query capabilities (we filter in Python)

The implementation follows the abstract interface, so we can swap
to PostgreSQL/SQLite later without changing business logic.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials

from splitter.config import GoogleSheetsSettings, get_settings
from splitter.models.audit import AuditEvent
from splitter.models.expense import EntryType, ExpenseRecord
from splitter.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    ExpenseStorageInterface,
    StorageError,
    matches_payer,
)


logger = structlog.get_logger(__name__)


# Column mappings for the ledger sheet
EXPENSE_COLUMNS = [
    "id",
    "created_at",
    "description",
    "amount",
    "paid_by",
    "split_with_json",
    "entry_type",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and worksheet lookup. Calls are made once;
    a failure is reported to the caller straight away.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

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
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

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
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
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
        return sheet

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger worksheet."""
        return self._get_or_create_sheet(
            self._settings.expenses_sheet_name, EXPENSE_COLUMNS, rows=1000
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


class GoogleSheetsExpenseStorage(ExpenseStorageInterface):
    """
    Google Sheets implementation of ledger storage.

    Entries are stored as rows in a worksheet with one entry per row.
    The split participants are JSON-serialized into a single cell.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _record_to_row(self, record: ExpenseRecord) -> list:
        """Convert an ExpenseRecord to a spreadsheet row."""
        return [
            str(record.id),
            record.created_at.isoformat(),
            record.description,
            str(record.amount),
            record.paid_by,
            json.dumps(record.split_with),
            record.entry_type.value if record.entry_type else "",
        ]

    def _row_to_record(self, row: list) -> ExpenseRecord:
        """Convert a spreadsheet row to an ExpenseRecord."""
        # Handle missing columns gracefully
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        split_json = safe_get(5)
        entry_type = safe_get(6)

        # Rows typed in by hand may lack an offset; those are UTC.
        created_at = datetime.fromisoformat(safe_get(1))
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return ExpenseRecord(
            id=UUID(safe_get(0)),
            created_at=created_at,
            description=safe_get(2),
            amount=Decimal(safe_get(3)),
            paid_by=safe_get(4),
            split_with=json.loads(split_json) if split_json else [],
            entry_type=EntryType(entry_type) if entry_type else None,
        )

    def _load_all(self) -> list[ExpenseRecord]:
        sheet = self._client.get_expenses_sheet()
        all_rows = sheet.get_all_values()[1:]  # Skip header

        records = []
        for row_number, row in enumerate(all_rows, start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(self._row_to_record(row))
            except (ValueError, TypeError, InvalidOperation) as e:
                logger.warning(
                    "malformed_ledger_row",
                    row_number=row_number,
                    error=str(e),
                )
        return records

    async def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        """Append a ledger entry to Google Sheets."""
        try:
            sheet = self._client.get_expenses_sheet()
            sheet.append_row(self._record_to_row(record), value_input_option="RAW")
            return record
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save expense: {e}")

    async def find_all(
        self,
        paid_by: Optional[str] = None,
    ) -> list[ExpenseRecord]:
        """List ledger entries, optionally only those paid by one participant."""
        try:
            records = self._load_all()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list expenses: {e}")
        return [r for r in records if matches_payer(r, paid_by)]

    async def find_recent(
        self,
        limit: int = 5,
    ) -> list[ExpenseRecord]:
        """Get the newest ledger entries."""
        records = await self.find_all()
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging must not break the main flow
            logger.warning(
                "audit_event_write_failed",
                event_id=str(event.event_id),
                error=str(e),
            )
            return False
