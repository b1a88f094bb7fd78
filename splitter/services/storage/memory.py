"""
In-Memory Storage Implementation

Keeps ledger entries in a Python list for the life of the process.
Used by the tests and for local runs without Google credentials.
Nothing survives a restart.
"""

from typing import Optional

from splitter.models.audit import AuditEvent
from splitter.models.expense import ExpenseRecord
from splitter.services.storage.interface import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    matches_payer,
)


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """List-backed ledger storage."""

    def __init__(self, records: Optional[list[ExpenseRecord]] = None):
        self._records: list[ExpenseRecord] = list(records or [])

    async def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        self._records.append(record)
        return record

    async def find_all(
        self,
        paid_by: Optional[str] = None,
    ) -> list[ExpenseRecord]:
        return [r for r in self._records if matches_payer(r, paid_by)]

    async def find_recent(
        self,
        limit: int = 5,
    ) -> list[ExpenseRecord]:
        newest_first = sorted(self._records, key=lambda r: r.created_at, reverse=True)
        return newest_first[:limit]


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed audit storage."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True
