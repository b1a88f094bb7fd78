"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep the ledger engine decoupled from storage implementation

The interface is intentionally small. The ledger is append-only, so
there is no update and no delete: only insert and the reads the
ledger and the chat need.
"""

from abc import ABC, abstractmethod
from typing import Optional

from splitter.models.expense import ExpenseRecord
from splitter.models.audit import AuditEvent


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for ledger entry storage.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        """
        Append a ledger entry.

        Args:
            record: The entry to store

        Returns:
            The stored entry

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        paid_by: Optional[str] = None,
    ) -> list[ExpenseRecord]:
        """
        List ledger entries in insertion order.

        Args:
            paid_by: Only entries paid by this participant
                     (exact match, ignoring letter case)

        Returns:
            List of matching entries

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def find_recent(
        self,
        limit: int = 5,
    ) -> list[ExpenseRecord]:
        """
        Get the most recently created entries.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of entries (newest first)
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


def matches_payer(record: ExpenseRecord, paid_by: Optional[str]) -> bool:
    """Shared payer filter: no filter, or case-insensitive exact match."""
    return paid_by is None or record.paid_by.lower() == paid_by.lower()
