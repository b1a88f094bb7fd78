"""
Main Orchestrator for Splitter

This module ties together all the components and defines the
end-to-end flows for:
1. Ledger operations (validate → append → audit; fetch → compute)
2. Chat (message → classify → fetch → reply)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written without passing validation
- Every answer is computed from a fresh storage snapshot
- Every write is audited

This is the "glue" that both the HTTP API and the dashboard use.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from splitter.audit import AuditLogger, create_correlation_id
from splitter.config import get_settings
from splitter.ledger import compute_balances, is_settlement, total_paid_by
from splitter.models.expense import (
    ChatReply,
    ExpenseCreate,
    ExpenseRecord,
    Intent,
    PayerTotals,
    SettlementRequest,
)
from splitter.queries import ChatResponder, classify
from splitter.services.storage import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
    InMemoryExpenseStorage,
    StorageError,
)
from splitter.validation import ExpenseValidationError, ExpenseValidator


logger = structlog.get_logger(__name__)


class LedgerFlow:
    """
    Orchestrates reads and writes of the ledger.

    Writes:
    1. Validate → reject with ExpenseValidationError on errors
    2. Stamp → ExpenseRecord with id and creation time
    3. Append → storage
    4. Audit

    Reads fetch the full snapshot on every call; nothing is cached.
    """

    def __init__(
        self,
        expense_storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        recent_limit: Optional[int] = None,
    ):
        self._storage = expense_storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._recent_limit = recent_limit or get_settings().ledger.recent_limit

    async def _append(
        self,
        expense: ExpenseCreate,
        correlation_id: UUID,
    ) -> ExpenseRecord:
        try:
            result = self._validator.validate_or_raise(expense)
        except ExpenseValidationError as e:
            await self._audit_logger.log_validation_failed(
                issues=[issue.model_dump() for issue in e.result.issues],
                correlation_id=correlation_id,
            )
            raise

        for warning in result.warnings:
            logger.warning("expense_warning", message=warning, correlation_id=str(correlation_id))

        record = ExpenseRecord.from_create(expense)
        try:
            return await self._storage.insert(record)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="insert",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

    async def _fetch(
        self,
        paid_by: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        try:
            return await self._storage.find_all(paid_by=paid_by)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="find_all",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

    async def add_expense(
        self,
        expense: ExpenseCreate,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Validate and append an expense.

        Entries that turn out to be settlements are audited as such.

        Raises:
            ExpenseValidationError: semantic validation failed
            StorageError: the write failed
        """
        correlation_id = correlation_id or create_correlation_id()
        record = await self._append(expense, correlation_id)

        if is_settlement(record):
            await self._audit_logger.log_settlement_recorded(
                expense_id=record.id,
                person_owes=record.paid_by,
                person_receives=record.split_with[0],
                amount=str(record.amount),
                correlation_id=correlation_id,
            )
        else:
            await self._audit_logger.log_expense_recorded(
                expense_id=record.id,
                paid_by=record.paid_by,
                amount=str(record.amount),
                split_with=record.split_with,
                correlation_id=correlation_id,
            )
        return record

    async def record_settlement(
        self,
        request: SettlementRequest,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """Append a settlement from request.person_owes to request.person_receives."""
        return await self.add_expense(request.to_expense(), correlation_id)

    async def list_expenses(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """All ledger entries in insertion order."""
        return await self._fetch(correlation_id=correlation_id)

    async def get_balances(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, Decimal]:
        """Compute every participant's balance from a fresh snapshot."""
        correlation_id = correlation_id or create_correlation_id()
        records = await self._fetch(correlation_id=correlation_id)
        balances = compute_balances(records)

        await self._audit_logger.log_balances_computed(
            record_count=len(records),
            participant_count=len(balances),
            correlation_id=correlation_id,
        )
        return balances

    async def totals_by_payer(
        self,
        person: str,
        correlation_id: Optional[UUID] = None,
    ) -> PayerTotals:
        """Everything ``person`` paid for, and the sum of it."""
        records = await self._fetch(paid_by=person, correlation_id=correlation_id)
        return PayerTotals(
            person=person,
            total_amount=total_paid_by(records, person),
            expenses=records,
        )

    async def recent_expenses(
        self,
        limit: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """The newest entries, newest first."""
        try:
            return await self._storage.find_recent(limit=limit or self._recent_limit)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="find_recent",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise


class ChatFlow:
    """
    Orchestrates the chat flow.

    FLOW:
    1. Classify the message (pattern rules, no storage access)
    2. Fetch the records the intent needs
    3. Format the reply from those records

    Replies never describe anything that is not in storage.
    """

    def __init__(
        self,
        expense_storage: ExpenseStorageInterface,
        responder: Optional[ChatResponder] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = expense_storage
        self._responder = responder or ChatResponder(
            currency_symbol=get_settings().ledger.currency_symbol
        )
        self._audit_logger = audit_logger or AuditLogger()

    async def _fetch(
        self,
        paid_by: Optional[str],
        correlation_id: UUID,
    ) -> list[ExpenseRecord]:
        try:
            return await self._storage.find_all(paid_by=paid_by)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="find_all",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

    async def answer(
        self,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> ChatReply:
        """
        Answer a chat message.

        Raises:
            StorageError: the ledger could not be read
        """
        correlation_id = correlation_id or create_correlation_id()
        query = classify(message)

        if query.intent == Intent.UNKNOWN:
            records = []
        elif query.intent == Intent.GET_PAID_BY_PERSON and query.name:
            records = await self._fetch(query.name, correlation_id)
        else:
            records = await self._fetch(None, correlation_id)

        response = self._responder.respond(query, records)

        await self._audit_logger.log_chat_query_answered(
            intent=query.intent.value,
            name=query.name,
            correlation_id=correlation_id,
        )
        return ChatReply(query=query, response=response)


def create_app_components(
    expense_storage: Optional[ExpenseStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[LedgerFlow, ChatFlow, str]:
    """
    Factory function to create all application components.

    Args:
        expense_storage: Ledger storage to use. When None, the backend
                         named by LEDGER_STORAGE_BACKEND is built.
        audit_storage: Audit storage to use. When None, Google Sheets
                       audit storage is used alongside the Sheets backend,
                       and audit events are only logged locally otherwise.

    Returns:
        (ledger_flow, chat_flow, storage_backend_name)
    """
    backend = "custom" if expense_storage else get_settings().ledger.storage_backend

    if expense_storage is None and backend == "google_sheets":
        try:
            sheets_client = GoogleSheetsClient()
            expense_storage = GoogleSheetsExpenseStorage(sheets_client)
            audit_storage = audit_storage or GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue in memory
            logger.error("google_sheets_unavailable", error=str(e))
            expense_storage = None

    if expense_storage is None:
        backend = "memory"
        expense_storage = InMemoryExpenseStorage()

    audit_logger = AuditLogger(audit_storage)

    ledger_flow = LedgerFlow(
        expense_storage=expense_storage,
        audit_logger=audit_logger,
    )
    chat_flow = ChatFlow(
        expense_storage=expense_storage,
        audit_logger=audit_logger,
    )

    return ledger_flow, chat_flow, backend
