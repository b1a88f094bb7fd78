"""
Integration tests for the ledger and chat flows.

All flows run against in-memory storage.
"""

import asyncio
import pytest
from decimal import Decimal

from splitter.audit import AuditLogger
from splitter.config import LedgerSettings
from splitter.models.audit import AuditEventType
from splitter.models.expense import ExpenseCreate, Intent, SettlementRequest
from splitter.orchestrator import ChatFlow, LedgerFlow, create_app_components
from splitter.queries import HELP_MESSAGE, ChatResponder
from splitter.services.storage import (
    ExpenseStorageInterface,
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
    StorageError,
)
from splitter.validation import ExpenseValidationError, ExpenseValidator


class BrokenExpenseStorage(ExpenseStorageInterface):
    async def insert(self, record):
        raise StorageError("disk full")

    async def find_all(self, paid_by=None):
        raise StorageError("unreachable")

    async def find_recent(self, limit=5):
        raise StorageError("unreachable")


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def expense_storage():
    return InMemoryExpenseStorage()


@pytest.fixture
def ledger_flow(expense_storage, audit_storage):
    return LedgerFlow(
        expense_storage=expense_storage,
        validator=ExpenseValidator(LedgerSettings()),
        audit_logger=AuditLogger(audit_storage),
        recent_limit=5,
    )


@pytest.fixture
def chat_flow(expense_storage, audit_storage):
    return ChatFlow(
        expense_storage=expense_storage,
        responder=ChatResponder(),
        audit_logger=AuditLogger(audit_storage),
    )


def dinner():
    return ExpenseCreate(
        description="Dinner", amount=Decimal("100"), paid_by="Alice", split_with=["Bob"]
    )


class TestLedgerFlow:
    """Tests for LedgerFlow."""

    def test_add_expense_stores_and_audits(self, ledger_flow, expense_storage, audit_storage):
        """Test that an accepted expense is stored and audited."""
        record = asyncio.run(ledger_flow.add_expense(dinner()))

        assert asyncio.run(expense_storage.find_all()) == [record]
        assert audit_storage.events[-1].event_type == AuditEventType.EXPENSE_RECORDED
        assert audit_storage.events[-1].entity_id == record.id

    def test_rejected_expense_is_not_stored(self, ledger_flow, expense_storage, audit_storage):
        """Test that validation errors block the write and are audited."""
        bad = ExpenseCreate(
            description="Settlement", amount=Decimal("10"), paid_by="Bob", split_with=[]
        )

        with pytest.raises(ExpenseValidationError):
            asyncio.run(ledger_flow.add_expense(bad))

        assert asyncio.run(expense_storage.find_all()) == []
        assert audit_storage.events[-1].event_type == AuditEventType.VALIDATION_FAILED

    def test_settlement_round_trip(self, ledger_flow, audit_storage):
        """Test that settling the full debt zeroes both balances."""
        asyncio.run(ledger_flow.add_expense(dinner()))
        record = asyncio.run(ledger_flow.record_settlement(SettlementRequest(
            person_owes="Bob", person_receives="Alice", amount=Decimal("50")
        )))

        assert record.description == "Settlement: Bob paid Alice"
        assert audit_storage.events[-1].event_type == AuditEventType.SETTLEMENT_RECORDED
        assert asyncio.run(ledger_flow.get_balances()) == {
            "Alice": Decimal("0"),
            "Bob": Decimal("0"),
        }

    def test_balances_reflect_every_write(self, ledger_flow):
        """Test that balances are recomputed on each call."""
        assert asyncio.run(ledger_flow.get_balances()) == {}

        asyncio.run(ledger_flow.add_expense(dinner()))

        assert asyncio.run(ledger_flow.get_balances())["Bob"] == Decimal("-50")

    def test_totals_by_payer(self, ledger_flow):
        """Test the per-payer summary."""
        asyncio.run(ledger_flow.add_expense(dinner()))
        asyncio.run(ledger_flow.add_expense(ExpenseCreate(
            description="Taxi", amount=Decimal("20.5"), paid_by="alice"
        )))
        asyncio.run(ledger_flow.add_expense(ExpenseCreate(
            description="Cinema", amount=Decimal("30"), paid_by="Bob"
        )))

        totals = asyncio.run(ledger_flow.totals_by_payer("Alice"))

        assert totals.total_amount == Decimal("120.5")
        assert [r.description for r in totals.expenses] == ["Dinner", "Taxi"]

    def test_recent_expenses_limit(self, ledger_flow):
        """Test that recent expenses are capped and newest first."""
        for i in range(7):
            asyncio.run(ledger_flow.add_expense(ExpenseCreate(
                description=f"Item {i}", amount=Decimal("1"), paid_by="Alice"
            )))

        recent = asyncio.run(ledger_flow.recent_expenses())

        assert len(recent) == 5
        assert recent[0].created_at >= recent[-1].created_at

    def test_storage_errors_are_audited(self, audit_storage):
        """Test that storage failures propagate and are audited."""
        flow = LedgerFlow(
            expense_storage=BrokenExpenseStorage(),
            validator=ExpenseValidator(LedgerSettings()),
            audit_logger=AuditLogger(audit_storage),
            recent_limit=5,
        )

        with pytest.raises(StorageError):
            asyncio.run(flow.add_expense(dinner()))
        with pytest.raises(StorageError):
            asyncio.run(flow.get_balances())

        assert [e.event_type for e in audit_storage.events] == [
            AuditEventType.STORAGE_ERROR,
            AuditEventType.STORAGE_ERROR,
        ]


class TestChatFlow:
    """Tests for ChatFlow."""

    def test_balance_question(self, ledger_flow, chat_flow):
        """Test answering a balance question from stored data."""
        asyncio.run(ledger_flow.add_expense(dinner()))

        reply = asyncio.run(chat_flow.answer("How much does Bob owe?"))

        assert reply.query.intent == Intent.GET_BALANCE_BY_PERSON
        assert reply.response == "Bob owes $50.00."

    def test_paid_question(self, ledger_flow, chat_flow):
        """Test answering a payment question."""
        asyncio.run(ledger_flow.add_expense(dinner()))

        reply = asyncio.run(chat_flow.answer("How much did Alice pay?"))

        assert reply.response == "Alice has paid a total of $100.00 across all expenses."

    def test_unknown_question_does_not_read_storage(self, audit_storage):
        """Test that unknown questions get help without touching storage."""
        flow = ChatFlow(
            expense_storage=BrokenExpenseStorage(),
            responder=ChatResponder(),
            audit_logger=AuditLogger(audit_storage),
        )

        reply = asyncio.run(flow.answer("hello there"))

        assert reply.response == HELP_MESSAGE
        assert audit_storage.events[-1].event_type == AuditEventType.CHAT_QUERY_ANSWERED


    def test_storage_errors_are_audited(self, audit_storage):
        """Test that failed reads propagate and are audited."""
        flow = ChatFlow(
            expense_storage=BrokenExpenseStorage(),
            responder=ChatResponder(),
            audit_logger=AuditLogger(audit_storage),
        )

        with pytest.raises(StorageError):
            asyncio.run(flow.answer("What's the balance?"))
        with pytest.raises(StorageError):
            asyncio.run(flow.answer("How much did John pay?"))

        assert [e.event_type for e in audit_storage.events] == [
            AuditEventType.STORAGE_ERROR,
            AuditEventType.STORAGE_ERROR,
        ]


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_uses_given_storage(self):
        """Test that injected storage is used as-is."""
        storage = InMemoryExpenseStorage()

        ledger_flow, chat_flow, backend = create_app_components(expense_storage=storage)

        assert backend == "custom"
        assert isinstance(ledger_flow, LedgerFlow)
        assert isinstance(chat_flow, ChatFlow)

    def test_defaults_to_memory(self, monkeypatch):
        """Test the default backend."""
        from splitter.config import get_settings

        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        get_settings.cache_clear()

        _, _, backend = create_app_components()

        assert backend == "memory"

    def test_falls_back_to_memory_without_sheets(self, monkeypatch):
        """Test that unusable Google Sheets settings fall back to memory."""
        from splitter.config import get_settings

        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        get_settings.cache_clear()

        _, _, backend = create_app_components()

        assert backend == "memory"
