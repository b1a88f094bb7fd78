"""
Data Models Package

This package contains all Pydantic models used in Splitter.
All data flowing through the system must conform to these schemas.
"""

from splitter.models.expense import (
    ChatReply,
    ChatRequest,
    ClassifiedQuery,
    EntryType,
    ExpenseCreate,
    ExpenseRecord,
    Intent,
    PayerTotals,
    SettlementRequest,
    ValidationIssue,
    ValidationResult,
    utcnow,
)
from splitter.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "ChatReply",
    "ChatRequest",
    "ClassifiedQuery",
    "EntryType",
    "ExpenseCreate",
    "ExpenseRecord",
    "Intent",
    "PayerTotals",
    "SettlementRequest",
    "ValidationIssue",
    "ValidationResult",
    "utcnow",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
