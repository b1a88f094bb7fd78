"""
Core Data Models for Splitter

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and for the HTTP API

DESIGN DECISION: Python attributes are snake_case, the wire format is
camelCase (paidBy, splitWith, createdAt) so existing clients keep working.
Both spellings are accepted on input.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# Amounts are Decimal in Python and plain numbers on the wire.
Amount = Annotated[
    Decimal,
    Field(gt=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryType(str, Enum):
    """
    Explicit ledger entry type.

    Older records carry no type; for those the description decides
    (see splitter.ledger.is_settlement).
    """
    EXPENSE = "expense"
    SETTLEMENT = "settlement"


class Intent(str, Enum):
    """Closed set of chat intents the query router understands."""
    GET_BALANCES = "GET_BALANCES"
    GET_BALANCE_BY_PERSON = "GET_BALANCE_BY_PERSON"
    GET_PAID_BY_PERSON = "GET_PAID_BY_PERSON"
    GET_EXPENSES = "GET_EXPENSES"
    UNKNOWN = "UNKNOWN"


# =============================================================================
# LEDGER ENTRIES
# =============================================================================

class ExpenseCreate(BaseModel):
    """
    Incoming expense, as posted by a client.

    Everything an ExpenseRecord has except the server-assigned
    id and creation timestamp.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the money was spent on"
    )
    amount: Amount = Field(
        ...,
        description="Total amount paid"
    )
    paid_by: str = Field(
        ...,
        alias="paidBy",
        min_length=1,
        max_length=100,
        description="Participant who paid"
    )
    split_with: list[str] = Field(
        default_factory=list,
        alias="splitWith",
        description="Participants sharing the cost with the payer"
    )
    entry_type: Optional[EntryType] = Field(
        default=None,
        alias="entryType",
        description="Explicit entry type; inferred from the description when absent"
    )

    @field_validator('split_with')
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        """Strip surrounding whitespace from participant names."""
        return [name.strip() for name in v]


class ExpenseRecord(ExpenseCreate):
    """
    A persisted ledger entry.

    CRITICAL: Records are append-only. Nothing in the system
    updates or deletes one once it is stored.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique record ID"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        alias="createdAt",
        description="When the record was created"
    )

    @classmethod
    def from_create(cls, payload: ExpenseCreate) -> 'ExpenseRecord':
        """Stamp an incoming expense with an id and creation time."""
        return cls(**payload.model_dump())


class SettlementRequest(BaseModel):
    """A direct repayment from one participant to another."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    person_owes: str = Field(
        ...,
        alias="personOwes",
        min_length=1,
        max_length=100,
        description="Participant paying the money back"
    )
    person_receives: str = Field(
        ...,
        alias="personReceives",
        min_length=1,
        max_length=100,
        description="Participant receiving the money"
    )
    amount: Amount = Field(
        ...,
        description="Amount transferred"
    )

    def to_expense(self) -> ExpenseCreate:
        """Express the repayment as a settlement ledger entry."""
        return ExpenseCreate(
            description=f"Settlement: {self.person_owes} paid {self.person_receives}",
            amount=self.amount,
            paid_by=self.person_owes,
            split_with=[self.person_receives],
            entry_type=EntryType.SETTLEMENT,
        )


# =============================================================================
# CHAT MODELS
# =============================================================================

class ChatRequest(BaseModel):
    """
    A free-text question about the ledger.

    The message is optional here so the route can answer a missing
    message with its own 400 payload.
    """

    message: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="The user's question"
    )


class ClassifiedQuery(BaseModel):
    """Result of classifying a chat message."""

    intent: Intent
    name: Optional[str] = Field(
        default=None,
        description="Participant name extracted from the message, if any"
    )


class ChatReply(BaseModel):
    """What the chat flow hands back to the transport."""

    query: ClassifiedQuery
    response: str


# =============================================================================
# QUERY RESULTS
# =============================================================================

class PayerTotals(BaseModel):
    """Everything one participant has paid for."""
    model_config = ConfigDict(populate_by_name=True)

    person: str
    total_amount: Annotated[
        Decimal,
        PlainSerializer(float, return_type=float, when_used="json"),
    ] = Field(
        ...,
        alias="totalAmount",
    )
    expenses: list[ExpenseRecord] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_settlement', 'duplicate_participant')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of semantic validation of an incoming expense."""

    validated_at: datetime = Field(
        default_factory=utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Messages of the non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity != "error"]
