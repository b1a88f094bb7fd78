"""Tests for schema and semantic validation of incoming expenses."""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from splitter.config import LedgerSettings
from splitter.models.expense import EntryType, ExpenseCreate, SettlementRequest
from splitter.validation import ExpenseValidationError, ExpenseValidator


@pytest.fixture
def validator():
    return ExpenseValidator(LedgerSettings(max_expense_amount=1000))


class TestSchemaValidation:
    """Stage 1: rejected by the models before semantic checks run."""

    def test_rejects_zero_amount(self):
        """Test that amounts must be positive."""
        with pytest.raises(ValidationError):
            ExpenseCreate(description="Lunch", amount=Decimal("0"), paid_by="Alice")

    def test_rejects_blank_description(self):
        """Test that whitespace-only descriptions are rejected."""
        with pytest.raises(ValidationError):
            ExpenseCreate(description="   ", amount=Decimal("5"), paid_by="Alice")

    def test_rejects_missing_payer(self):
        """Test that the payer is required."""
        with pytest.raises(ValidationError):
            ExpenseCreate.model_validate({"description": "Lunch", "amount": 5})


class TestExpenseValidator:
    """Stage 2: semantic checks."""

    def test_valid_expense(self, validator):
        """Test that an ordinary expense passes cleanly."""
        expense = ExpenseCreate(
            description="Dinner", amount=Decimal("60"), paid_by="Alice", split_with=["Bob"]
        )
        result = validator.validate(expense)

        assert not result.has_errors
        assert result.issues == []

    def test_blank_split_name_is_error(self, validator):
        """Test that an empty participant name blocks the write."""
        expense = ExpenseCreate(
            description="Dinner", amount=Decimal("60"), paid_by="Alice", split_with=["Bob", "  "]
        )
        result = validator.validate(expense)

        assert result.has_errors
        assert result.issues[0].issue_type == "blank_participant"

    def test_payer_in_split_is_warning(self, validator):
        """Test that listing the payer in splitWith only warns."""
        expense = ExpenseCreate(
            description="Dinner", amount=Decimal("60"), paid_by="Alice", split_with=["alice", "Bob"]
        )
        result = validator.validate(expense)

        assert not result.has_errors
        assert any("payer" in message for message in result.warnings)

    def test_duplicate_participant_is_warning(self, validator):
        """Test that duplicate names only warn."""
        expense = ExpenseCreate(
            description="Dinner", amount=Decimal("60"), paid_by="Alice", split_with=["Bob", "BOB"]
        )
        result = validator.validate(expense)

        assert not result.has_errors
        assert [i.issue_type for i in result.issues] == ["duplicate_participant"]

    def test_large_amount_is_warning(self, validator):
        """Test that amounts above the configured maximum warn."""
        expense = ExpenseCreate(description="Car", amount=Decimal("5000"), paid_by="Alice")
        result = validator.validate(expense)

        assert not result.has_errors
        assert result.issues[0].issue_type == "suspicious_value"

    def test_settlement_request_is_valid(self, validator):
        """Test that a settlement built from a request passes."""
        expense = SettlementRequest(
            person_owes="Bob", person_receives="Alice", amount=Decimal("50")
        ).to_expense()

        assert not validator.validate(expense).has_errors

    def test_settlement_needs_one_recipient(self, validator):
        """Test that a keyword settlement with two recipients is rejected."""
        expense = ExpenseCreate(
            description="Settlement", amount=Decimal("10"), paid_by="Bob", split_with=["Alice", "Carol"]
        )

        with pytest.raises(ExpenseValidationError) as exc_info:
            validator.validate_or_raise(expense)
        assert "exactly one recipient" in str(exc_info.value)
        assert exc_info.value.result.error_count == 1

    def test_settlement_with_self_is_rejected(self, validator):
        """Test that settling with yourself is rejected."""
        expense = ExpenseCreate(
            description="Settlement", amount=Decimal("10"), paid_by="Bob", split_with=["bob"]
        )

        with pytest.raises(ExpenseValidationError):
            validator.validate_or_raise(expense)

    def test_explicit_expense_type_skips_settlement_rules(self, validator):
        """Test that entryType=expense allows the keyword with many participants."""
        expense = ExpenseCreate(
            description="Settlement party",
            amount=Decimal("90"),
            paid_by="Alice",
            split_with=["Bob", "Carol"],
            entry_type=EntryType.EXPENSE,
        )

        assert validator.validate_or_raise(expense).issues == []
