"""
Two-Stage Expense Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION (pydantic, in splitter.models):
- Required fields present
- Positive amount
- Non-empty names

STAGE 2 - SEMANTIC VALIDATION (this module):
- Settlements name exactly one recipient, and not the payer
- Payer not splitting with themself
- No duplicate participants
- Absurd amount detection

IMPORTANT: Validation NEVER silently fixes issues.
Errors block the write; warnings are logged and the write goes ahead.
"""

from decimal import Decimal
from typing import Optional

from splitter.config import LedgerSettings, get_settings
from splitter.ledger import is_settlement
from splitter.models.expense import (
    ExpenseCreate,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidationError(Exception):
    """An expense failed semantic validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        errors = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(errors) or "Invalid expense")


class ExpenseValidator:
    """Semantic checks for entries about to be written to the ledger."""

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def _validate_settlement(self, expense: ExpenseCreate) -> list[ValidationIssue]:
        issues = []

        if len(expense.split_with) != 1:
            issues.append(ValidationIssue(
                field="splitWith",
                issue_type="invalid_settlement",
                message=(
                    "A settlement must name exactly one recipient in splitWith, "
                    f"got {len(expense.split_with)}. If this is an ordinary "
                    "expense, set entryType to \"expense\"."
                ),
                severity="error",
            ))
        elif expense.split_with[0].lower() == expense.paid_by.lower():
            issues.append(ValidationIssue(
                field="splitWith",
                issue_type="invalid_settlement",
                message=f"{expense.paid_by} cannot settle up with themselves",
                severity="error",
            ))

        return issues

    def _validate_split(self, expense: ExpenseCreate) -> list[ValidationIssue]:
        issues = []
        lowered = [name.lower() for name in expense.split_with]

        if expense.paid_by.lower() in lowered:
            issues.append(ValidationIssue(
                field="splitWith",
                issue_type="payer_in_split",
                message=(
                    f"{expense.paid_by} is listed in splitWith; the payer is "
                    "always included in the split automatically"
                ),
                severity="warning",
            ))

        if len(set(lowered)) != len(lowered):
            issues.append(ValidationIssue(
                field="splitWith",
                issue_type="duplicate_participant",
                message="splitWith lists the same participant more than once",
                severity="warning",
            ))

        return issues

    def validate(self, expense: ExpenseCreate) -> ValidationResult:
        """
        Run semantic validation.

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if any(not name for name in expense.split_with):
            issues.append(ValidationIssue(
                field="splitWith",
                issue_type="blank_participant",
                message="splitWith contains a blank name",
                severity="error",
            ))

        if is_settlement(expense):
            issues.extend(self._validate_settlement(expense))
        else:
            issues.extend(self._validate_split(expense))

        max_amount = Decimal(str(self._settings.max_expense_amount))
        if expense.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({expense.amount:,.2f}) seems unusually high",
                severity="warning",
            ))

        return ValidationResult(issues=issues)

    def validate_or_raise(self, expense: ExpenseCreate) -> ValidationResult:
        """Validate and raise ExpenseValidationError on any error-level issue."""
        result = self.validate(expense)
        if result.has_errors:
            raise ExpenseValidationError(result)
        return result
