"""Tests for chat reply formatting."""

from decimal import Decimal

from splitter.models.expense import ClassifiedQuery, ExpenseRecord, Intent
from splitter.queries import HELP_MESSAGE, ChatResponder


def make_record(description, amount, paid_by, split_with=()):
    return ExpenseRecord(
        description=description,
        amount=Decimal(amount),
        paid_by=paid_by,
        split_with=list(split_with),
    )


LEDGER = [
    make_record("Dinner", "100", "Alice", ["Bob"]),
    make_record("Taxi", "20", "John"),
]


class TestChatResponder:
    """Tests for ChatResponder."""

    def setup_method(self):
        self.responder = ChatResponder()

    def test_format_amount(self):
        """Test two-decimal rendering with thousands separators."""
        assert self.responder.format_amount(Decimal("1234.5")) == "$1,234.50"

    def test_custom_currency(self):
        """Test that the currency symbol is configurable."""
        assert ChatResponder(currency_symbol="€").format_amount(Decimal("3")) == "€3.00"

    def test_describe_balance(self):
        """Test the three balance sentences."""
        assert self.responder.describe_balance("Alice", Decimal("50")) == "Alice should receive $50.00"
        assert self.responder.describe_balance("Bob", Decimal("-50")) == "Bob owes $50.00"
        assert self.responder.describe_balance("Carol", Decimal("0")) == "Carol is settled up"

    def test_all_balances(self):
        """Test the balance overview."""
        reply = self.responder.respond(ClassifiedQuery(intent=Intent.GET_BALANCES), LEDGER)

        assert reply.startswith("Here are the current balances:")
        assert "Alice should receive $50.00" in reply
        assert "Bob owes $50.00" in reply
        assert "John is settled up" in reply

    def test_all_balances_empty(self):
        """Test the overview of an empty ledger."""
        reply = self.responder.respond(ClassifiedQuery(intent=Intent.GET_BALANCES), [])

        assert reply == "No balances yet. Add some expenses first!"

    def test_balance_for_person_ignores_case(self):
        """Test a person's balance, looked up case-insensitively."""
        query = ClassifiedQuery(intent=Intent.GET_BALANCE_BY_PERSON, name="Bob")
        reply = self.responder.respond(query, [make_record("Dinner", "100", "Alice", ["bob"])])

        assert reply == "bob owes $50.00."

    def test_balance_for_person_with_two_spellings(self):
        """Test that the exact spelling is answered when both exist."""
        records = [
            make_record("Dinner", "100", "Alice", ["bob"]),
            make_record("Lunch", "100", "Bob", ["Alice"]),
        ]
        query = ClassifiedQuery(intent=Intent.GET_BALANCE_BY_PERSON, name="Bob")

        assert self.responder.respond(query, records) == "Bob should receive $50.00."

    def test_balance_for_unknown_person(self):
        """Test the reply for someone not in the ledger."""
        query = ClassifiedQuery(intent=Intent.GET_BALANCE_BY_PERSON, name="Zoe")

        assert self.responder.respond(query, LEDGER) == "I couldn't find any balance for Zoe."

    def test_paid_by(self):
        """Test the total paid by a participant."""
        query = ClassifiedQuery(intent=Intent.GET_PAID_BY_PERSON, name="John")
        reply = self.responder.respond(query, LEDGER)

        assert reply == "John has paid a total of $20.00 across all expenses."

    def test_paid_by_nobody(self):
        """Test that a participant who paid nothing gets a zero total."""
        query = ClassifiedQuery(intent=Intent.GET_PAID_BY_PERSON, name="Bob")

        assert "$0.00" in self.responder.respond(query, LEDGER)

    def test_expense_list(self):
        """Test the expense listing."""
        reply = self.responder.respond(ClassifiedQuery(intent=Intent.GET_EXPENSES), LEDGER)

        assert reply.startswith("Here are all the expenses:")
        assert "- Dinner: $100.00 paid by Alice, split with Bob" in reply
        assert "- Taxi: $20.00 paid by John, split with N/A" in reply

    def test_expense_list_empty(self):
        """Test the listing of an empty ledger."""
        reply = self.responder.respond(ClassifiedQuery(intent=Intent.GET_EXPENSES), [])

        assert reply == "You haven't added any expenses yet."

    def test_unknown_intent_gets_help(self):
        """Test that unknown questions get the help text."""
        reply = self.responder.respond(ClassifiedQuery(intent=Intent.UNKNOWN), LEDGER)

        assert reply == HELP_MESSAGE
