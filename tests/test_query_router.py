"""
Tests for chat intent classification.

Rule order matters, so several tests pin down which rule wins when
more than one could match.
"""

import pytest

from splitter.models.expense import Intent
from splitter.queries import classify, extract_name


class TestExtractName:
    """Tests for participant name extraction."""

    def test_skips_question_words(self):
        """Test that a capitalized question word is not taken as a name."""
        assert extract_name("How much did John pay?") == "John"

    def test_no_name(self):
        """Test a message without any name."""
        assert extract_name("What's the balance?") is None

    def test_lowercase_names_are_missed(self):
        """Test that only capitalized words count as names."""
        assert extract_name("how much does alice owe") is None

    def test_first_name_wins(self):
        """Test that the first candidate is returned."""
        assert extract_name("Does Alice owe Bob?") == "Alice"

    def test_all_caps_is_not_a_name(self):
        """Test that shouted words do not match."""
        assert extract_name("SHOW ME") is None


class TestClassify:
    """Tests for intent classification."""

    @pytest.mark.parametrize("message", [
        "What's the balance?",
        "show balances",
        "balance please",
    ])
    def test_all_balances(self, message):
        """Test balance questions without a name."""
        query = classify(message)

        assert query.intent == Intent.GET_BALANCES
        assert query.name is None

    def test_balance_of_person(self):
        """Test a balance question naming someone."""
        query = classify("What is Alice's balance?")

        assert query.intent == Intent.GET_BALANCE_BY_PERSON
        assert query.name == "Alice"

    def test_owe_question(self):
        """Test 'owe' with a name."""
        query = classify("How much does Bob owe?")

        assert query.intent == Intent.GET_BALANCE_BY_PERSON
        assert query.name == "Bob"

    def test_debt_question(self):
        """Test 'debt' with a name."""
        assert classify("Carol debt?").intent == Intent.GET_BALANCE_BY_PERSON

    def test_paid_question(self):
        """Test a payment question naming someone."""
        query = classify("How much did John pay?")

        assert query.intent == Intent.GET_PAID_BY_PERSON
        assert query.name == "John"

    def test_name_that_is_also_a_word(self):
        """Test that a first name like Will is still recognised."""
        query = classify("How much did Will pay?")

        assert query.intent == Intent.GET_PAID_BY_PERSON
        assert query.name == "Will"

    def test_paid_and_owe_prefers_balance(self):
        """Test that 'owe' wins over 'paid' when both appear."""
        query = classify("John paid but does he owe?")

        assert query.intent == Intent.GET_BALANCE_BY_PERSON

    def test_expense_list(self):
        """Test a request for the expense list."""
        query = classify("list all expenses")

        assert query.intent == Intent.GET_EXPENSES
        assert query.name is None

    def test_expense_keyword_beats_person(self):
        """Test that listing words outrank person intents."""
        query = classify("Show what Alice paid")

        assert query.intent == Intent.GET_EXPENSES
        assert query.name is None

    def test_name_without_keyword_is_unknown(self):
        """Test that a bare name is not enough."""
        assert classify("Alice").intent == Intent.UNKNOWN

    def test_owe_without_name_is_unknown(self):
        """Test that a person intent needs a name."""
        assert classify("how much do i owe").intent == Intent.UNKNOWN

    def test_gibberish(self):
        """Test an unrelated message."""
        query = classify("hello there")

        assert query.intent == Intent.UNKNOWN
        assert query.name is None
