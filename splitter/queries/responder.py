"""
Chat Responder

Turns a classified query plus a snapshot of ledger entries into a
plain-language reply. Replies only ever describe data that is in the
snapshot; a person with no balance gets a "couldn't find" sentence,
not an error.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from splitter.ledger import compute_balances, find_balance, total_paid_by
from splitter.models.expense import ClassifiedQuery, ExpenseRecord, Intent


HELP_MESSAGE = (
    "I can help you with your shared expenses. Try asking:\n"
    "- \"What's the balance?\"\n"
    "- \"How much does Alice owe?\"\n"
    "- \"How much did John pay?\"\n"
    "- \"Show all expenses\""
)


class ChatResponder:
    """
    Formats replies for each chat intent.

    Stateless apart from the currency symbol, so one instance can
    serve every request.
    """

    def __init__(self, currency_symbol: str = "$"):
        self._currency = currency_symbol

    def respond(
        self,
        query: ClassifiedQuery,
        records: Sequence[ExpenseRecord],
    ) -> str:
        """Route a classified query to the matching reply."""
        if query.intent == Intent.GET_BALANCES:
            return self._all_balances(records)
        elif query.intent == Intent.GET_BALANCE_BY_PERSON:
            return self._balance_for(query.name, records)
        elif query.intent == Intent.GET_PAID_BY_PERSON:
            return self._paid_by(query.name, records)
        elif query.intent == Intent.GET_EXPENSES:
            return self._expense_list(records)
        return HELP_MESSAGE

    def format_amount(self, amount: Decimal) -> str:
        """Render an amount with two decimals, e.g. $12.50."""
        return f"{self._currency}{amount:,.2f}"

    def describe_balance(self, name: str, amount: Decimal) -> str:
        """One sentence describing a participant's balance."""
        if amount > 0:
            return f"{name} should receive {self.format_amount(amount)}"
        if amount < 0:
            return f"{name} owes {self.format_amount(abs(amount))}"
        return f"{name} is settled up"

    def _all_balances(self, records: Sequence[ExpenseRecord]) -> str:
        balances = compute_balances(records)
        if not balances:
            return "No balances yet. Add some expenses first!"

        lines = [self.describe_balance(name, amount) for name, amount in balances.items()]
        return "Here are the current balances:\n" + "\n".join(lines)

    def _balance_for(self, name: Optional[str], records: Sequence[ExpenseRecord]) -> str:
        if not name:
            return "Whose balance would you like to check? Try \"How much does Alice owe?\""

        found = find_balance(compute_balances(records), name)
        if found is None:
            return f"I couldn't find any balance for {name}."

        stored_name, amount = found
        return self.describe_balance(stored_name, amount) + "."

    def _paid_by(self, name: Optional[str], records: Sequence[ExpenseRecord]) -> str:
        if not name:
            return "Whose payments would you like to check? Try \"How much did John pay?\""

        total = total_paid_by(records, name)
        return f"{name} has paid a total of {self.format_amount(total)} across all expenses."

    def _expense_list(self, records: Sequence[ExpenseRecord]) -> str:
        if not records:
            return "You haven't added any expenses yet."

        lines = []
        for record in records:
            split = ", ".join(record.split_with) if record.split_with else "N/A"
            lines.append(
                f"- {record.description}: {self.format_amount(record.amount)} "
                f"paid by {record.paid_by}, split with {split}"
            )
        return "Here are all the expenses:\n" + "\n".join(lines)
