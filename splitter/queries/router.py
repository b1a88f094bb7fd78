"""
Chat Intent Router

DESIGN DECISION: Intent detection is PATTERN MATCHING, not language
understanding. A message is lower-cased once and run through an ordered
list of (predicate, intent) rules; the first rule that matches wins.

The rules overlap on purpose ("balance" appears in two of them), so
their ORDER is part of the contract. Keep it in INTENT_RULES, never in
nested conditionals.
"""

import re
from collections.abc import Callable
from typing import Optional

from splitter.models.expense import ClassifiedQuery, Intent


# A capitalized word: one uppercase letter followed by lowercase letters.
NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+\b")

# Words that are capitalized because they open a question or a command,
# not because they are somebody's name.
NON_NAME_WORDS = frozenset({
    "What", "Whats", "How", "Who", "Whom", "Whose", "Why", "When", "Where",
    "Which", "Is", "Are", "Am", "Was", "Were", "Do", "Does", "Did", "Can",
    "Could", "Should", "Would", "Has", "Have", "Had", "Show", "List",
    "Tell", "Give", "Get", "Please", "The", "My", "Me", "Our", "Hey", "Hi",
    "Hello", "Thanks", "Any", "All", "Everyone", "Everybody", "Total",
    "Balance", "Balances", "Expense", "Expenses", "Settlement", "And", "Or",
})

Rule = Callable[[str, Optional[str]], bool]

# Intents whose answer depends on the extracted name.
PERSON_INTENTS = frozenset({
    Intent.GET_BALANCE_BY_PERSON,
    Intent.GET_PAID_BY_PERSON,
})


def extract_name(message: str) -> Optional[str]:
    """Return the first capitalized word that looks like a participant."""
    for match in NAME_PATTERN.finditer(message):
        word = match.group(0)
        if word not in NON_NAME_WORDS:
            return word
    return None


def _contains_any(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


INTENT_RULES: list[tuple[Rule, Intent]] = [
    (
        lambda text, name: "balance" in text and name is None,
        Intent.GET_BALANCES,
    ),
    (
        lambda text, name: _contains_any(text, "expense", "show", "list"),
        Intent.GET_EXPENSES,
    ),
    (
        lambda text, name: _contains_any(text, "owe", "balance", "debt") and name is not None,
        Intent.GET_BALANCE_BY_PERSON,
    ),
    (
        lambda text, name: (
            _contains_any(text, "paid", "pay")
            and name is not None
            and "owe" not in text
        ),
        Intent.GET_PAID_BY_PERSON,
    ),
]


def classify(message: str) -> ClassifiedQuery:
    """
    Classify a chat message.

    The extracted name is only attached to intents that use it.
    """
    name = extract_name(message)
    text = message.lower()

    for matches, intent in INTENT_RULES:
        if matches(text, name):
            return ClassifiedQuery(
                intent=intent,
                name=name if intent in PERSON_INTENTS else None,
            )

    return ClassifiedQuery(intent=Intent.UNKNOWN)
