"""Chat query package."""

from splitter.queries.responder import HELP_MESSAGE, ChatResponder
from splitter.queries.router import INTENT_RULES, classify, extract_name

__all__ = [
    "ChatResponder",
    "HELP_MESSAGE",
    "INTENT_RULES",
    "classify",
    "extract_name",
]
