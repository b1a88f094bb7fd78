"""Ledger engine package."""

from splitter.ledger.engine import (
    BALANCE_EPSILON,
    SETTLEMENT_KEYWORD,
    InvalidSettlementError,
    LedgerError,
    compute_balances,
    find_balance,
    is_settlement,
    settlement_recipient,
    total_paid_by,
)

__all__ = [
    "BALANCE_EPSILON",
    "SETTLEMENT_KEYWORD",
    "InvalidSettlementError",
    "LedgerError",
    "compute_balances",
    "find_balance",
    "is_settlement",
    "settlement_recipient",
    "total_paid_by",
]
