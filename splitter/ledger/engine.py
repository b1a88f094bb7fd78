"""
Ledger Engine

DESIGN DECISION: Balances are DERIVED, never stored.
Every request hands the engine a fresh snapshot of ledger entries
and gets back a freshly computed balance map. Nothing here touches
storage, so the engine can be tested with plain lists.

GUARANTEES:
- Money is conserved: ordinary expenses sum to zero across participants
- Settlements move the full amount from payer to recipient
- Drift below one cent is snapped to exactly zero
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Optional

from splitter.models.expense import EntryType, ExpenseCreate, ExpenseRecord


SETTLEMENT_KEYWORD = "settlement"

# Balances closer to zero than this read as settled.
BALANCE_EPSILON = Decimal("0.01")

ZERO = Decimal("0")


class LedgerError(Exception):
    """Base exception for ledger computations."""
    pass


class InvalidSettlementError(LedgerError):
    """A settlement entry does not name exactly one recipient."""

    def __init__(self, record: ExpenseRecord):
        self.record = record
        super().__init__(
            f"Settlement {record.id} must name exactly one recipient, "
            f"got {len(record.split_with)}"
        )


def is_settlement(record: ExpenseCreate) -> bool:
    """
    Decide whether a ledger entry is a settlement.

    An explicit entry type wins. Untyped entries are settlements when
    their description mentions "settlement" in any letter case, which is
    how entries have always been told apart.
    """
    if record.entry_type is not None:
        return record.entry_type == EntryType.SETTLEMENT
    return SETTLEMENT_KEYWORD in record.description.lower()


def settlement_recipient(record: ExpenseRecord) -> str:
    """Return the single recipient of a settlement entry."""
    if len(record.split_with) != 1:
        raise InvalidSettlementError(record)
    return record.split_with[0]


def compute_balances(records: Iterable[ExpenseRecord]) -> dict[str, Decimal]:
    """
    Compute every participant's net balance.

    Positive means others owe the participant, negative means the
    participant owes, zero means settled up. Participants appear in
    the order they are first seen in ``records``.

    Raises:
        InvalidSettlementError: a settlement without exactly one recipient
    """
    balances: defaultdict[str, Decimal] = defaultdict(Decimal)

    for record in records:
        if is_settlement(record):
            recipient = settlement_recipient(record)
            # Paying back moves the payer toward zero and reduces the
            # recipient's credit by the same amount.
            balances[record.paid_by] += record.amount
            balances[recipient] -= record.amount
            continue

        share = record.amount / (1 + len(record.split_with))
        balances[record.paid_by] += record.amount - share
        for person in record.split_with:
            balances[person] -= share

    return {
        person: ZERO if abs(amount) < BALANCE_EPSILON else amount
        for person, amount in balances.items()
    }


def total_paid_by(
    records: Iterable[ExpenseRecord],
    participant: str,
    case_insensitive: bool = True,
) -> Decimal:
    """Sum the amounts of every entry paid by ``participant``."""
    if case_insensitive:
        target = participant.lower()
        matches = (r for r in records if r.paid_by.lower() == target)
    else:
        matches = (r for r in records if r.paid_by == participant)
    return sum((r.amount for r in matches), ZERO)


def find_balance(
    balances: Mapping[str, Decimal],
    participant: str,
) -> Optional[tuple[str, Decimal]]:
    """
    Look a participant up in a balance map.

    An exact match wins; otherwise the first name equal ignoring letter
    case is used. Returns the name as stored in the map together with
    the balance, or None when the participant has no balance.
    """
    if participant in balances:
        return participant, balances[participant]

    target = participant.lower()
    for name, amount in balances.items():
        if name.lower() == target:
            return name, amount
    return None
