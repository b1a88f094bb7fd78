"""
Splitter - Source Package

A shared-expense ledger: record who paid for what, split the cost
among participants, and ask who owes whom.

DESIGN PRINCIPLES:
1. The ledger is append-only
2. Balances are derived, never stored
3. Money is conserved across every computation
4. Storage layer is swappable
5. Every write is auditable
"""

__version__ = "1.0.0"
__author__ = "Splitter Team"
