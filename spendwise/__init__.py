"""
SpendWise Buddy - Source Package

A shared-expense tracker for a small group of participants.
Everyone logs what they paid; the system works out who owes whom
so that total spending is split evenly.

DESIGN PRINCIPLES:
1. The ledger is the only source of truth
2. Settlement is always re-derived, never stored
3. Rejected operations change nothing
4. Every outcome is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SpendWise Buddy Team"
