"""Ledger store package."""

from spendwise.ledger.errors import (
    InvariantViolationError,
    LedgerError,
    LedgerValidationError,
    ParticipantNotFoundError,
)
from spendwise.ledger.store import LedgerStore, default_participant_name

__all__ = [
    "InvariantViolationError",
    "LedgerError",
    "LedgerStore",
    "LedgerValidationError",
    "ParticipantNotFoundError",
    "default_participant_name",
]
