"""
Ledger Errors

Every rejected ledger operation raises one of these. None of them is
fatal: the ledger is left exactly as it was and the caller decides how
to tell the user.
"""

from typing import Optional
from uuid import UUID

from spendwise.models.ledger import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""

    # Short machine-readable kind, used in log events
    code = "ledger_error"
    # Title shown with the error notification
    title = "Error"


class LedgerValidationError(LedgerError):
    """Malformed input (bad amount, blank description, unknown payer)."""

    code = "validation_error"

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class ParticipantNotFoundError(LedgerError):
    """Operation referenced a participant that does not exist."""

    code = "not_found"

    def __init__(self, participant_id: object):
        super().__init__(f"Participant {participant_id} does not exist")
        self.participant_id = participant_id


class InvariantViolationError(LedgerError):
    """Operation would break a structural invariant of the ledger."""

    code = "invariant_violation"

    def __init__(self, message: str, participant_id: Optional[UUID] = None):
        super().__init__(message)
        self.participant_id = participant_id
