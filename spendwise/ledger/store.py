"""
Ledger Store

The single owner of participants and expenses.

GUARANTEES (after every call, successful or not):
- Participant ids and expense ids are unique
- Every expense belongs to a participant that exists
- There are at least MIN_PARTICIPANTS participants
- A rejected call changes nothing

Expenses are kept most-recent-first. That order is what the recent
expenses view shows and what persistence must round-trip.

The store does no I/O and sends no notifications. Saving the snapshot
and telling the user are the session's job (see orchestrator).
"""

import math
from typing import Any, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from spendwise.ledger.errors import (
    InvariantViolationError,
    LedgerValidationError,
    ParticipantNotFoundError,
)
from spendwise.models.ledger import (
    MIN_PARTICIPANTS,
    Expense,
    LedgerSnapshot,
    Participant,
    ValidationIssue,
)
from spendwise.settlement import grand_total
from spendwise.validation import ExpenseValidator


def default_participant_name(existing_count: int) -> str:
    """Name given to a new participant when `existing_count` already exist."""
    return f"Person {existing_count + 1}"


def _as_uuid(value: Any) -> Optional[UUID]:
    """Accept a UUID or its string form; anything else is not an id."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value)
        except ValueError:
            return None
    return None


class LedgerStore:
    """
    Participants and expenses with referential integrity.

    Usage:
        store = LedgerStore()                       # Person 1, Person 2
        store = LedgerStore.from_snapshot(snapshot) # restored from storage
        expense = store.add_expense(person.id, "12.50", "Coffee")
    """

    def __init__(
        self,
        participants: Optional[list[Participant]] = None,
        expenses: Optional[list[Expense]] = None,
        validator: Optional[ExpenseValidator] = None,
    ):
        """
        Initialize the store.

        Args:
            participants: Participants in insertion order. When both
                          participants and expenses are None the store
                          starts with the default two participants.
            expenses: Expenses, most-recent-first.
            validator: Expense validator (a default one is created if None).

        Raises:
            InvariantViolationError: If the given data breaks a ledger invariant
        """
        self._validator = validator or ExpenseValidator()

        if participants is None and expenses is None:
            participants = [
                Participant(name=default_participant_name(i))
                for i in range(MIN_PARTICIPANTS)
            ]

        snapshot = self._build_snapshot(
            [p.model_copy() for p in participants or []],
            list(expenses or []),
        )
        self._participants: list[Participant] = snapshot.participants
        self._expenses: list[Expense] = snapshot.expenses

    @classmethod
    def from_snapshot(
        cls,
        snapshot: LedgerSnapshot,
        validator: Optional[ExpenseValidator] = None,
    ) -> 'LedgerStore':
        return cls(
            participants=snapshot.participants,
            expenses=snapshot.expenses,
            validator=validator,
        )

    @classmethod
    def with_default_participants(cls, count: int = MIN_PARTICIPANTS) -> 'LedgerStore':
        """Create an empty ledger with `count` auto-named participants."""
        if count < MIN_PARTICIPANTS:
            raise InvariantViolationError(
                f"A ledger needs at least {MIN_PARTICIPANTS} participants"
            )
        return cls(
            participants=[Participant(name=default_participant_name(i)) for i in range(count)],
            expenses=[],
        )

    @staticmethod
    def _build_snapshot(
        participants: list[Participant],
        expenses: list[Expense],
    ) -> LedgerSnapshot:
        try:
            return LedgerSnapshot(participants=participants, expenses=expenses)
        except PydanticValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise InvariantViolationError(f"Invalid ledger data: {messages}") from e

    def _index_of(self, participant_id: Any) -> int:
        wanted = _as_uuid(participant_id)
        for index, participant in enumerate(self._participants):
            if participant.id == wanted:
                return index
        raise ParticipantNotFoundError(participant_id)

    # =========================================================================
    # PARTICIPANTS
    # =========================================================================

    def add_participant(self) -> Participant:
        """
        Add a participant named "Person {n+1}".

        Names are not unique: after a removal the generated name can
        repeat one that is still in use.
        """
        participant = Participant(name=default_participant_name(len(self._participants)))
        self._participants.append(participant)
        return participant.model_copy()

    def rename_participant(self, participant_id: Any, new_name: str) -> None:
        """
        Change a participant's display name.

        Any string is accepted, including the empty string.

        Raises:
            ParticipantNotFoundError: If the participant does not exist
            LedgerValidationError: If new_name is not a string
        """
        index = self._index_of(participant_id)

        if not isinstance(new_name, str):
            raise LedgerValidationError(
                "Name must be text",
                [ValidationIssue(
                    field="name",
                    issue_type="not_text",
                    message=f"Name must be text, got {type(new_name).__name__}",
                )],
            )

        self._participants[index].name = new_name

    def remove_participant(self, participant_id: Any) -> int:
        """
        Remove a participant together with all of their expenses.

        Returns:
            Number of expenses removed with the participant

        Raises:
            ParticipantNotFoundError: If the participant does not exist
            InvariantViolationError: If fewer than MIN_PARTICIPANTS would remain
        """
        index = self._index_of(participant_id)

        if len(self._participants) - 1 < MIN_PARTICIPANTS:
            raise InvariantViolationError(
                f"At least {MIN_PARTICIPANTS} participants are required",
                participant_id=self._participants[index].id,
            )

        removed_id = self._participants[index].id
        participants = [p for p in self._participants if p.id != removed_id]
        expenses = [e for e in self._expenses if e.participant_id != removed_id]
        removed = len(self._expenses) - len(expenses)

        # Swap both collections together so no orphaned expense is ever visible
        self._participants, self._expenses = participants, expenses
        return removed

    def get_participant(self, participant_id: Any) -> Participant:
        """
        Raises:
            ParticipantNotFoundError: If the participant does not exist
        """
        return self._participants[self._index_of(participant_id)].model_copy()

    def list_participants(self) -> list[Participant]:
        """Participants in insertion order."""
        return [p.model_copy() for p in self._participants]

    @property
    def participant_count(self) -> int:
        return len(self._participants)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def add_expense(
        self,
        participant_id: Any,
        amount: Any,
        description: Any,
    ) -> Expense:
        """
        Record an expense paid by `participant_id`.

        Args:
            participant_id: Who paid (UUID or its string form)
            amount: Positive finite number, or a numeric string
            description: Non-blank text

        Returns:
            The new expense, now first in list_expenses()

        Raises:
            LedgerValidationError: If any input is invalid, or the ledger
                                   total would no longer be finite
        """
        wanted = _as_uuid(participant_id)
        known_ids = {p.id for p in self._participants}

        result = self._validator.validate(
            participant_id=wanted if wanted is not None else str(participant_id),
            amount=amount,
            description=description,
            known_participant_ids=known_ids,
        )
        if not result.is_valid:
            raise LedgerValidationError(
                self._validator.get_user_friendly_summary(result),
                result.issues,
            )

        if not math.isfinite(grand_total(self._expenses) + result.amount):
            raise LedgerValidationError(
                "Amount is too large for this ledger",
                [ValidationIssue(
                    field="amount",
                    issue_type="total_overflow",
                    message="Adding this amount would make the ledger total infinite",
                )],
            )

        expense = Expense(
            amount=result.amount,
            description=description,
            participant_id=wanted,
        )
        self._expenses.insert(0, expense)
        return expense

    def list_expenses(self) -> list[Expense]:
        """All expenses, most-recent-first."""
        return list(self._expenses)

    def recent_expenses(self, limit: int = 5) -> list[Expense]:
        """The `limit` most recent expenses."""
        return self._expenses[:max(limit, 0)]

    @property
    def expense_count(self) -> int:
        return len(self._expenses)

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def snapshot(self) -> LedgerSnapshot:
        """
        Detached copy of the current ledger.

        Changing the returned snapshot never changes the store.
        """
        return LedgerSnapshot(
            participants=[p.model_copy() for p in self._participants],
            expenses=list(self._expenses),
        )
