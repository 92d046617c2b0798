"""
Core Data Models for SpendWise Buddy

These models define the strict schemas for all ledger data.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and export

DESIGN DECISION: Every model serializes with camelCase aliases
(participantId, createdAt). Persisted snapshots and exports keep the
field names the original app wrote, and Python code still uses
snake_case attribute names.
"""

import math
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# A ledger with fewer participants has nobody to split with.
MIN_PARTICIPANTS = 2


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """Base for every serialized ledger model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Participant(LedgerModel):
    """
    Someone who pays for things and shares the total.

    The name is a display label only. It may repeat across participants
    and may be renamed to anything, including the empty string.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique participant ID, never reused"
    )
    name: str = Field(
        ...,
        description="Display name"
    )


class Expense(LedgerModel):
    """
    A single payment made by one participant.

    Expenses are immutable once recorded. They disappear only when the
    participant who paid is removed.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount paid, currency-agnostic"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    participant_id: UUID = Field(
        ...,
        description="Participant who paid"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded (ordering and display only)"
    )

    @field_validator('description')
    @classmethod
    def reject_blank_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description cannot be blank")
        return v


class LedgerSnapshot(LedgerModel):
    """
    Point-in-time copy of the whole ledger.

    Participants are in insertion order, expenses most-recent-first.
    This is what the settlement calculator reads and what gets persisted.
    """

    participants: list[Participant] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_integrity(self) -> 'LedgerSnapshot':
        """Validate ids, references, the participant floor and the total."""
        participant_ids = [p.id for p in self.participants]
        if len(set(participant_ids)) != len(participant_ids):
            raise ValueError("Participant ids must be unique")

        expense_ids = [e.id for e in self.expenses]
        if len(set(expense_ids)) != len(expense_ids):
            raise ValueError("Expense ids must be unique")

        known = set(participant_ids)
        orphans = [e.id for e in self.expenses if e.participant_id not in known]
        if orphans:
            raise ValueError(
                f"{len(orphans)} expense(s) reference unknown participants"
            )

        if len(self.participants) < MIN_PARTICIPANTS:
            raise ValueError(
                f"A ledger needs at least {MIN_PARTICIPANTS} participants"
            )

        if not math.isfinite(sum(e.amount for e in self.expenses)):
            raise ValueError("Expense total is too large to settle")

        return self

    def participant_ids(self) -> list[UUID]:
        return [p.id for p in self.participants]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(LedgerModel):
    """A single problem found in expense input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'unknown_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ExpenseValidationResult(LedgerModel):
    """
    Result of the two-stage expense validation.

    Stage 1: Input validation (amount and description)
    Stage 2: Reference validation (participant exists)
    """

    input_valid: bool = Field(
        ...,
        description="Did amount and description pass?"
    )
    reference_valid: bool = Field(
        ...,
        description="Does the participant exist?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    amount: Optional[float] = Field(
        default=None,
        description="Parsed amount when input validation passed"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
