"""
Ledger Event Models

Every ledger operation, accepted or rejected, produces one of these
so it can be written to the structured log.

DESIGN DECISION: Events are log records, not history. They are never
persisted or replayed; the ledger snapshot is the only state.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from spendwise.models.ledger import utc_now


class LedgerEventType(str, Enum):
    """Types of events we log."""
    # Participants
    PARTICIPANT_ADDED = "participant_added"
    PARTICIPANT_RENAMED = "participant_renamed"
    PARTICIPANT_REMOVED = "participant_removed"

    # Expenses
    EXPENSE_ADDED = "expense_added"

    # Rejections
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"

    # Export
    EXPENSES_EXPORTED = "expenses_exported"


class LedgerEventSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single logged ledger event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType
    severity: LedgerEventSeverity = LedgerEventSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'participant', 'expense', 'snapshot')"
    )
    entity_id: Optional[UUID] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one session's startup)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.expense_added(expense_id, participant_id, amount)
        event = LedgerEventBuilder.operation_rejected("add_expense", "validation_error", msg)
    """

    @staticmethod
    def participant_added(
        participant_id: UUID,
        name: str,
        participant_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PARTICIPANT_ADDED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant added: {name}",
            details={
                "name": name,
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def participant_renamed(
        participant_id: UUID,
        old_name: str,
        new_name: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PARTICIPANT_RENAMED,
            entity_type="participant",
            entity_id=participant_id,
            description="Participant renamed",
            details={
                "old_name": old_name,
                "new_name": new_name,
            },
        )

    @staticmethod
    def participant_removed(
        participant_id: UUID,
        removed_expenses: int,
        participant_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PARTICIPANT_REMOVED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant removed with {removed_expenses} expense(s)",
            details={
                "removed_expenses": removed_expenses,
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def expense_added(
        expense_id: UUID,
        participant_id: UUID,
        amount: float,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {amount:.2f}",
            details={
                "participant_id": str(participant_id),
                "amount": amount,
            },
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        error_code: str,
        error_message: str,
        entity_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.OPERATION_REJECTED,
            severity=LedgerEventSeverity.WARNING,
            entity_id=entity_id,
            description=f"Operation rejected: {operation}",
            details={
                "operation": operation,
            },
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def snapshot_loaded(
        participant_count: int,
        expense_count: int,
        seeded: bool,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=(
                "Started with default participants"
                if seeded
                else f"Snapshot loaded: {participant_count} participants, {expense_count} expenses"
            ),
            details={
                "participant_count": participant_count,
                "expense_count": expense_count,
                "seeded": seeded,
            },
        )

    @staticmethod
    def snapshot_saved(
        participant_count: int,
        expense_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_SAVED,
            severity=LedgerEventSeverity.DEBUG,
            entity_type="snapshot",
            description="Snapshot saved",
            details={
                "participant_count": participant_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def snapshot_save_failed(
        error_message: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_SAVE_FAILED,
            severity=LedgerEventSeverity.ERROR,
            entity_type="snapshot",
            description="Snapshot could not be saved",
            error_message=error_message,
        )

    @staticmethod
    def expenses_exported(
        expense_count: int,
        destination: Optional[str] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPENSES_EXPORTED,
            entity_type="export",
            description=f"Exported {expense_count} expense(s)",
            details={
                "expense_count": expense_count,
                "destination": destination,
            },
        )
