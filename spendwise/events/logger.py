"""
Ledger Event Logger

DESIGN DECISION: Every ledger operation is logged, accepted or not.
This provides:
1. Traceability of what happened to the ledger
2. Debugging capability when a balance looks wrong

The event logger:
- Writes structured JSON lines through structlog
- Never persists events (the ledger snapshot is the only state)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from spendwise.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventSeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given stdlib level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class EventLogger:
    """Central ledger event logging service."""

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize event logger.

        Args:
            correlation_id: Attached to every event that has none of its own,
                            typically one per session.
        """
        self._correlation_id = correlation_id
        self._logger = structlog.get_logger("spendwise.events")

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self._correlation_id

    def log(self, event: LedgerEvent) -> None:
        """Write an event at its severity."""
        if event.correlation_id is None and self._correlation_id is not None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        log_dict = event.to_log_dict()

        if event.severity == LedgerEventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == LedgerEventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == LedgerEventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

    def log_participant_added(
        self,
        participant_id: UUID,
        name: str,
        participant_count: int,
    ) -> None:
        self.log(LedgerEventBuilder.participant_added(
            participant_id=participant_id,
            name=name,
            participant_count=participant_count,
        ))

    def log_participant_renamed(
        self,
        participant_id: UUID,
        old_name: str,
        new_name: str,
    ) -> None:
        self.log(LedgerEventBuilder.participant_renamed(
            participant_id=participant_id,
            old_name=old_name,
            new_name=new_name,
        ))

    def log_participant_removed(
        self,
        participant_id: UUID,
        removed_expenses: int,
        participant_count: int,
    ) -> None:
        self.log(LedgerEventBuilder.participant_removed(
            participant_id=participant_id,
            removed_expenses=removed_expenses,
            participant_count=participant_count,
        ))

    def log_expense_added(
        self,
        expense_id: UUID,
        participant_id: UUID,
        amount: float,
    ) -> None:
        self.log(LedgerEventBuilder.expense_added(
            expense_id=expense_id,
            participant_id=participant_id,
            amount=amount,
        ))

    def log_operation_rejected(
        self,
        operation: str,
        error_code: str,
        error_message: str,
        entity_id: Optional[UUID] = None,
    ) -> None:
        """Log a ledger error that was recovered from."""
        self.log(LedgerEventBuilder.operation_rejected(
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            entity_id=entity_id,
        ))

    def log_snapshot_loaded(
        self,
        participant_count: int,
        expense_count: int,
        seeded: bool,
    ) -> None:
        self.log(LedgerEventBuilder.snapshot_loaded(
            participant_count=participant_count,
            expense_count=expense_count,
            seeded=seeded,
        ))

    def log_snapshot_saved(self, participant_count: int, expense_count: int) -> None:
        self.log(LedgerEventBuilder.snapshot_saved(
            participant_count=participant_count,
            expense_count=expense_count,
        ))

    def log_snapshot_save_failed(self, error_message: str) -> None:
        self.log(LedgerEventBuilder.snapshot_save_failed(error_message=error_message))

    def log_expenses_exported(
        self,
        expense_count: int,
        destination: Optional[str] = None,
    ) -> None:
        self.log(LedgerEventBuilder.expenses_exported(
            expense_count=expense_count,
            destination=destination,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per session so every line it logs can be grouped.
    """
    return uuid4()
