"""
Data Models Package

This package contains all Pydantic models used in SpendWise Buddy.
All ledger data flowing through the system must conform to these schemas.
"""

from spendwise.models.ledger import (
    MIN_PARTICIPANTS,
    Expense,
    ExpenseValidationResult,
    LedgerModel,
    LedgerSnapshot,
    Participant,
    ValidationIssue,
    utc_now,
)
from spendwise.models.settlement import (
    BalanceStatus,
    LedgerDashboard,
    ParticipantSettlement,
    Settlement,
    Transfer,
)
from spendwise.models.notification import Notification, NotificationVariant
from spendwise.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventSeverity,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "MIN_PARTICIPANTS",
    "Expense",
    "ExpenseValidationResult",
    "LedgerModel",
    "LedgerSnapshot",
    "Participant",
    "ValidationIssue",
    "utc_now",
    # Settlement models
    "BalanceStatus",
    "LedgerDashboard",
    "ParticipantSettlement",
    "Settlement",
    "Transfer",
    # Notification models
    "Notification",
    "NotificationVariant",
    # Event models
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventSeverity",
    "LedgerEventType",
]
