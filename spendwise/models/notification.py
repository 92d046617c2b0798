"""Notification model handed to the user-facing notification channel."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from spendwise.models.ledger import LedgerModel, utc_now


class NotificationVariant(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(LedgerModel):
    """
    A short title and message describing the outcome of one operation.

    Presentation (toast, banner, console line) is up to the channel.
    """

    title: str = Field(..., min_length=1, max_length=80)
    message: str = Field(..., max_length=1000)
    variant: NotificationVariant = NotificationVariant.SUCCESS
    created_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def success(cls, message: str) -> 'Notification':
        return cls(title="Success", message=message, variant=NotificationVariant.SUCCESS)

    @classmethod
    def error(cls, message: str, title: str = "Error") -> 'Notification':
        return cls(title=title, message=message, variant=NotificationVariant.ERROR)
