"""Services package."""

from spendwise.services.export import (
    default_export_filename,
    export_expenses_json,
    write_export,
)
from spendwise.services.notifications import (
    CollectingNotificationChannel,
    LoggingNotificationChannel,
    NotificationChannel,
)
from spendwise.services.storage import (
    CorruptSnapshotError,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    SnapshotRepository,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Export
    "default_export_filename",
    "export_expenses_json",
    "write_export",
    # Notifications
    "CollectingNotificationChannel",
    "LoggingNotificationChannel",
    "NotificationChannel",
    # Storage
    "CorruptSnapshotError",
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KeyValueStorageInterface",
    "SnapshotRepository",
    "StorageConnectionError",
    "StorageError",
]
