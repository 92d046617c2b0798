"""
Storage Services Package

Provides the abstract key-value interface, concrete backends and the
snapshot repository that maps a ledger onto keys.
"""

from spendwise.services.storage.interface import (
    CorruptSnapshotError,
    KeyValueStorageInterface,
    StorageConnectionError,
    StorageError,
)
from spendwise.services.storage.local_file import JsonFileKeyValueStorage
from spendwise.services.storage.memory import InMemoryKeyValueStorage
from spendwise.services.storage.snapshot import (
    EXPENSES_KEY,
    PEOPLE_KEY,
    SnapshotRepository,
    dump_expenses_json,
)

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "StorageConnectionError",
    "StorageError",
    # Backends
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    # Snapshot persistence
    "EXPENSES_KEY",
    "PEOPLE_KEY",
    "SnapshotRepository",
    "dump_expenses_json",
]
