"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted through a tiny key-value
interface. This allows us to:
1. Keep the JSON files on disk for normal use
2. Use in-memory storage for testing
3. Swap in a browser-style local store or a database later
4. Keep the ledger decoupled from storage implementation

Values are JSON text. The snapshot repository decides what goes under
which key; backends only move strings around.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any storage implementation (files, browser local storage, Redis, etc.)
    must implement these methods. All methods are synchronous.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored text, or None if nothing is stored under the key

        Raises:
            StorageConnectionError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: The key to write
            value: JSON text

        Raises:
            StorageConnectionError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored data could not be turned back into a valid ledger."""
    pass


class StorageConnectionError(StorageError):
    """Could not read from or write to the storage backend."""
    pass
