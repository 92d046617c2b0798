"""
Ledger Snapshot Repository

Saves and restores a LedgerSnapshot through any KeyValueStorageInterface.

Layout (both values are JSON arrays with camelCase fields):
    "people"   -> [{"id", "name"}, ...]                 insertion order
    "expenses" -> [{"id", "amount", "description",
                    "participantId", "createdAt"}, ...]  most-recent-first

The expense order is stored as-is; loading never re-sorts by createdAt.
"""

from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from spendwise.models.ledger import Expense, LedgerSnapshot, Participant
from spendwise.services.storage.interface import (
    CorruptSnapshotError,
    KeyValueStorageInterface,
)


PEOPLE_KEY = "people"
EXPENSES_KEY = "expenses"

_PARTICIPANTS_ADAPTER = TypeAdapter(list[Participant])
_EXPENSES_ADAPTER = TypeAdapter(list[Expense])


def dump_expenses_json(expenses: list[Expense], indent: Optional[int] = None) -> str:
    """Serialize expenses with the persisted field names."""
    return _EXPENSES_ADAPTER.dump_json(expenses, by_alias=True, indent=indent).decode("utf-8")


class SnapshotRepository:
    """
    Persistence collaborator for the ledger.

    Usage:
        repo = SnapshotRepository(JsonFileKeyValueStorage(".spendwise"))
        snapshot = repo.load()   # None on first run
        repo.save(store.snapshot())
    """

    def __init__(self, storage: KeyValueStorageInterface):
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> KeyValueStorageInterface:
        return self._storage

    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Write the whole snapshot.

        Expenses are written before people. If the process dies between
        the two writes, the stored people still cover every stored expense:
        a removal only ever shrinks the expense list first, and new
        expenses only reference participants that were already saved.

        Raises:
            StorageError: If the backend fails
        """
        expenses_json = dump_expenses_json(snapshot.expenses)
        people_json = _PARTICIPANTS_ADAPTER.dump_json(
            snapshot.participants, by_alias=True
        ).decode("utf-8")

        self._storage.set(EXPENSES_KEY, expenses_json)
        self._storage.set(PEOPLE_KEY, people_json)

    def load(self) -> Optional[LedgerSnapshot]:
        """
        Read the saved snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet

        Raises:
            CorruptSnapshotError: If stored data is unreadable or breaks
                                  a ledger invariant
            StorageError: If the backend fails
        """
        people_raw = self._storage.get(PEOPLE_KEY)
        expenses_raw = self._storage.get(EXPENSES_KEY)

        if people_raw is None:
            if expenses_raw is not None:
                raise CorruptSnapshotError(
                    f"Found saved {EXPENSES_KEY!r} without {PEOPLE_KEY!r}"
                )
            return None

        try:
            participants = _PARTICIPANTS_ADAPTER.validate_json(people_raw)
            expenses = (
                _EXPENSES_ADAPTER.validate_json(expenses_raw)
                if expenses_raw is not None
                else []
            )
            snapshot = LedgerSnapshot(participants=participants, expenses=expenses)
        except ValidationError as e:
            self._logger.error(
                "snapshot_corrupt",
                error_count=e.error_count(),
                first_error=e.errors()[0]["msg"] if e.error_count() else None,
            )
            raise CorruptSnapshotError(f"Saved ledger is invalid: {e}") from e

        return snapshot

    def clear(self) -> None:
        """Forget the saved snapshot."""
        self._storage.delete(PEOPLE_KEY)
        self._storage.delete(EXPENSES_KEY)
