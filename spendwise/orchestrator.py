"""
Main Orchestrator for SpendWise Buddy

This module ties together all the components and defines the
end-to-end flow of every user action:

    mutate ledger → log → persist snapshot → notify
    (or, on a ledger error: log → notify, nothing else)

DESIGN DECISION: The session enforces the boundaries:
- Only the LedgerStore changes ledger data
- A snapshot is saved after every successful mutation, never after a rejected one
- Settlement is recomputed on every read, never cached
- Every attempt produces exactly one notification
"""

from pathlib import Path
from typing import Any, Optional, Union
from uuid import UUID

from spendwise.config import LedgerSettings, Settings, get_settings
from spendwise.events import EventLogger, configure_logging, create_correlation_id
from spendwise.ledger import LedgerError, LedgerStore
from spendwise.models.ledger import Expense, Participant
from spendwise.models.notification import Notification
from spendwise.models.settlement import LedgerDashboard, Settlement
from spendwise.services.export import export_expenses_json, write_export
from spendwise.services.notifications import (
    LoggingNotificationChannel,
    NotificationChannel,
)
from spendwise.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    SnapshotRepository,
    StorageError,
)
from spendwise.settlement import (
    calculate_settlement,
    suggest_transfers,
    summarize_settlement,
)


class ExpenseTrackerSession:
    """
    One shared ledger and the collaborators around it.

    Mutators never raise ledger errors: they are logged, reported through
    the notification channel and returned as a failed outcome. Storage
    errors are reported too and then re-raised, because the in-memory
    ledger is already ahead of what is saved.
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        repository: Optional[SnapshotRepository] = None,
        notifier: Optional[NotificationChannel] = None,
        event_logger: Optional[EventLogger] = None,
        ledger_settings: Optional[LedgerSettings] = None,
    ):
        self._store = store or LedgerStore()
        self._repository = repository
        self._notifier = notifier or LoggingNotificationChannel()
        self._events = event_logger or EventLogger()
        self._ledger_settings = ledger_settings or LedgerSettings()

    @classmethod
    def open(
        cls,
        repository: SnapshotRepository,
        notifier: Optional[NotificationChannel] = None,
        event_logger: Optional[EventLogger] = None,
        ledger_settings: Optional[LedgerSettings] = None,
    ) -> 'ExpenseTrackerSession':
        """
        Start a session from whatever the repository has saved.

        With nothing saved, the ledger starts with the default two
        participants and no expenses.

        Raises:
            CorruptSnapshotError: If the saved data is unusable
            StorageError: If the backend cannot be read
        """
        event_logger = event_logger or EventLogger(create_correlation_id())

        snapshot = repository.load()
        if snapshot is None:
            store = LedgerStore()
        else:
            store = LedgerStore.from_snapshot(snapshot)

        event_logger.log_snapshot_loaded(
            participant_count=store.participant_count,
            expense_count=store.expense_count,
            seeded=snapshot is None,
        )

        return cls(
            store=store,
            repository=repository,
            notifier=notifier,
            event_logger=event_logger,
            ledger_settings=ledger_settings,
        )

    @property
    def store(self) -> LedgerStore:
        return self._store

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _persist(self) -> None:
        if self._repository is None:
            return

        snapshot = self._store.snapshot()
        try:
            self._repository.save(snapshot)
        except StorageError as e:
            self._events.log_snapshot_save_failed(str(e))
            self._notifier.notify(Notification.error(f"Could not save changes: {e}"))
            raise

        self._events.log_snapshot_saved(
            participant_count=len(snapshot.participants),
            expense_count=len(snapshot.expenses),
        )

    def _reject(
        self,
        operation: str,
        error: LedgerError,
        entity_id: Optional[UUID] = None,
    ) -> str:
        message = str(error)
        self._events.log_operation_rejected(
            operation=operation,
            error_code=error.code,
            error_message=message,
            entity_id=entity_id,
        )
        self._notifier.notify(Notification.error(message, title=error.title))
        return message

    def _succeed(self, message: str) -> str:
        self._persist()
        self._notifier.notify(Notification.success(message))
        return message

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_participant(self) -> Participant:
        """Add an auto-named participant. Cannot be rejected."""
        participant = self._store.add_participant()
        self._events.log_participant_added(
            participant_id=participant.id,
            name=participant.name,
            participant_count=self._store.participant_count,
        )
        self._succeed(f"{participant.name} added")
        return participant

    def rename_participant(self, participant_id: Any, new_name: str) -> tuple[bool, str]:
        """
        Rename a participant.

        Returns:
            (succeeded, message)
        """
        try:
            old_name = self._store.get_participant(participant_id).name
            self._store.rename_participant(participant_id, new_name)
        except LedgerError as e:
            return False, self._reject("rename_participant", e)

        renamed = self._store.get_participant(participant_id)
        self._events.log_participant_renamed(
            participant_id=renamed.id,
            old_name=old_name,
            new_name=new_name,
        )
        return True, self._succeed("Participant renamed")

    def remove_participant(self, participant_id: Any) -> tuple[bool, str]:
        """
        Remove a participant and every expense they paid.

        Returns:
            (succeeded, message)
        """
        try:
            participant = self._store.get_participant(participant_id)
            removed_expenses = self._store.remove_participant(participant_id)
        except LedgerError as e:
            return False, self._reject("remove_participant", e)

        self._events.log_participant_removed(
            participant_id=participant.id,
            removed_expenses=removed_expenses,
            participant_count=self._store.participant_count,
        )
        return True, self._succeed(f"{participant.name or 'Participant'} removed")

    def add_expense(
        self,
        participant_id: Any,
        amount: Any,
        description: Any,
    ) -> tuple[Optional[Expense], bool, str]:
        """
        Record an expense.

        Returns:
            (expense, succeeded, message). expense is None when rejected.
        """
        try:
            expense = self._store.add_expense(participant_id, amount, description)
        except LedgerError as e:
            return None, False, self._reject("add_expense", e)

        self._events.log_expense_added(
            expense_id=expense.id,
            participant_id=expense.participant_id,
            amount=expense.amount,
        )
        return expense, True, self._succeed("Expense added successfully")

    # =========================================================================
    # READS
    # =========================================================================

    def list_participants(self) -> list[Participant]:
        return self._store.list_participants()

    def list_expenses(self) -> list[Expense]:
        return self._store.list_expenses()

    def settlement(self) -> Settlement:
        """Recompute balances from the current ledger."""
        return calculate_settlement(
            self._store.snapshot(),
            tolerance=self._ledger_settings.settled_tolerance,
        )

    def dashboard(self) -> LedgerDashboard:
        """Everything the display needs, derived from the current ledger."""
        settlement = self.settlement()
        return LedgerDashboard(
            participants=settlement.participants,
            recent_expenses=self._store.recent_expenses(
                self._ledger_settings.recent_expenses_limit
            ),
            grand_total=settlement.grand_total,
            fair_share=settlement.fair_share,
            summary=summarize_settlement(
                settlement,
                currency_symbol=self._ledger_settings.currency_symbol,
            ),
            transfers=suggest_transfers(settlement),
        )

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_expenses(self) -> str:
        """All expenses as pretty-printed JSON. Does not change the ledger."""
        expenses = self._store.list_expenses()
        text = export_expenses_json(expenses)
        self._events.log_expenses_exported(expense_count=len(expenses))
        return text

    def export_expenses_to_file(self, destination: Union[str, Path]) -> Path:
        """
        Write the export to a file and return its path.

        Raises:
            StorageConnectionError: If the file cannot be written
        """
        expenses = self._store.list_expenses()
        path = write_export(expenses, destination)
        self._events.log_expenses_exported(
            expense_count=len(expenses),
            destination=str(path),
        )
        return path


def create_repository(settings: Optional[Settings] = None) -> SnapshotRepository:
    """Build the snapshot repository for the configured storage backend."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return SnapshotRepository(InMemoryKeyValueStorage())
    return SnapshotRepository(JsonFileKeyValueStorage(storage_settings.data_dir))


def create_app_components(
    settings: Optional[Settings] = None,
    notifier: Optional[NotificationChannel] = None,
) -> tuple[ExpenseTrackerSession, SnapshotRepository]:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings (loaded from the environment if None)
        notifier: Notification channel (logs notifications if None)

    Returns:
        (session, repository)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    repository = create_repository(settings)
    session = ExpenseTrackerSession.open(
        repository,
        notifier=notifier,
        ledger_settings=settings.ledger,
    )
    return session, repository
