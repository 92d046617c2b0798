"""Integration tests for the expense tracker session."""

import json
from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from spendwise.config import LedgerSettings, get_settings
from spendwise.events import EventLogger
from spendwise.models import NotificationVariant
from spendwise.orchestrator import ExpenseTrackerSession, create_app_components
from spendwise.services import (
    CollectingNotificationChannel,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    SnapshotRepository,
    StorageConnectionError,
)


class BrokenStorage(InMemoryKeyValueStorage):
    """Reads work, writes fail."""

    def set(self, key, value):
        raise StorageConnectionError("disk full")


class TestOpening:
    """Tests for starting a session."""

    def test_fresh_session_is_seeded(self, session, repository):
        assert [p.name for p in session.list_participants()] == ["Person 1", "Person 2"]
        assert session.list_expenses() == []
        # Nothing is written until the first change
        assert repository.load() is None

    def test_reopen_restores_saved_ledger(self, session, repository):
        a, b = session.list_participants()
        session.add_expense(a.id, 100, "dinner")
        session.rename_participant(b.id, "Bob")

        reopened = ExpenseTrackerSession.open(repository, notifier=CollectingNotificationChannel())

        assert [p.name for p in reopened.list_participants()] == ["Person 1", "Bob"]
        assert [e.description for e in reopened.list_expenses()] == ["dinner"]


class TestMutations:
    """Every attempt persists on success and notifies exactly once."""

    def test_add_expense_success(self, session, repository, notifier):
        a, _ = session.list_participants()

        expense, ok, message = session.add_expense(a.id, "42", "Pizza")

        assert ok is True
        assert expense.amount == 42.0
        assert message == "Expense added successfully"
        assert len(notifier.notifications) == 1
        assert notifier.latest.variant == NotificationVariant.SUCCESS
        assert notifier.latest.title == "Success"
        assert repository.load().expenses[0].id == expense.id

    @pytest.mark.parametrize("amount, description", [(0, "x"), (-5, "x"), (-1, "x"), (10, "")])
    def test_add_expense_rejected(self, session, repository, notifier, amount, description):
        a, _ = session.list_participants()

        expense, ok, message = session.add_expense(a.id, amount, description)

        assert expense is None
        assert ok is False
        assert message
        assert session.list_expenses() == []
        assert len(notifier.notifications) == 1
        assert notifier.latest.variant == NotificationVariant.ERROR
        assert notifier.latest.title == "Error"
        assert repository.load() is None

    def test_add_participant(self, session, repository, notifier):
        person = session.add_participant()
        assert person.name == "Person 3"
        assert notifier.latest.message == "Person 3 added"
        assert len(repository.load().participants) == 3

    def test_rename_unknown_participant(self, session, notifier):
        ok, message = session.rename_participant(uuid4(), "Ghost")
        assert ok is False
        assert "does not exist" in message
        assert notifier.latest.variant == NotificationVariant.ERROR

    def test_rename_to_empty(self, session, notifier):
        a, _ = session.list_participants()
        ok, _ = session.rename_participant(a.id, "")
        assert ok is True
        assert session.list_participants()[0].name == ""

    def test_remove_participant_floor(self, session, notifier):
        a, _ = session.list_participants()
        ok, message = session.remove_participant(a.id)
        assert ok is False
        assert "At least 2 participants" in message
        assert len(session.list_participants()) == 2

    def test_remove_participant_cascade_is_saved(self, session, repository):
        session.add_participant()
        a, b, c = session.list_participants()
        session.add_expense(c.id, 15, "Taxi")
        session.add_expense(a.id, 30, "Lunch")

        ok, message = session.remove_participant(c.id)

        assert ok is True
        assert message == "Person 3 removed"
        saved = repository.load()
        assert [p.id for p in saved.participants] == [a.id, b.id]
        assert [e.description for e in saved.expenses] == ["Lunch"]

    def test_storage_failure_is_reported_and_raised(self, notifier):
        session = ExpenseTrackerSession(
            repository=SnapshotRepository(BrokenStorage()),
            notifier=notifier,
        )
        a, _ = session.list_participants()

        with pytest.raises(StorageConnectionError):
            session.add_expense(a.id, 10, "Lunch")

        assert len(notifier.notifications) == 1
        assert notifier.latest.variant == NotificationVariant.ERROR
        assert "disk full" in notifier.latest.message

    def test_session_without_repository(self, notifier):
        session = ExpenseTrackerSession(notifier=notifier)
        a, _ = session.list_participants()
        _, ok, _ = session.add_expense(a.id, 10, "Lunch")
        assert ok is True


class TestReads:
    """Tests for settlement, dashboard and export."""

    def test_settlement_is_recomputed_after_each_change(self, session):
        a, b = session.list_participants()
        session.add_expense(a.id, 100, "dinner")
        assert session.settlement().for_participant(b.id).balance == -50.0
        session.add_expense(b.id, 100, "lunch")
        assert session.settlement().is_settled is True

    def test_dashboard(self, session):
        a, b = session.list_participants()
        for i in range(7):
            session.add_expense(a.id, 10, f"expense {i}")

        dashboard = session.dashboard()

        assert [e.description for e in dashboard.recent_expenses] == [
            "expense 6", "expense 5", "expense 4", "expense 3", "expense 2",
        ]
        assert dashboard.grand_total == 70.0
        assert dashboard.fair_share == 35.0
        assert dashboard.summary == "Person 2 owes Person 1 $35.00"
        assert len(dashboard.transfers) == 1
        assert [row.balance for row in dashboard.participants] == [35.0, -35.0]

    def test_dashboard_respects_settings(self, repository, notifier):
        settings = LedgerSettings(recent_expenses_limit=2, currency_symbol="£")
        session = ExpenseTrackerSession.open(repository, notifier=notifier, ledger_settings=settings)
        a, _ = session.list_participants()
        for i in range(3):
            session.add_expense(a.id, 1, f"e{i}")
        dashboard = session.dashboard()
        assert len(dashboard.recent_expenses) == 2
        assert dashboard.summary == "Person 2 owes Person 1 £1.50"

    def test_export(self, session, tmp_path):
        a, _ = session.list_participants()
        session.add_expense(a.id, 10, "Lunch")
        before = session.list_expenses()

        data = json.loads(session.export_expenses())
        path = session.export_expenses_to_file(tmp_path / "export.json")

        assert [item["description"] for item in data] == ["Lunch"]
        assert json.loads(path.read_text(encoding="utf-8")) == data
        assert session.list_expenses() == before


class TestLogging:
    """Tests for structured event logging."""

    def test_rejection_is_logged_as_warning(self, repository):
        with capture_logs() as logs:
            session = ExpenseTrackerSession(
                repository=repository,
                notifier=CollectingNotificationChannel(),
                event_logger=EventLogger(),
            )
            a, _ = session.list_participants()
            session.add_expense(a.id, -1, "Refund")

        rejected = [entry for entry in logs if entry.get("event_type") == "operation_rejected"]
        assert len(rejected) == 1
        assert rejected[0]["log_level"] == "warning"
        assert rejected[0]["error_code"] == "validation_error"

    def test_correlation_id_is_attached(self):
        correlation_id = uuid4()
        with capture_logs() as logs:
            EventLogger(correlation_id).log_participant_added(uuid4(), "Person 3", 3)
        assert logs[0]["event"] == "ledger_event"
        assert logs[0]["correlation_id"] == str(correlation_id)


class TestFactory:
    """Tests for create_app_components."""

    @pytest.fixture(autouse=True)
    def _fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("SPENDWISE_STORAGE_BACKEND", "memory")
        session, repository = create_app_components(notifier=CollectingNotificationChannel())
        assert isinstance(repository.storage, InMemoryKeyValueStorage)
        assert len(session.list_participants()) == 2

    def test_file_backend_persists_between_runs(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPENDWISE_STORAGE_BACKEND", "file")
        monkeypatch.setenv("SPENDWISE_STORAGE_DATA_DIR", str(tmp_path))

        session, repository = create_app_components(notifier=CollectingNotificationChannel())
        a, _ = session.list_participants()
        session.add_expense(a.id, 12.5, "Coffee")

        assert isinstance(repository.storage, JsonFileKeyValueStorage)
        assert (tmp_path / "people.json").exists()
        assert (tmp_path / "expenses.json").exists()

        again, _ = create_app_components(notifier=CollectingNotificationChannel())
        assert [e.description for e in again.list_expenses()] == ["Coffee"]
