"""Shared fixtures for the SpendWise Buddy tests."""

import pytest

from spendwise.config import LedgerSettings
from spendwise.ledger import LedgerStore
from spendwise.orchestrator import ExpenseTrackerSession
from spendwise.services import (
    CollectingNotificationChannel,
    InMemoryKeyValueStorage,
    SnapshotRepository,
)


@pytest.fixture
def store():
    """A fresh ledger with the default two participants."""
    return LedgerStore()


@pytest.fixture
def three_person_store():
    """A ledger with Person 1, Person 2 and Person 3 and no expenses."""
    return LedgerStore.with_default_participants(3)


@pytest.fixture
def repository():
    return SnapshotRepository(InMemoryKeyValueStorage())


@pytest.fixture
def notifier():
    return CollectingNotificationChannel()


@pytest.fixture
def session(repository, notifier):
    """A session backed by in-memory storage with captured notifications."""
    return ExpenseTrackerSession.open(
        repository,
        notifier=notifier,
        ledger_settings=LedgerSettings(),
    )
