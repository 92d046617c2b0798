"""Tests for the ledger store."""

from uuid import uuid4

import pytest

from spendwise.ledger import (
    InvariantViolationError,
    LedgerStore,
    LedgerValidationError,
    ParticipantNotFoundError,
)
from spendwise.models import Expense, Participant
from spendwise.settlement import calculate_settlement


def _ids(store):
    return [p.id for p in store.list_participants()]


def _assert_referential_integrity(store):
    known = set(_ids(store))
    assert all(e.participant_id in known for e in store.list_expenses())


class TestConstruction:
    """Tests for creating a store."""

    def test_default_seed(self, store):
        """Test a fresh store has Person 1 and Person 2 and no expenses."""
        assert [p.name for p in store.list_participants()] == ["Person 1", "Person 2"]
        assert store.list_expenses() == []

    def test_with_default_participants(self):
        store = LedgerStore.with_default_participants(4)
        assert [p.name for p in store.list_participants()] == [
            "Person 1", "Person 2", "Person 3", "Person 4",
        ]

    def test_with_default_participants_below_floor(self):
        with pytest.raises(InvariantViolationError):
            LedgerStore.with_default_participants(1)

    def test_rejects_single_participant(self):
        with pytest.raises(InvariantViolationError, match="at least 2 participants"):
            LedgerStore(participants=[Participant(name="Solo")], expenses=[])

    def test_rejects_orphan_expense(self):
        a, b = Participant(name="A"), Participant(name="B")
        orphan = Expense(amount=1, description="x", participant_id=uuid4())
        with pytest.raises(InvariantViolationError):
            LedgerStore(participants=[a, b], expenses=[orphan])

    def test_does_not_share_participants_with_caller(self):
        """Test later changes to the caller's objects do not leak in."""
        a, b = Participant(name="A"), Participant(name="B")
        store = LedgerStore(participants=[a, b], expenses=[])
        a.name = "Changed"
        assert store.get_participant(a.id).name == "A"


class TestParticipants:
    """Tests for adding, renaming and removing participants."""

    def test_add_participant_uses_next_number(self, store):
        person = store.add_participant()
        assert person.name == "Person 3"
        assert _ids(store)[-1] == person.id

    def test_names_can_repeat_after_removal(self, three_person_store):
        """Test "Person {n+1}" reuses a name that is still in use."""
        store = three_person_store
        first = store.list_participants()[0]
        store.remove_participant(first.id)
        added = store.add_participant()
        assert added.name == "Person 3"
        assert [p.name for p in store.list_participants()].count("Person 3") == 2

    def test_rename(self, store):
        person = store.list_participants()[0]
        store.rename_participant(person.id, "Alice")
        assert store.get_participant(person.id).name == "Alice"

    def test_rename_accepts_string_id(self, store):
        person = store.list_participants()[0]
        store.rename_participant(str(person.id), "Alice")
        assert store.get_participant(person.id).name == "Alice"

    def test_rename_to_empty_string_is_allowed(self, store):
        person = store.list_participants()[1]
        store.rename_participant(person.id, "")
        assert store.get_participant(person.id).name == ""

    def test_rename_unknown_participant(self, store):
        with pytest.raises(ParticipantNotFoundError):
            store.rename_participant(uuid4(), "Ghost")

    def test_rename_rejects_non_string(self, store):
        person = store.list_participants()[0]
        with pytest.raises(LedgerValidationError):
            store.rename_participant(person.id, None)
        assert store.get_participant(person.id).name == "Person 1"

    def test_remove_below_floor_is_rejected(self, store):
        """Test removing one of two participants fails and changes nothing."""
        before = store.list_participants()
        with pytest.raises(InvariantViolationError):
            store.remove_participant(before[0].id)
        assert store.list_participants() == before

    def test_remove_unknown_participant(self, three_person_store):
        with pytest.raises(ParticipantNotFoundError):
            three_person_store.remove_participant(uuid4())
        assert three_person_store.participant_count == 3

    def test_remove_cascades_to_expenses(self, three_person_store):
        """Test all of a removed participant's expenses disappear with them."""
        store = three_person_store
        a, b, c = store.list_participants()
        store.add_expense(c.id, 10, "Taxi")
        store.add_expense(a.id, 20, "Dinner")
        store.add_expense(c.id, 5, "Snacks")

        removed = store.remove_participant(c.id)

        assert removed == 2
        assert [e.description for e in store.list_expenses()] == ["Dinner"]
        assert all(e.participant_id != c.id for e in store.list_expenses())
        _assert_referential_integrity(store)

    def test_remove_down_to_two_then_floor(self, three_person_store):
        """Test removing to exactly 2 succeeds and going to 1 fails."""
        store = three_person_store
        a, b, c = store.list_participants()
        store.remove_participant(c.id)
        assert store.participant_count == 2
        with pytest.raises(InvariantViolationError):
            store.remove_participant(b.id)
        assert _ids(store) == [a.id, b.id]

    def test_list_participants_returns_copies(self, store):
        person = store.list_participants()[0]
        person.name = "Not saved"
        assert store.list_participants()[0].name == "Person 1"


class TestExpenses:
    """Tests for recording and listing expenses."""

    def test_add_expense(self, store):
        person = store.list_participants()[0]
        expense = store.add_expense(person.id, 100, "dinner")
        assert expense.amount == 100.0
        assert expense.description == "dinner"
        assert expense.participant_id == person.id
        assert store.list_expenses() == [expense]

    def test_add_expense_parses_numeric_string(self, store):
        person = store.list_participants()[0]
        expense = store.add_expense(str(person.id), "12.50", "Coffee")
        assert expense.amount == 12.5
        assert expense.participant_id == person.id

    def test_most_recent_first(self, store):
        person = store.list_participants()[0]
        for description in ["first", "second", "third"]:
            store.add_expense(person.id, 1, description)
        assert [e.description for e in store.list_expenses()] == ["third", "second", "first"]

    def test_expense_ids_are_unique(self, store):
        person = store.list_participants()[0]
        expenses = [store.add_expense(person.id, 1, "x") for _ in range(20)]
        assert len({e.id for e in expenses}) == 20

    @pytest.mark.parametrize("amount, description", [
        (0, "dinner"),
        (-5, "dinner"),
        (-1, "dinner"),
        ("abc", "dinner"),
        (float("nan"), "dinner"),
        (10, ""),
        (10, "   "),
    ])
    def test_invalid_expense_is_rejected(self, store, amount, description):
        """Test rejected input leaves the ledger unchanged."""
        person = store.list_participants()[0]
        store.add_expense(person.id, 5, "existing")
        before = store.list_expenses()

        with pytest.raises(LedgerValidationError) as excinfo:
            store.add_expense(person.id, amount, description)

        assert excinfo.value.issues
        assert store.list_expenses() == before

    def test_unknown_participant_is_a_validation_error(self, store):
        with pytest.raises(LedgerValidationError) as excinfo:
            store.add_expense(uuid4(), 10, "Lunch")
        assert excinfo.value.issues[0].issue_type == "unknown_reference"
        assert store.expense_count == 0

    def test_amount_that_overflows_the_total_is_rejected(self, store):
        """Test each amount is finite and so is the running total."""
        a, b = store.list_participants()
        store.add_expense(a.id, 1e308, "yacht")

        with pytest.raises(LedgerValidationError) as excinfo:
            store.add_expense(b.id, 1e308, "another yacht")

        assert excinfo.value.issues[0].issue_type == "total_overflow"
        assert store.expense_count == 1
        settlement = calculate_settlement(store.snapshot())
        assert settlement.for_participant(b.id).balance == -5e307

    def test_garbage_participant_id(self, store):
        with pytest.raises(LedgerValidationError):
            store.add_expense("not-an-id", 10, "Lunch")
        with pytest.raises(LedgerValidationError):
            store.add_expense(["unhashable"], 10, "Lunch")

    def test_recent_expenses(self, store):
        person = store.list_participants()[0]
        for i in range(7):
            store.add_expense(person.id, i + 1, f"expense {i}")
        recent = store.recent_expenses(5)
        assert [e.description for e in recent] == [f"expense {i}" for i in (6, 5, 4, 3, 2)]
        assert store.recent_expenses(0) == []


class TestSnapshots:
    """Tests for snapshot copies."""

    def test_snapshot_is_detached(self, store):
        person = store.list_participants()[0]
        store.add_expense(person.id, 10, "Lunch")

        snapshot = store.snapshot()
        snapshot.participants[0].name = "Changed"
        snapshot.expenses.clear()

        assert store.get_participant(person.id).name == "Person 1"
        assert store.expense_count == 1

    def test_from_snapshot_round_trip(self, three_person_store):
        store = three_person_store
        a, b, c = store.list_participants()
        store.add_expense(a.id, 90, "Groceries")
        store.add_expense(b.id, 30, "Fuel")

        restored = LedgerStore.from_snapshot(store.snapshot())

        assert restored.list_participants() == store.list_participants()
        assert restored.list_expenses() == store.list_expenses()

    def test_integrity_holds_across_operations(self, three_person_store):
        """Test referential integrity after a mixed sequence of operations."""
        store = three_person_store
        a, b, c = store.list_participants()
        d = store.add_participant()
        for person, amount in [(a, 10), (b, 20), (c, 30), (d, 40), (c, 50)]:
            store.add_expense(person.id, amount, "thing")
            _assert_referential_integrity(store)
        store.remove_participant(c.id)
        _assert_referential_integrity(store)
        store.remove_participant(a.id)
        _assert_referential_integrity(store)
        with pytest.raises(InvariantViolationError):
            store.remove_participant(b.id)
        _assert_referential_integrity(store)
        assert sorted(e.amount for e in store.list_expenses()) == [20.0, 40.0]
