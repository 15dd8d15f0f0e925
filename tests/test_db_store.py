"""Tests for the SQLite document store.

**Feature: mood-diary**
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from moodiary.db.store import DataStore
from moodiary.errors import NotFoundError, TransactionConflictError


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


def _put(store: DataStore, collection: str, doc_id: str, data: dict) -> None:
    """Write a document in its own transaction."""
    tx = store.transaction()
    tx.set(collection, doc_id, data)
    tx.commit()


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, all required tables should exist.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        tables = temp_db.get_tables()

        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_reopening_keeps_documents(self, temp_db: DataStore):
        _put(temp_db, "users", "u1", {"streak": 2})

        reopened = DataStore(temp_db.db_path)

        assert reopened.get("users", "u1").data == {"streak": 2}

    def test_creates_parent_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "dir" / "test.db"
            DataStore(db_path)
            assert db_path.exists()


class TestDocumentReadWrite:
    """
    *For any* JSON document written in a transaction, reading it back
    returns the same body at version 1.
    """

    @given(
        doc_id=st.text(alphabet="abcdef0123456789", min_size=1, max_size=20),
        data=st.dictionaries(
            st.text(alphabet="abcdefghij_", min_size=1, max_size=10),
            st.one_of(st.integers(min_value=-(2**53), max_value=2**53), st.text(max_size=30), st.booleans(), st.none()),
            max_size=8,
        ),
    )
    @settings(max_examples=30, deadline=None)
    def test_set_then_get(self, doc_id: str, data: dict):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")

            _put(store, "things", doc_id, data)
            doc = store.get("things", doc_id)

            assert doc is not None
            assert doc.data == data
            assert doc.version == 1

    def test_missing_document(self, temp_db: DataStore):
        assert temp_db.get("users", "nobody") is None

    def test_datetimes_stored_as_iso_strings(self, temp_db: DataStore):
        _put(temp_db, "entries", "e1", {"date": datetime(2025, 7, 10, 8, 30)})

        assert temp_db.get("entries", "e1").data == {"date": "2025-07-10T08:30:00"}

    def test_update_merges_and_bumps_version(self, temp_db: DataStore):
        _put(temp_db, "users", "u1", {"name": "Sam", "streak": 1})

        tx = temp_db.transaction()
        tx.update("users", "u1", {"streak": 2})
        tx.commit()

        doc = temp_db.get("users", "u1")
        assert doc.data == {"name": "Sam", "streak": 2}
        assert doc.version == 2

    def test_update_missing_document_fails(self, temp_db: DataStore):
        tx = temp_db.transaction()
        tx.update("users", "ghost", {"streak": 1})

        with pytest.raises(NotFoundError):
            tx.commit()

        assert temp_db.get("users", "ghost") is None

    def test_failed_commit_writes_nothing(self, temp_db: DataStore):
        tx = temp_db.transaction()
        tx.set("entries", "e1", {"title": "first"})
        tx.update("users", "ghost", {"streak": 1})

        with pytest.raises(NotFoundError):
            tx.commit()

        assert temp_db.get("entries", "e1") is None

    def test_commit_twice_is_rejected(self, temp_db: DataStore):
        tx = temp_db.transaction()
        tx.set("users", "u1", {})
        tx.commit()

        with pytest.raises(RuntimeError):
            tx.commit()

    def test_new_ids_are_unique(self, temp_db: DataStore):
        ids = {temp_db.new_id("entries") for _ in range(100)}
        assert len(ids) == 100


class TestQuery:
    def _seed(self, store: DataStore) -> None:
        base = datetime(2025, 7, 1)
        for i, owner in enumerate(["a", "b", "a", "a", "b"]):
            _put(store, "entries", f"e{i}", {"user_id": owner, "date": base + timedelta(days=i * 10)})

    def test_equality_filter(self, temp_db: DataStore):
        self._seed(temp_db)

        docs = temp_db.query("entries", filters=[("user_id", "==", "a")])

        assert sorted(doc.id for doc in docs) == ["e0", "e2", "e3"]

    def test_range_filter_and_order(self, temp_db: DataStore):
        self._seed(temp_db)

        docs = temp_db.query(
            "entries",
            filters=[
                ("user_id", "==", "a"),
                ("date", ">=", datetime(2025, 7, 15)),
                ("date", "<", datetime(2025, 8, 1)),
            ],
            order_by="date",
        )

        assert [doc.id for doc in docs] == ["e2", "e3"]

    def test_descending_with_limit(self, temp_db: DataStore):
        self._seed(temp_db)

        docs = temp_db.query("entries", order_by="date", descending=True, limit=2)

        assert [doc.id for doc in docs] == ["e4", "e3"]

    def test_collections_are_separate(self, temp_db: DataStore):
        self._seed(temp_db)
        _put(temp_db, "users", "a", {"user_id": "a"})

        assert len(temp_db.query("users")) == 1
        assert temp_db.get_stats() == {"entries": 5, "users": 1}

    def test_invalid_operator(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.query("entries", filters=[("user_id", "!=", "a")])


class TestOptimisticConcurrency:
    """
    *For any* transaction, a document it read that changes before commit
    makes the commit fail and leaves every buffered write unapplied.
    """

    def test_conflicting_write_is_detected(self, temp_db: DataStore):
        _put(temp_db, "users", "u1", {"streak": 1})

        tx = temp_db.transaction()
        doc = tx.get("users", "u1")
        tx.set("entries", "e1", {"user_id": "u1"})
        tx.update("users", "u1", {"streak": doc.data["streak"] + 1})

        # Another writer commits first
        _put(temp_db, "users", "u1", {"streak": 10})

        with pytest.raises(TransactionConflictError):
            tx.commit()

        assert temp_db.get("users", "u1").data == {"streak": 10}
        assert temp_db.get("entries", "e1") is None

    def test_document_created_after_read_conflicts(self, temp_db: DataStore):
        tx = temp_db.transaction()
        assert tx.get("users", "u1") is None
        tx.set("users", "u1", {"streak": 0})

        _put(temp_db, "users", "u1", {"streak": 7})

        with pytest.raises(TransactionConflictError):
            tx.commit()

    def test_unrelated_write_does_not_conflict(self, temp_db: DataStore):
        _put(temp_db, "users", "u1", {"streak": 1})

        tx = temp_db.transaction()
        tx.get("users", "u1")
        tx.update("users", "u1", {"streak": 2})

        _put(temp_db, "users", "u2", {"streak": 5})

        tx.commit()
        assert temp_db.get("users", "u1").data == {"streak": 2}

    def test_run_transaction_retries_with_fresh_state(self, temp_db: DataStore):
        _put(temp_db, "counters", "c", {"n": 0})
        attempts = []

        def increment(tx):
            doc = tx.get("counters", "c")
            if not attempts:
                # Interleave a competing increment before the first commit
                _put(temp_db, "counters", "c", {"n": doc.data["n"] + 1})
            attempts.append(doc.data["n"])
            tx.update("counters", "c", {"n": doc.data["n"] + 1})
            return doc.data["n"] + 1

        result = temp_db.run_transaction(increment)

        assert attempts == [0, 1]
        assert result == 2
        assert temp_db.get("counters", "c").data == {"n": 2}

    def test_run_transaction_gives_up(self, temp_db: DataStore):
        _put(temp_db, "counters", "c", {"n": 0})
        calls = []

        def always_interrupted(tx):
            doc = tx.get("counters", "c")
            calls.append(1)
            _put(temp_db, "counters", "c", {"n": doc.data["n"] + 1})
            tx.set("log", str(len(calls)), {"attempt": len(calls)})

        with pytest.raises(TransactionConflictError):
            temp_db.run_transaction(always_interrupted, max_attempts=3)

        assert len(calls) == 3
        assert temp_db.query("log") == []

    def test_run_transaction_propagates_other_errors(self, temp_db: DataStore):
        def boom(tx):
            tx.set("users", "u1", {})
            raise KeyError("boom")

        with pytest.raises(KeyError):
            temp_db.run_transaction(boom)

        assert temp_db.get("users", "u1") is None

    def test_max_attempts_must_be_positive(self, temp_db: DataStore):
        with pytest.raises(ValueError):
            temp_db.run_transaction(lambda tx: None, max_attempts=0)
