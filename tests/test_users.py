"""Tests for user profiles.

**Feature: mood-diary**
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from moodiary.db.store import DataStore
from moodiary.errors import NotFoundError
from moodiary.services.entries import USERS
from moodiary.services.users import UserService

NOW = datetime(2025, 7, 10, 8, 0)


@pytest.fixture
def store():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield DataStore(Path(tmpdir) / "test.db")


class TestEnsureProfile:
    def test_new_profile_defaults(self, store):
        profile = UserService(store, clock=lambda: NOW).ensure_profile("u1", name="Sam", email="sam@example.com")

        assert profile.name == "Sam"
        assert profile.email == "sam@example.com"
        assert profile.streak == 0
        assert profile.longest_streak == 0
        assert profile.last_entry_date is None
        assert profile.theme == "pastel-pink"
        assert profile.dark_mode is False
        assert profile.created_at == NOW

    def test_existing_profile_is_kept(self, store):
        users = UserService(store)
        users.ensure_profile("u1", name="Sam")
        tx = store.transaction()
        tx.update(USERS, "u1", {"streak": 4, "longest_streak": 4})
        tx.commit()

        profile = users.ensure_profile("u1", name="Someone else")

        assert profile.name == "Sam"
        assert profile.streak == 4
        assert store.get(USERS, "u1").version == 2

    def test_profile_round_trips(self, store):
        users = UserService(store, clock=lambda: NOW)
        created = users.ensure_profile("u1", name="Sam")

        assert users.get_profile("u1") == created

    def test_requires_user_id(self, store):
        with pytest.raises(ValueError):
            UserService(store).ensure_profile("")


def test_get_missing_profile(store):
    with pytest.raises(NotFoundError):
        UserService(store).get_profile("ghost")
