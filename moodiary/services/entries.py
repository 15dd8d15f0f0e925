"""Entry service: the save transaction and entry queries."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Optional, Union

from moodiary.db.base import DEFAULT_MAX_ATTEMPTS, DocumentStore, Transaction
from moodiary.errors import NotFoundError, PermissionDeniedError, ValidationError
from moodiary.models import DEFAULT_THEME, Entry, EntryInput, EntrySummary, Mood, UserProfile
from moodiary.streaks import advance_streak
from moodiary.validation import parse_entry_date, validate_entry_input

ENTRIES = "entries"
USERS = "users"


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the first instant of the month and of the month after it."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Must be between 1 and 12")
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _summary(doc_id: str, data: dict) -> EntrySummary:
    return EntrySummary(
        entry_id=doc_id,
        date=data["date"],
        title=data["title"],
        mood=data["mood"],
    )


class EntryService:
    """Creates, updates and reads diary entries.

    New entries advance the owning user's streak in the same transaction
    that writes the entry.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = datetime.now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """Initialize the entry service.

        Args:
            store: Transactional document store.
            clock: Returns the current time; used for timestamps and the
                future-date check.
            max_attempts: Transaction attempts before a conflict is raised.
        """
        self._store = store
        self._clock = clock
        self._max_attempts = max_attempts

    def save_entry(
        self,
        user_id: str,
        entry_input: Union[EntryInput, Mapping[str, Any]],
        existing_entry_id: Optional[str] = None,
    ) -> str:
        """Save an entry, creating it or overwriting an existing one.

        Args:
            user_id: The authenticated user's ID.
            entry_input: Entry fields.
            existing_entry_id: ID of an entry to overwrite. When omitted a new
                entry is created and the user's streak is advanced.

        Returns:
            The entry ID.

        Raises:
            ValidationError: If any field fails validation.
            NotFoundError: If the entry (update) or user profile (create)
                does not exist.
            PermissionDeniedError: If the entry belongs to another user.
            TransactionConflictError: If retries are exhausted.
        """
        if not user_id:
            raise ValueError("user_id is required")

        now = self._clock()
        result = validate_entry_input(entry_input, now=now)
        if not result.valid:
            raise ValidationError(result.errors)

        if not isinstance(entry_input, EntryInput):
            entry_input = EntryInput.model_validate(dict(entry_input))

        fields = {
            "date": parse_entry_date(entry_input.date),
            "title": entry_input.title.strip(),
            "content": entry_input.content,
            "mood": Mood(entry_input.mood),
            "images": list(entry_input.images or []),
            "drawing_url": entry_input.drawing_url,
            "theme": entry_input.theme or DEFAULT_THEME,
            "updated_at": now,
        }

        if existing_entry_id:
            def update_entry(tx: Transaction) -> str:
                doc = tx.get(ENTRIES, existing_entry_id)
                if doc is None:
                    raise NotFoundError(f"Entry {existing_entry_id} not found")
                if doc.data.get("user_id") != user_id:
                    raise PermissionDeniedError(f"Entry {existing_entry_id} belongs to another user")
                tx.update(ENTRIES, existing_entry_id, fields)
                return existing_entry_id

            return self._store.run_transaction(update_entry, self._max_attempts)

        def create_entry(tx: Transaction) -> str:
            entry_id = tx.new_id(ENTRIES)
            entry = Entry(id=entry_id, user_id=user_id, created_at=now, **fields)
            tx.set(ENTRIES, entry_id, entry.model_dump(exclude={"id"}))

            user_doc = tx.get(USERS, user_id)
            if user_doc is None:
                raise NotFoundError(f"User {user_id} not found")
            profile = UserProfile.model_validate({**user_doc.data, "id": user_id})

            tx.update(USERS, user_id, advance_streak(profile, fields["date"]))
            return entry_id

        return self._store.run_transaction(create_entry, self._max_attempts)

    def get_entry(self, entry_id: str, user_id: str) -> Entry:
        """Get a single entry, verifying ownership.

        Raises:
            NotFoundError: If the entry does not exist.
            PermissionDeniedError: If the entry belongs to another user.
        """
        doc = self._store.get(ENTRIES, entry_id)
        if doc is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        if doc.data.get("user_id") != user_id:
            raise PermissionDeniedError(f"Entry {entry_id} belongs to another user")
        return Entry.model_validate({**doc.data, "id": doc.id})

    def get_entries_for_month(self, user_id: str, year: int, month: int) -> list[EntrySummary]:
        """Get summaries of a user's entries within a calendar month.

        Args:
            user_id: The user's ID.
            year: Four-digit year.
            month: Month number, 1-12.

        Returns:
            Entry summaries sorted by date ascending.
        """
        start, end = _month_bounds(year, month)
        docs = self._store.query(
            ENTRIES,
            filters=[
                ("user_id", "==", user_id),
                ("date", ">=", start),
                ("date", "<", end),
            ],
            order_by="date",
        )
        return [_summary(doc.id, doc.data) for doc in docs]

    def get_recent_entries(self, user_id: str, limit: int = 5) -> list[EntrySummary]:
        """Get a user's most recent entries, newest first."""
        docs = self._store.query(
            ENTRIES,
            filters=[("user_id", "==", user_id)],
            order_by="date",
            descending=True,
            limit=limit,
        )
        return [_summary(doc.id, doc.data) for doc in docs]
