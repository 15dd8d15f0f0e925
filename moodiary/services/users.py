"""User profile service."""

from datetime import datetime
from typing import Callable

from moodiary.db.base import DEFAULT_MAX_ATTEMPTS, DocumentStore, Transaction
from moodiary.errors import NotFoundError
from moodiary.models import UserProfile
from moodiary.services.entries import USERS


class UserService:
    """Creates and reads user profiles."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = datetime.now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._store = store
        self._clock = clock
        self._max_attempts = max_attempts

    def ensure_profile(self, user_id: str, name: str = "", email: str = "") -> UserProfile:
        """Create the user's profile on first sign-in.

        An existing profile is returned unchanged.

        Args:
            user_id: The authenticated user's ID.
            name: Display name for a new profile.
            email: Email for a new profile.

        Returns:
            The stored profile.
        """
        if not user_id:
            raise ValueError("user_id is required")

        def create_if_missing(tx: Transaction) -> UserProfile:
            doc = tx.get(USERS, user_id)
            if doc is not None:
                return UserProfile.model_validate({**doc.data, "id": user_id})
            profile = UserProfile(id=user_id, name=name, email=email, created_at=self._clock())
            tx.set(USERS, user_id, profile.model_dump(exclude={"id"}))
            return profile

        return self._store.run_transaction(create_if_missing, self._max_attempts)

    def get_profile(self, user_id: str) -> UserProfile:
        """Get a user's profile.

        Raises:
            NotFoundError: If the user has no profile.
        """
        doc = self._store.get(USERS, user_id)
        if doc is None:
            raise NotFoundError(f"User {user_id} not found")
        return UserProfile.model_validate({**doc.data, "id": user_id})
