"""Services built on the document store."""

from moodiary.services.entries import EntryService
from moodiary.services.quotes import DEFAULT_QUOTES, PASTEL_COLORS, get_random_quote
from moodiary.services.storage import LocalFileStore
from moodiary.services.users import UserService

__all__ = [
    "DEFAULT_QUOTES",
    "EntryService",
    "LocalFileStore",
    "PASTEL_COLORS",
    "UserService",
    "get_random_quote",
]
