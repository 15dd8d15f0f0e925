"""Document storage for Moodiary."""

from moodiary.db.base import DEFAULT_MAX_ATTEMPTS, Document, DocumentStore, Transaction
from moodiary.db.store import DataStore

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DataStore",
    "Document",
    "DocumentStore",
    "Transaction",
]
