"""Base document store interface for Moodiary."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, Field

from moodiary.errors import TransactionConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Commit attempts per transaction before a conflict is surfaced
DEFAULT_MAX_ATTEMPTS = 5

QUERY_OPERATORS = ("==", "<", "<=", ">", ">=")


class Document(BaseModel):
    """A stored document and the version it was read at."""

    collection: str = Field(..., description="Collection name")
    id: str = Field(..., description="Document identifier")
    data: dict[str, Any] = Field(default_factory=dict, description="Document body")
    version: int = Field(..., ge=1, description="Write counter, bumped on every commit")

    model_config = {"frozen": True}


class Transaction(ABC):
    """A unit of reads and buffered writes committed atomically.

    Reads record the version they saw. ``commit`` fails with
    TransactionConflictError if any of those documents changed since.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Read a document and add it to the read set.

        Returns:
            The document, or None if it does not exist.
        """
        pass

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Buffer a full write, creating or replacing the document."""
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Buffer a partial write merged into an existing document.

        Committing an update of a missing document raises NotFoundError.
        """
        pass

    @abstractmethod
    def new_id(self, collection: str) -> str:
        """Allocate an identifier for a new document."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Apply all buffered writes atomically.

        Raises:
            TransactionConflictError: If a document read by this transaction
                changed before commit.
        """
        pass


class DocumentStore(ABC):
    """Abstract base class for transactional document stores."""

    @abstractmethod
    def new_id(self, collection: str) -> str:
        """Allocate an identifier for a new document."""
        pass

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Read a single document outside of any transaction."""
        pass

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[list[tuple[str, str, Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        """Query a collection.

        Args:
            collection: Collection name.
            filters: ``(field, operator, value)`` triples, operator one of
                ``==, <, <=, >, >=``. All filters must match.
            order_by: Field to sort by.
            descending: Sort direction.
            limit: Maximum number of documents.

        Returns:
            Matching documents.
        """
        pass

    @abstractmethod
    def transaction(self) -> Transaction:
        """Begin a new transaction."""
        pass

    def run_transaction(
        self,
        fn: Callable[[Transaction], T],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> T:
        """Run ``fn`` inside a transaction, retrying on conflicts.

        ``fn`` is called again with a fresh transaction each time the commit
        conflicts, so it must not have side effects outside the transaction.

        Args:
            fn: Function that reads and writes through the transaction.
            max_attempts: Total number of attempts before giving up.

        Returns:
            Whatever ``fn`` returned on the attempt that committed.

        Raises:
            TransactionConflictError: If every attempt conflicted.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, max_attempts + 1):
            transaction = self.transaction()
            result = fn(transaction)
            try:
                transaction.commit()
            except TransactionConflictError as e:
                if attempt == max_attempts:
                    logger.warning("Transaction failed after %d attempts: %s", attempt, e)
                    raise
                logger.debug("Transaction conflict on attempt %d, retrying: %s", attempt, e)
                continue
            return result

        # Unreachable: the loop either returns or raises
        raise TransactionConflictError("Transaction did not commit")
