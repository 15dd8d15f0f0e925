"""SQLite document store for Moodiary."""

import json
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Optional

from pydantic_core import to_jsonable_python

from moodiary.db.base import QUERY_OPERATORS, Document, DocumentStore, Transaction
from moodiary.errors import NotFoundError, TransactionConflictError

logger = logging.getLogger(__name__)


def _encode(data: dict[str, Any]) -> str:
    return json.dumps(data, default=to_jsonable_python)


def _json_value(value: Any) -> Any:
    """Convert a filter value to the form it is stored in."""
    return to_jsonable_python(value)


class DataStore(DocumentStore):
    """SQLite-based document store.

    Documents are JSON bodies keyed by ``(collection, id)`` with a version
    counter used for optimistic concurrency control. Every operation opens
    its own connection.
    """

    REQUIRED_TABLES = [
        "documents",
    ]

    def __init__(self, db_path: Path, timeout: float = 5.0):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
            timeout: Seconds to wait for the database write lock.
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection in autocommit mode."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    PRIMARY KEY (collection, id)
                )
            """)
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def _read(self, conn: sqlite3.Connection, collection: str, doc_id: str) -> Optional[Document]:
        row = conn.execute(
            "SELECT data, version FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        ).fetchone()
        if row is None:
            return None
        return Document(
            collection=collection,
            id=doc_id,
            data=json.loads(row["data"]),
            version=row["version"],
        )

    # ==================== Documents ====================

    def new_id(self, collection: str) -> str:
        """Allocate a random document identifier."""
        return uuid.uuid4().hex

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a document by ID.

        Args:
            collection: Collection name.
            doc_id: Document ID.

        Returns:
            Document if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            return self._read(conn, collection, doc_id)
        finally:
            conn.close()

    def query(
        self,
        collection: str,
        filters: Optional[list[tuple[str, str, Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        """Query documents in a collection.

        Fields are compared in their stored JSON form, so datetimes compare
        as ISO-8601 strings.
        """
        sql = "SELECT id, data, version FROM documents WHERE collection = ?"
        params: list[Any] = [collection]

        for field, op, value in filters or []:
            if op not in QUERY_OPERATORS:
                raise ValueError(f"Invalid operator: {op}. Must be one of {list(QUERY_OPERATORS)}")
            op = "=" if op == "==" else op
            sql += f" AND json_extract(data, ?) {op} ?"
            params.extend([f"$.{field}", _json_value(value)])

        if order_by:
            sql += f" ORDER BY json_extract(data, ?) {'DESC' if descending else 'ASC'}, id"
            params.append(f"$.{order_by}")

        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        try:
            cursor = conn.execute(sql, params)
            return [
                Document(
                    collection=collection,
                    id=row["id"],
                    data=json.loads(row["data"]),
                    version=row["version"],
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def transaction(self) -> "SQLiteTransaction":
        """Begin a new optimistic transaction."""
        return SQLiteTransaction(self)

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get document counts per collection."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT collection, COUNT(*) AS count FROM documents GROUP BY collection"
            )
            return {row["collection"]: row["count"] for row in cursor.fetchall()}
        finally:
            conn.close()


class SQLiteTransaction(Transaction):
    """Optimistic transaction over a DataStore.

    Reads go straight to the database and record the version seen (0 for a
    missing document). Writes are buffered until commit, which takes the
    database write lock, re-checks every recorded version, and applies the
    writes with bumped versions.
    """

    def __init__(self, store: DataStore):
        self._store = store
        self._reads: dict[tuple[str, str], int] = {}
        self._writes: list[tuple[str, str, str, dict[str, Any]]] = []
        self._committed = False

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        doc = self._store.get(collection, doc_id)
        self._reads.setdefault((collection, doc_id), doc.version if doc else 0)
        return doc

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._writes.append(("set", collection, doc_id, dict(data)))

    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._writes.append(("update", collection, doc_id, dict(data)))

    def new_id(self, collection: str) -> str:
        return self._store.new_id(collection)

    def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Transaction already committed")

        conn = self._store._get_connection()
        try:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.OperationalError as e:
                # Lock wait timed out; another writer held the database
                raise TransactionConflictError(f"Could not lock database: {e}") from e

            try:
                for (collection, doc_id), version in self._reads.items():
                    current = self._store._read(conn, collection, doc_id)
                    current_version = current.version if current else 0
                    if current_version != version:
                        raise TransactionConflictError(
                            f"Document {collection}/{doc_id} changed "
                            f"(read version {version}, now {current_version})"
                        )

                for op, collection, doc_id, data in self._writes:
                    current = self._store._read(conn, collection, doc_id)
                    if op == "update":
                        if current is None:
                            raise NotFoundError(f"Document {collection}/{doc_id} not found")
                        data = {**current.data, **data}
                    conn.execute(
                        """
                        INSERT OR REPLACE INTO documents (collection, id, data, version)
                        VALUES (?, ?, ?, ?)
                        """,
                        (collection, doc_id, _encode(data), (current.version if current else 0) + 1),
                    )

                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
        finally:
            conn.close()

        self._committed = True
        logger.debug(
            "Committed transaction: %d reads, %d writes", len(self._reads), len(self._writes)
        )
