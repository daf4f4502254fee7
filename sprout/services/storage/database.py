"""
SQLite database connection and query manager

DESIGN DECISION: One explicitly constructed Database owns the single
sqlite3 connection. It is created by the orchestrator and handed to every
repository through its constructor; there is no module-level singleton.

The connection runs in autocommit mode (isolation_level=None). Single
statements commit on their own; multi-statement units of work use
`transaction()`, which issues an explicit BEGIN/COMMIT and rolls back on
any error.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sprout.config.settings import DatabaseSettings
from sprout.services.storage.interface import (
    ConstraintViolation,
    DuplicateError,
    StorageError,
    StorageIOError,
)


MEMORY_PATH = ":memory:"

logger = structlog.get_logger(__name__)


def translate_error(error: sqlite3.Error) -> StorageError:
    """Map a sqlite3 exception onto the storage error taxonomy."""
    message = str(error)
    if isinstance(error, sqlite3.IntegrityError):
        if "UNIQUE constraint failed" in message:
            return DuplicateError(message)
        return ConstraintViolation(message)
    return StorageIOError(message)


class Database:
    """Database connection manager for SQLite"""

    def __init__(
        self,
        path: str = "data/sprout.db",
        journal_mode: str = "WAL",
        enforce_foreign_keys: bool = False,
        busy_timeout_seconds: float = 30.0,
        connect_attempts: int = 3,
    ):
        self.path = path
        self.journal_mode = journal_mode
        self.enforce_foreign_keys = enforce_foreign_keys
        self.busy_timeout_seconds = busy_timeout_seconds
        self.connect_attempts = connect_attempts
        self._connection: Optional[sqlite3.Connection] = None
        self._transaction_depth = 0

        if path != MEMORY_PATH:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "Database":
        return cls(
            path=settings.path,
            journal_mode=settings.journal_mode,
            enforce_foreign_keys=settings.enforce_foreign_keys,
            busy_timeout_seconds=settings.busy_timeout_seconds,
            connect_attempts=settings.connect_attempts,
        )

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def _open(self) -> sqlite3.Connection:
        connection = sqlite3.connect(
            self.path,
            check_same_thread=False,
            timeout=self.busy_timeout_seconds,
            isolation_level=None,
        )
        connection.execute(f"PRAGMA journal_mode={self.journal_mode}")
        connection.execute(
            f"PRAGMA foreign_keys={'ON' if self.enforce_foreign_keys else 'OFF'}"
        )
        connection.row_factory = sqlite3.Row
        return connection

    def connect(self) -> sqlite3.Connection:
        """
        Get or create the database connection.

        Opening the file is retried on transient OperationalErrors
        (locked or busy file). Statements themselves are never retried.
        """
        if self._connection is None:
            retrying = Retrying(
                stop=stop_after_attempt(self.connect_attempts),
                wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
                retry=retry_if_exception_type(sqlite3.OperationalError),
                reraise=True,
            )
            try:
                self._connection = retrying(self._open)
            except sqlite3.Error as e:
                raise StorageIOError(
                    f"Could not open database at {self.path}: {e}"
                ) from e
            logger.debug("database_connected", path=self.path)

        return self._connection

    def close(self):
        """Close database connection"""
        if self._connection:
            self._connection.close()
            self._connection = None
            self._transaction_depth = 0

    def execute(self, query: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Execute a single statement"""
        conn = self.connect()
        try:
            return conn.execute(query, tuple(params))
        except sqlite3.Error as e:
            raise translate_error(e) from e

    def execute_many(self, query: str, rows: Sequence[Sequence[Any]]) -> int:
        """Execute one statement for every parameter row, atomically"""
        with self.transaction() as conn:
            try:
                cursor = conn.executemany(query, [tuple(row) for row in rows])
            except sqlite3.Error as e:
                raise translate_error(e) from e
            return cursor.rowcount

    def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Execute query and return the first row (or None)"""
        return self.execute(query, params).fetchone()

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        """Execute query and return all rows"""
        return self.execute(query, params).fetchall()

    def fetch_value(self, query: str, params: Sequence[Any] = (), default: Any = None) -> Any:
        """Execute query and return the first column of the first row"""
        row = self.fetch_one(query, params)
        if row is None or row[0] is None:
            return default
        return row[0]

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block inside BEGIN/COMMIT.

        Nested calls join the outermost transaction. Any exception rolls
        the whole transaction back and is re-raised.
        """
        conn = self.connect()
        if self._transaction_depth > 0:
            self._transaction_depth += 1
            try:
                yield conn
            finally:
                self._transaction_depth -= 1
            return

        try:
            conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise translate_error(e) from e
        self._transaction_depth = 1
        try:
            yield conn
        except BaseException:
            self._transaction_depth = 0
            conn.rollback()
            raise
        self._transaction_depth = 0
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            conn.rollback()
            raise translate_error(e) from e

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
