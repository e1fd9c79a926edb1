"""Database connection management for excalidraw-store local storage."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from ..errors import StorageError
from .schema import SCHEMA

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

# Failures raised by SQLite itself or while binding parameters
DB_ERRORS = (sqlite3.Error, OverflowError, UnicodeEncodeError)


class Database:
    """SQLite handle owning a single connection behind one exclusive lock.

    Every operation holds the lock for its whole duration, so callers never
    observe an intermediate state of another operation.

    Usage:
        db = Database(Path("~/.excalidraw/drawings.db").expanduser())

        # Simple query
        with db.connection() as conn:
            rows = conn.execute("SELECT * FROM drawings").fetchall()

        # Transaction with auto-commit/rollback
        with db.transaction() as conn:
            conn.execute("DELETE FROM snapshots ...")
            conn.execute("INSERT INTO snapshots ...")
    """

    def __init__(self, db_path: Union[Path, str]):
        """Open the database and create the schema if needed.

        Args:
            db_path: Path to the SQLite database file, or ":memory:"
        """
        self.db_path = db_path if str(db_path) == MEMORY else Path(db_path)
        self._lock = threading.Lock()
        self._ensure_directory()
        try:
            self._conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open database {self.db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        try:
            self._bootstrap()
        except StorageError:
            self._conn.close()
            raise

    def _ensure_directory(self) -> None:
        """Create parent directory if it doesn't exist."""
        if isinstance(self.db_path, Path):
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory for {self.db_path}: {e}") from e

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Hold the lock and yield the shared connection.

        Statements run in autocommit mode; use transaction() when several
        statements must land together.

        Example:
            with db.connection() as conn:
                row = conn.execute("SELECT * FROM drawings WHERE id = ?", (drawing_id,)).fetchone()
                if row:
                    print(row["name"])
        """
        with self._lock:
            try:
                yield self._conn
            except DB_ERRORS as e:
                raise StorageError(str(e)) from e

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Hold the lock and yield the connection inside BEGIN IMMEDIATE.

        Commits on successful exit, rolls back on exception.

        Example:
            with db.transaction() as conn:
                conn.execute("DELETE FROM snapshots WHERE id = ?", (oldest_id,))
                conn.execute("INSERT INTO snapshots ...")
                # Automatically commits if no exception
        """
        with self._lock:
            try:
                self._conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise StorageError(f"Failed to begin transaction: {e}") from e
            try:
                yield self._conn
                self._conn.commit()
            except DB_ERRORS as e:
                self._conn.rollback()
                raise StorageError(str(e)) from e
            except Exception:
                self._conn.rollback()
                raise

    def _bootstrap(self) -> None:
        """Create tables and indexes; safe to run on an existing file."""
        with self.connection() as conn:
            conn.executescript(SCHEMA)
        logger.debug("Schema ready at %s", self.db_path)

    def table_names(self) -> list[str]:
        """List the user tables present in the database."""
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
            ).fetchall()
            return [row["name"] for row in rows]

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
