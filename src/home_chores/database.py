"""Database connection handling for Home Chores."""

import logging
import sqlite3
import threading
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Generator

from home_chores.errors import StorageError

logger = logging.getLogger(__name__)


def _casefold(value: str | None) -> str | None:
    """SQL function used for case-insensitive matching beyond ASCII."""
    if value is None:
        return None
    return str(value).casefold()


class Database:
    """Owns the single SQLite connection used by the application.

    The connection is opened on first use. Every caller goes through
    :meth:`connection` or :meth:`cursor`, which serialize access and
    commit or roll back before control returns.
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize database with path."""
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _open(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = sqlite3.connect(self.db_path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                conn.create_function("casefold", 1, _casefold, deterministic=True)
            except sqlite3.Error as e:
                raise StorageError(f"Cannot open database at {self.db_path}: {e}") from e
            logger.info("Opened database %s", self.db_path)
            self._conn = conn
        return self._conn

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Scoped access to the connection.

        Commits when the block exits normally, rolls back and re-raises
        otherwise.
        """
        with self._lock:
            conn = self._open()
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            else:
                conn.commit()

    @contextmanager
    def cursor(self) -> Generator[sqlite3.Cursor, None, None]:
        """Scoped cursor that is always closed, within one transaction."""
        with self.connection() as conn:
            with closing(conn.cursor()) as cursor:
                yield cursor

    def verify_connection(self) -> bool:
        """Check that the database file can be opened and queried."""
        try:
            with self.cursor() as cursor:
                cursor.execute("SELECT 1")
                return True
        except (sqlite3.Error, StorageError):
            logger.exception("Database at %s failed verification", self.db_path)
            return False

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Closed database %s", self.db_path)
