"""Schema management for the tasks table."""

import logging
import re
import sqlite3

from home_chores.database import Database
from home_chores.errors import SchemaError, TaskValidationError
from home_chores.timeutils import from_stored, now_millis, to_stored

logger = logging.getLogger(__name__)

TABLE_NAME = "tasks"

# Current time as epoch milliseconds, evaluated by SQLite.
NOW_MILLIS_SQL = "(CAST((julianday('now') - 2440587.5) * 86400000 AS INTEGER))"

# Columns added to tables created by older versions, in order.
# ALTER TABLE cannot add a non-constant default, so created_at is backfilled.
MIGRATED_COLUMNS: tuple[tuple[str, str], ...] = (
    ("category", "TEXT"),
    ("description", "TEXT"),
    ("completed", "BOOLEAN NOT NULL DEFAULT 0"),
    ("created_at", "TIMESTAMP"),
    ("deadline", "TIMESTAMP"),
)

TIMESTAMP_COLUMNS = ("created_at", "deadline")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise TaskValidationError(f"Invalid SQL identifier: {name!r}")
    return name


class SchemaManager:
    """Creates and migrates the tasks table."""

    def __init__(self, database: Database, table: str = TABLE_NAME) -> None:
        self.database = database
        self.table = _check_identifier(table)

    def table_exists(self) -> bool:
        """Return True if the tasks table exists."""
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                    (self.table,),
                )
                return cursor.fetchone() is not None
        except sqlite3.Error as e:
            raise SchemaError(f"Error checking for table '{self.table}': {e}") from e

    def ensure_table_exists(self) -> bool:
        """Create the tasks table if it doesn't exist.

        Returns:
            True if the table was created by this call.
        """
        existed = self.table_exists()
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        task_name TEXT NOT NULL,
                        category TEXT,
                        description TEXT,
                        completed BOOLEAN NOT NULL DEFAULT 0,
                        created_at TIMESTAMP DEFAULT {NOW_MILLIS_SQL},
                        deadline TIMESTAMP
                    )
                """)
        except sqlite3.Error as e:
            raise SchemaError(f"Error creating table '{self.table}': {e}") from e

        if existed:
            logger.debug("Table '%s' already exists", self.table)
            return False
        logger.info("Created table '%s'", self.table)
        return True

    def column_names(self) -> list[str]:
        """Return the names of the table's columns, in table order."""
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"PRAGMA table_info({self.table})")
                return [row["name"] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise SchemaError(f"Error reading columns of '{self.table}': {e}") from e

    def ensure_column(self, name: str, definition: str) -> bool:
        """Add a column if it is missing.

        Adding ``created_at`` also backfills existing rows with the
        current time.

        Returns:
            True if the column was added, False if it already existed.
        """
        _check_identifier(name)
        if name in self.column_names():
            logger.debug("Column '%s' already exists", name)
            return False

        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"ALTER TABLE {self.table} ADD COLUMN {name} {definition}")
                if name == "created_at":
                    cursor.execute(
                        f"UPDATE {self.table} SET created_at = ? WHERE created_at IS NULL",
                        (now_millis(),),
                    )
                    logger.info("Backfilled 'created_at' on %d existing row(s)", cursor.rowcount)
        except sqlite3.Error as e:
            raise SchemaError(f"Error adding column '{name}': {e}") from e

        logger.info("Column '%s' added", name)
        return True

    def ensure_schema(self) -> None:
        """Create the table, add any columns an older table lacks and convert
        its text timestamps."""
        self.ensure_table_exists()
        for name, definition in MIGRATED_COLUMNS:
            self.ensure_column(name, definition)
        self.normalize_timestamps()

    def normalize_timestamps(self) -> int:
        """Rewrite non-integer timestamps as epoch milliseconds.

        Older databases hold CURRENT_TIMESTAMP or ISO text, which SQLite
        sorts above every integer. Values that cannot be parsed are cleared.

        Returns:
            The number of values rewritten.
        """
        rewritten = 0
        try:
            with self.database.cursor() as cursor:
                for column in TIMESTAMP_COLUMNS:
                    cursor.execute(
                        f"SELECT rowid AS row_id, {column} AS value FROM {self.table} "
                        f"WHERE typeof({column}) IN ('text', 'real', 'blob')"
                    )
                    for row in cursor.fetchall():
                        try:
                            millis = to_stored(from_stored(row["value"]))
                        except ValueError:
                            logger.warning(
                                "Clearing unreadable %s %r on row %d",
                                column,
                                row["value"],
                                row["row_id"],
                            )
                            millis = None
                        cursor.execute(
                            f"UPDATE {self.table} SET {column} = ? WHERE rowid = ?",
                            (millis, row["row_id"]),
                        )
                        rewritten += 1
        except sqlite3.Error as e:
            raise SchemaError(f"Error converting timestamps in '{self.table}': {e}") from e

        if rewritten:
            logger.info("Converted %d legacy timestamp value(s)", rewritten)
        return rewritten

    def drop_table(self) -> None:
        """Drop the tasks table. Development reset only."""
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"DROP TABLE IF EXISTS {self.table}")
        except sqlite3.Error as e:
            raise SchemaError(f"Error dropping table '{self.table}': {e}") from e
        logger.warning("Dropped table '%s'", self.table)
