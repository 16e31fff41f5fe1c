"""Task persistence for Home Chores."""

import logging
import sqlite3

from home_chores.database import Database
from home_chores.errors import StorageError, TaskValidationError
from home_chores.models import Outcome, Task
from home_chores.schema import SchemaManager
from home_chores.timeutils import now_local, to_stored

logger = logging.getLogger(__name__)

TASK_COLUMNS = "id, task_name, category, description, completed, created_at, deadline"

# Rows that may be surfaced as persisted tasks.
VALID_ROW_SQL = "id > 0 AND task_name IS NOT NULL AND TRIM(task_name) != ''"

INVALID_ROW_SQL = "id IS NULL OR id <= 0 OR task_name IS NULL OR TRIM(task_name) = ''"


def _require_positive_id(task_id: object) -> int:
    if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id <= 0:
        raise TaskValidationError(f"Invalid task ID: {task_id!r}")
    return task_id


def _require_name(task: Task) -> None:
    if not task.name or not task.name.strip():
        raise TaskValidationError("Task name is required")


def _to_tasks(rows: list[sqlite3.Row]) -> list[Task]:
    """Map rows to tasks, skipping rows whose timestamps cannot be read."""
    tasks = []
    for row in rows:
        try:
            tasks.append(Task.from_row(row))
        except ValueError as e:
            logger.warning("Skipping task %s with unreadable data: %s", row["id"], e)
    return tasks


class TaskRepository:
    """Reads and writes tasks.

    Opening a repository ensures the schema (failure is fatal) and then
    sweeps invalid rows (failure is logged and ignored).
    """

    def __init__(self, database: Database, *, schema: SchemaManager | None = None) -> None:
        self.database = database
        self.schema = schema if schema is not None else SchemaManager(database)
        self.table = self.schema.table
        self.schema.ensure_schema()
        self._sweep()

    def _sweep(self) -> None:
        try:
            self.purge_invalid()
        except StorageError:
            logger.exception("Could not purge invalid tasks, continuing")

    def insert(self, task: Task) -> int:
        """Insert a new task and return its assigned id.

        ``created_at`` defaults to now when unset. The returned id is not
        written back into ``task``; use ``task.with_id(new_id)``.

        Raises:
            TaskValidationError: If the name is blank or the task already has an id.
            StorageError: If the database rejects the write.
        """
        _require_name(task)
        if task.is_persisted:
            raise TaskValidationError(f"Task already has ID {task.id}; use update")

        created_at = task.created_at if task.created_at is not None else now_local()
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"INSERT INTO {self.table} "
                    "(task_name, category, description, completed, created_at, deadline) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        task.name,
                        task.category,
                        task.description,
                        task.completed,
                        to_stored(created_at),
                        to_stored(task.deadline),
                    ),
                )
                new_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StorageError(f"Error inserting task: {e}") from e

        if not new_id or new_id <= 0:
            raise StorageError("Database did not assign an ID to the new task")
        logger.info("Task added with ID %d", new_id)
        return new_id

    def update(self, task: Task) -> Outcome:
        """Rewrite every mutable field of an existing task.

        ``created_at`` is never changed.
        """
        task_id = _require_positive_id(task.id)
        _require_name(task)
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"UPDATE {self.table} SET task_name = ?, category = ?, description = ?, "
                    "completed = ?, deadline = ? WHERE id = ?",
                    (
                        task.name,
                        task.category,
                        task.description,
                        task.completed,
                        to_stored(task.deadline),
                        task_id,
                    ),
                )
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Error updating task {task_id}: {e}") from e

        if updated == 0:
            logger.info("No task found with ID %d to update", task_id)
            return Outcome.NOT_FOUND
        logger.info("Task %d updated", task_id)
        return Outcome.SUCCESS

    def delete(self, task_id: int) -> Outcome:
        """Delete a task by ID, reporting NOT_FOUND when it doesn't exist."""
        task_id = _require_positive_id(task_id)
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"SELECT 1 FROM {self.table} WHERE id = ?", (task_id,))
                if cursor.fetchone() is None:
                    logger.info("No task found with ID %d to delete", task_id)
                    return Outcome.NOT_FOUND
                cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (task_id,))
        except sqlite3.Error as e:
            raise StorageError(f"Error deleting task {task_id}: {e}") from e

        logger.info("Task %d deleted", task_id)
        return Outcome.SUCCESS

    def get_by_id(self, task_id: int) -> Task | None:
        """Return the task with the given ID, or None."""
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id <= 0:
            return None
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"SELECT {TASK_COLUMNS} FROM {self.table} WHERE id = ? AND {VALID_ROW_SQL}",
                    (task_id,),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Error retrieving task {task_id}: {e}") from e
        if row is None:
            return None
        tasks = _to_tasks([row])
        return tasks[0] if tasks else None

    def get_all(self) -> list[Task]:
        """Fetch every valid task, newest first."""
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"SELECT {TASK_COLUMNS} FROM {self.table} WHERE {VALID_ROW_SQL} "
                    "ORDER BY created_at DESC, id DESC"
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Error loading tasks: {e}") from e
        return _to_tasks(rows)

    def search(self, text: str) -> list[Task]:
        """Case-insensitive substring search over name and description.

        Results are ordered like :meth:`get_all`; a blank search returns
        every valid task.
        """
        needle = (text or "").casefold()
        if not needle:
            return self.get_all()
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"SELECT {TASK_COLUMNS} FROM {self.table} WHERE {VALID_ROW_SQL} "
                    "AND (instr(casefold(task_name), ?) > 0 "
                    "OR instr(casefold(COALESCE(description, '')), ?) > 0) "
                    "ORDER BY created_at DESC, id DESC",
                    (needle, needle),
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Error searching tasks: {e}") from e
        logger.debug("Search %r matched %d task(s)", text, len(rows))
        return _to_tasks(rows)

    def set_completed(self, task_id: int, completed: bool) -> Outcome:
        """Set the completed flag of a task."""
        task_id = _require_positive_id(task_id)
        try:
            with self.database.cursor() as cursor:
                cursor.execute(
                    f"UPDATE {self.table} SET completed = ? WHERE id = ?",
                    (bool(completed), task_id),
                )
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Error updating task {task_id}: {e}") from e

        if updated == 0:
            logger.info("No task found with ID %d to mark", task_id)
            return Outcome.NOT_FOUND
        logger.info("Task %d marked as %s", task_id, "completed" if completed else "incomplete")
        return Outcome.SUCCESS

    def mark_completed(self, task_id: int) -> Outcome:
        return self.set_completed(task_id, True)

    def mark_incomplete(self, task_id: int) -> Outcome:
        return self.set_completed(task_id, False)

    def count(self) -> int:
        """Number of valid tasks."""
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"SELECT COUNT(*) FROM {self.table} WHERE {VALID_ROW_SQL}")
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise StorageError(f"Error counting tasks: {e}") from e

    def purge_invalid(self) -> int:
        """Delete rows with no usable ID or a blank name.

        Returns:
            The number of rows deleted.
        """
        try:
            with self.database.cursor() as cursor:
                cursor.execute(f"DELETE FROM {self.table} WHERE {INVALID_ROW_SQL}")
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Error deleting invalid tasks: {e}") from e

        if deleted > 0:
            logger.info("Deleted %d invalid task(s)", deleted)
        else:
            logger.debug("No invalid tasks found")
        return deleted

