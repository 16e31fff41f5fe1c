"""Task service used by the UI and the CLI."""

import logging
from pathlib import Path

from home_chores.database import Database
from home_chores.models import Outcome, Task
from home_chores.repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Thin facade over :class:`TaskRepository`."""

    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    @classmethod
    def open(cls, db_path: Path | str) -> "TaskService":
        """Open the database, ensure the schema and sweep invalid rows.

        Raises:
            SchemaError: If the tasks table cannot be created or migrated.
            StorageError: If the database cannot be opened.
        """
        database = Database(db_path)
        try:
            repository = TaskRepository(database)
        except Exception:
            database.close()
            raise
        logger.debug("Task service ready on %s", db_path)
        return cls(repository)

    def close(self) -> None:
        self.repository.database.close()

    def get_all(self) -> list[Task]:
        return self.repository.get_all()

    def get_by_id(self, task_id: int) -> Task | None:
        return self.repository.get_by_id(task_id)

    def search(self, text: str) -> list[Task]:
        return self.repository.search(text)

    def add(self, task: Task) -> int:
        return self.repository.insert(task)

    def update(self, task: Task) -> Outcome:
        return self.repository.update(task)

    def delete(self, task_id: int) -> Outcome:
        return self.repository.delete(task_id)

    def mark_completed(self, task_id: int) -> Outcome:
        return self.repository.mark_completed(task_id)

    def mark_incomplete(self, task_id: int) -> Outcome:
        return self.repository.mark_incomplete(task_id)

    def toggle_completed(self, task_id: int) -> Outcome:
        """Flip the completed flag of a task."""
        task = self.repository.get_by_id(task_id)
        if task is None:
            return Outcome.NOT_FOUND
        if task.completed:
            return self.repository.mark_incomplete(task_id)
        return self.repository.mark_completed(task_id)

    def purge_invalid(self) -> int:
        return self.repository.purge_invalid()

    def count(self) -> int:
        return self.repository.count()
