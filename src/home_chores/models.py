"""Data models for Home Chores."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from home_chores.errors import TaskValidationError
from home_chores.timeutils import from_stored


class Outcome(Enum):
    """Result of a mutation addressed by task id."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return self is Outcome.SUCCESS


@dataclass(frozen=True)
class Task:
    """A task record.

    ``id`` is None until the task has been inserted; the repository assigns
    ``created_at`` on insert when the caller leaves it unset.
    """

    name: str
    category: str | None = None
    description: str | None = None
    completed: bool = False
    created_at: datetime | None = None
    deadline: datetime | None = None
    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        """True when the task carries a store-assigned id."""
        return isinstance(self.id, int) and self.id > 0

    @property
    def is_valid(self) -> bool:
        """True when the task is persisted and has a non-blank name."""
        return self.is_persisted and bool(self.name and self.name.strip())

    def with_id(self, task_id: int) -> "Task":
        """Return a copy carrying the given store-assigned id."""
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id <= 0:
            raise TaskValidationError(f"Task ID must be a positive integer, got {task_id!r}")
        return replace(self, id=task_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Task":
        """Create a Task from a SQLite row."""
        return cls(
            id=row["id"],
            name=row["task_name"],
            category=row["category"],
            description=row["description"],
            completed=bool(row["completed"]),
            created_at=from_stored(row["created_at"]),
            deadline=from_stored(row["deadline"]),
        )
