"""Export tasks to plain-text or CSV files."""

import csv
import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, TextIO

from home_chores.errors import ExportError
from home_chores.models import Task
from home_chores.timeutils import format_datetime

logger = logging.getLogger(__name__)

EXPORT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HEADER = ["ID", "Task Name", "Category", "Description", "Created At", "Deadline", "Completed"]

MISSING = "N/A"


class ExportFormat(Enum):
    """Supported export file formats."""

    TEXT = "txt"
    CSV = "csv"

    @classmethod
    def for_path(cls, path: Path) -> "ExportFormat":
        """Pick a format from the file suffix; anything but .csv is text."""
        return cls.CSV if path.suffix.lower() == ".csv" else cls.TEXT


def _row(task: Task, date_format: str) -> list[str]:
    return [
        str(task.id) if task.id is not None else MISSING,
        task.name,
        task.category or MISSING,
        task.description or MISSING,
        format_datetime(task.created_at, date_format) or MISSING,
        format_datetime(task.deadline, date_format) or MISSING,
        "Yes" if task.completed else "No",
    ]


def write_text(tasks: Iterable[Task], stream: TextIO, date_format: str = EXPORT_DATE_FORMAT) -> int:
    """Write tasks as a ' | '-separated table. Returns the number of tasks written."""
    header = " | ".join(HEADER)
    stream.write(header + "\n")
    stream.write("-" * len(header) + "\n")
    count = 0
    for task in tasks:
        # Keep one task per line
        fields = [" ".join(value.splitlines()) for value in _row(task, date_format)]
        stream.write(" | ".join(fields) + "\n")
        count += 1
    return count


def write_csv(tasks: Iterable[Task], stream: TextIO, date_format: str = EXPORT_DATE_FORMAT) -> int:
    """Write tasks as CSV with a header row. Returns the number of tasks written."""
    writer = csv.writer(stream)
    writer.writerow(HEADER)
    count = 0
    for task in tasks:
        writer.writerow(_row(task, date_format))
        count += 1
    return count


def export_tasks(
    tasks: Iterable[Task],
    path: Path | str,
    export_format: ExportFormat | None = None,
    date_format: str = EXPORT_DATE_FORMAT,
) -> int:
    """Write a snapshot of tasks to a file.

    Args:
        tasks: Tasks to write, in the order given.
        path: Destination file; overwritten if it exists.
        export_format: Output format, inferred from the suffix when None.
        date_format: strftime format for timestamps.

    Returns:
        Number of tasks written.

    Raises:
        ExportError: If the file cannot be written. A partially written
            file may remain.
    """
    path = Path(path)
    if export_format is None:
        export_format = ExportFormat.for_path(path)

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            if export_format is ExportFormat.CSV:
                count = write_csv(tasks, f, date_format)
            else:
                count = write_text(tasks, f, date_format)
    except OSError as e:
        raise ExportError(f"Could not write {path}: {e}") from e

    logger.info("Exported %d task(s) to %s (%s)", count, path, export_format.value)
    return count
