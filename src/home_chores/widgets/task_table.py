"""Task table and detail widgets."""

from rich.text import Text
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.message import Message
from textual.widgets import DataTable, Static

from home_chores.models import Task
from home_chores.timeutils import format_datetime
from home_chores.utils import truncate

COLUMNS = ("Done", "Name", "Category", "Description", "Created", "Deadline")


class TaskHighlighted(Message):
    """Message sent when the highlighted task changes."""

    def __init__(self, task: Task | None) -> None:
        self.task = task
        super().__init__()


class ToggleCompletedRequested(Message):
    """Message sent when the user toggles a task's completed flag."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class DeleteRequested(Message):
    """Message sent when the user asks to delete a task."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class EditRequested(Message):
    """Message sent when the user asks to edit a task."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class ViewRequested(Message):
    """Message sent when the user asks to view a task's details."""

    def __init__(self, task: Task) -> None:
        self.task = task
        super().__init__()


class TaskTable(DataTable):
    """DataTable listing tasks, one row per task keyed by task ID."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("space", "toggle_completed", "Toggle done", show=True),
        Binding("e", "edit", "Edit", show=True),
        Binding("v", "view", "View", show=True),
        Binding("d", "delete", "Delete", show=True),
    ]

    DEFAULT_CSS = """
    TaskTable {
        height: 1fr;
    }
    """

    def __init__(self, *, date_format: str = "%Y-%m-%d %H:%M", **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self.date_format = date_format
        self._tasks: dict[int, Task] = {}
        self.add_columns(*COLUMNS)

    def load_tasks(self, tasks: list[Task], select_task_id: int | None = None) -> None:
        """Replace the table contents with the given tasks.

        Args:
            tasks: Tasks to display, in order.
            select_task_id: If present in ``tasks``, move the cursor to it.
        """
        self.clear()
        self._tasks = {}
        for task in tasks:
            self._tasks[task.id] = task
            self.add_row(*self._cells(task), key=str(task.id))

        if select_task_id is not None and select_task_id in self._tasks:
            self.move_cursor(row=self.get_row_index(str(select_task_id)))
        self.post_message(TaskHighlighted(self.selected_task))

    def _cells(self, task: Task) -> tuple[Text, ...]:
        # Plain Text cells so brackets in user data are not read as markup
        values = (
            "[x]" if task.completed else "[ ]",
            truncate(task.name, 30),
            truncate(task.category, 15),
            truncate(task.description, 30),
            format_datetime(task.created_at, self.date_format),
            format_datetime(task.deadline, self.date_format) or "No deadline",
        )
        return tuple(Text(value) for value in values)

    @property
    def task_ids(self) -> list[int]:
        """IDs of the displayed tasks, in row order."""
        return list(self._tasks)

    @property
    def selected_task(self) -> Task | None:
        """The task under the cursor, or None if the table is empty."""
        if not self._tasks or self.row_count == 0:
            return None
        row = min(max(self.cursor_row, 0), self.row_count - 1)
        row_key = self.coordinate_to_cell_key(Coordinate(row, 0)).row_key
        return self._tasks.get(int(row_key.value))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        event.stop()
        task = self._tasks.get(int(event.row_key.value)) if event.row_key.value else None
        self.post_message(TaskHighlighted(task))

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter on a row opens its details."""
        event.stop()
        self.action_view()

    def action_toggle_completed(self) -> None:
        if (task := self.selected_task) is not None:
            self.post_message(ToggleCompletedRequested(task))

    def action_edit(self) -> None:
        if (task := self.selected_task) is not None:
            self.post_message(EditRequested(task))

    def action_view(self) -> None:
        if (task := self.selected_task) is not None:
            self.post_message(ViewRequested(task))

    def action_delete(self) -> None:
        if (task := self.selected_task) is not None:
            self.post_message(DeleteRequested(task))


def describe_task(task: Task | None, date_format: str) -> str:
    """Multi-line summary of a task for the detail pane and dialogs."""
    if task is None:
        return "No task selected."
    return "\n".join(
        [
            f"Task Name:   {task.name}",
            f"Category:    {task.category or '-'}",
            f"Description: {task.description or '-'}",
            f"Created At:  {format_datetime(task.created_at, date_format) or '-'}",
            f"Deadline:    {format_datetime(task.deadline, date_format) or 'No deadline'}",
            f"Completed:   {'Yes' if task.completed else 'No'}",
        ]
    )


class TaskDetail(Static):
    """Detail pane for the highlighted task."""

    DEFAULT_CSS = """
    TaskDetail {
        height: auto;
        min-height: 8;
        border-top: solid $primary-muted;
        padding: 0 1;
    }
    """

    def __init__(self, *, date_format: str = "%Y-%m-%d %H:%M", **kwargs) -> None:
        super().__init__("", markup=False, **kwargs)
        self.date_format = date_format

    def show_task(self, task: Task | None) -> None:
        self.update(describe_task(task, self.date_format))
