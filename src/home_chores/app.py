"""Main application module."""

import logging
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from home_chores.cli import run_cli
from home_chores.config import Config, load_config
from home_chores.errors import HomeChoresError
from home_chores.export import export_tasks
from home_chores.logging_setup import setup_logging
from home_chores.models import Outcome, Task
from home_chores.screens import (
    ConfirmDialog,
    CreateDatabaseDialog,
    ExportDialog,
    MessageDialog,
    TaskFormModal,
)
from home_chores.service import TaskService
from home_chores.widgets import TaskDetail, TaskTable
from home_chores.widgets.task_table import (
    DeleteRequested,
    EditRequested,
    TaskHighlighted,
    ToggleCompletedRequested,
    ViewRequested,
    describe_task,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "tasks.txt"


class HomeChoresApp(App):
    """A Textual app for managing household tasks."""

    TITLE = "Home Chores"

    search_mode: reactive[bool] = reactive(False)
    search_term: reactive[str] = reactive("")

    BINDINGS = [
        ("a", "add_task", "Add task"),
        ("/", "start_search", "Search"),
        ("x", "export", "Export"),
        ("r", "reload", "Reload"),
        ("escape", "cancel_input", "Cancel"),
        ("D", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    #status-bar {
        height: 1;
        width: 100%;
        background: $surface;
        color: $warning;
        padding: 0 1;
    }

    #status-bar.hidden {
        display: none;
    }

    #search-container {
        height: auto;
        width: 100%;
    }

    #search-container.hidden {
        display: none;
    }
    """

    def __init__(self, config: Config | None = None) -> None:
        """Initialize the application."""
        super().__init__()
        self._config = config if config is not None else load_config()
        self.db_path = self._config.database_path
        self.service: TaskService | None = None
        self._tasks: list[Task] = []

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the tasks currently displayed."""
        return list(self._tasks)

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        yield TaskTable(id="task-table", date_format=self._config.date_format)
        yield TaskDetail(id="task-detail", date_format=self._config.date_format)
        yield Static("", id="status-bar", classes="hidden", markup=False)
        with Vertical(id="search-container", classes="hidden"):
            yield Input(placeholder="Search name or description", id="search-input")
        yield Footer()

    def _apply_theme(self) -> None:
        """Apply the configured theme, keeping the default if it is unknown."""
        if self._config.theme in self.available_themes:
            self.theme = self._config.theme
        else:
            logger.warning("Unknown theme '%s', using default", self._config.theme)

    def on_mount(self) -> None:
        """Handle application mount - check for database."""
        self._apply_theme()

        if not self.db_path.exists():
            self.push_screen(CreateDatabaseDialog(self.db_path), self._on_dialog_result)
        else:
            self._open_service()

    def on_unmount(self) -> None:
        if self.service is not None:
            self.service.close()
            self.service = None

    def _on_dialog_result(self, result: bool | None) -> None:
        """Handle the result from CreateDatabaseDialog."""
        if result:
            self._open_service()
        else:
            self.exit()

    def _open_service(self) -> None:
        """Open the database; schema failures are fatal."""
        try:
            self.service = TaskService.open(self.db_path)
        except HomeChoresError as e:
            logger.exception("Cannot open database %s", self.db_path)
            self.notify(f"Failed to open database: {e}", severity="error")
            self.exit(return_code=1)
            return
        self._load_tasks()

    def _load_tasks(self, select_task_id: int | None = None) -> None:
        """Re-query tasks and redraw the table.

        Args:
            select_task_id: If provided, select this task after loading.
        """
        if self.service is None:
            return
        try:
            if self.search_term:
                tasks = self.service.search(self.search_term)
            else:
                tasks = self.service.get_all()
        except HomeChoresError as e:
            self.notify(f"Error loading tasks: {e}", severity="error")
            return
        self._tasks = tasks
        table = self.query_one(TaskTable)
        if select_task_id is None:
            selected = table.selected_task
            select_task_id = selected.id if selected else None
        table.load_tasks(tasks, select_task_id=select_task_id)
        self.sub_title = f"{len(tasks)} task(s)"

    def _focus_table(self) -> None:
        self.query_one(TaskTable).focus()

    # Adding and editing

    def action_add_task(self) -> None:
        """Open the add task form."""
        if self.service is None:
            return
        self.push_screen(TaskFormModal(), self._on_task_added)

    def _on_task_added(self, task: Task | None) -> None:
        if task is None or self.service is None:
            return
        try:
            new_id = self.service.add(task)
        except HomeChoresError as e:
            self.notify(f"Error adding task: {e}", severity="error")
            return
        self._load_tasks(select_task_id=new_id)
        self.notify(f"Task added: {task.name}")

    def on_edit_requested(self, event: EditRequested) -> None:
        """Open the edit form for the highlighted task."""
        self.push_screen(TaskFormModal(event.task), self._on_task_edited)

    def _on_task_edited(self, task: Task | None) -> None:
        if task is None or self.service is None:
            return
        try:
            outcome = self.service.update(task)
        except HomeChoresError as e:
            self.notify(f"Error updating task: {e}", severity="error")
            return
        if outcome is Outcome.NOT_FOUND:
            self.notify("The task no longer exists.", severity="warning")
        self._load_tasks(select_task_id=task.id)

    def on_view_requested(self, event: ViewRequested) -> None:
        """Show every field of the highlighted task."""
        self.push_screen(
            MessageDialog("Task Details", describe_task(event.task, self._config.date_format))
        )

    def on_task_highlighted(self, event: TaskHighlighted) -> None:
        self.query_one(TaskDetail).show_task(event.task)

    # Completion and deletion

    def on_toggle_completed_requested(self, event: ToggleCompletedRequested) -> None:
        """Flip the completed flag of the highlighted task."""
        if self.service is None:
            return
        try:
            outcome = self.service.toggle_completed(event.task.id)
        except HomeChoresError as e:
            self.notify(f"Error updating task: {e}", severity="error")
            return
        if outcome is Outcome.NOT_FOUND:
            self.notify("The task no longer exists.", severity="warning")
        self._load_tasks(select_task_id=event.task.id)

    def on_delete_requested(self, event: DeleteRequested) -> None:
        """Ask for confirmation, then delete the highlighted task."""
        task = event.task

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self._delete_task(task)

        self.push_screen(
            ConfirmDialog(
                "Confirm Deletion",
                "Are you sure you want to delete this task?",
                f"Task: {task.name}\nDescription: {task.description or '-'}",
            ),
            on_confirm,
        )

    def _delete_task(self, task: Task) -> None:
        if self.service is None:
            return
        # Find the next task to select after deletion
        task_ids = self.query_one(TaskTable).task_ids
        next_task_id: int | None = None
        if task.id in task_ids:
            idx = task_ids.index(task.id)
            if idx < len(task_ids) - 1:
                next_task_id = task_ids[idx + 1]
            elif idx > 0:
                next_task_id = task_ids[idx - 1]

        try:
            outcome = self.service.delete(task.id)
        except HomeChoresError as e:
            self.notify(f"Error deleting task: {e}", severity="error")
            return
        if outcome is Outcome.NOT_FOUND:
            self.notify("The task was already deleted.", severity="warning")
        else:
            self.notify("Task deleted.")
        self._load_tasks(select_task_id=next_task_id)

    # Search

    def action_start_search(self) -> None:
        """Show the search input."""
        if self.search_mode:
            return
        self.search_mode = True
        self.query_one("#status-bar", Static).add_class("hidden")
        self.query_one("#search-container", Vertical).remove_class("hidden")
        search_input = self.query_one("#search-input", Input)
        search_input.value = self.search_term
        search_input.focus()

    def _exit_search_mode(self) -> None:
        """Hide the search input, keeping the current filter."""
        self.search_mode = False
        self.query_one("#search-container", Vertical).add_class("hidden")
        self._update_search_status_bar()
        self._focus_table()

    def _update_search_status_bar(self) -> None:
        """Update status bar to show current search term."""
        status_bar = self.query_one("#status-bar", Static)
        if self.search_term:
            status_bar.update(f"/{self.search_term}")
            status_bar.remove_class("hidden")
        else:
            status_bar.update("")
            status_bar.add_class("hidden")

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter live while typing a search."""
        if event.input.id == "search-input" and self.search_mode:
            self.search_term = event.value
            self._load_tasks()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-input":
            self.search_term = event.value
            self._exit_search_mode()
            self._load_tasks()

    def action_cancel_input(self) -> None:
        """Leave search mode, or clear the active search."""
        if self.search_mode:
            self._exit_search_mode()
            return
        if self.search_term:
            self.search_term = ""
            self._update_search_status_bar()
            self._load_tasks()

    # Export and misc

    def action_export(self) -> None:
        """Ask for a file and export the displayed tasks to it."""
        if self.service is None:
            return
        default_path = self._config.export_dir / DEFAULT_EXPORT_NAME
        self.push_screen(ExportDialog(default_path), self._on_export_path)

    def _on_export_path(self, path: Path | None) -> None:
        if path is None:
            return
        try:
            count = export_tasks(self.tasks, path)
        except HomeChoresError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported {count} task(s) to {path}")

    def action_reload(self) -> None:
        self._load_tasks()

    def action_toggle_dark(self) -> None:
        """Toggle dark mode."""
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"


def main() -> None:
    """Run a CLI command, or the application when none is given."""
    config = load_config()
    exit_code = run_cli(sys.argv[1:], config=config, configure_logging=True)
    if exit_code is not None:
        sys.exit(exit_code)

    setup_logging(
        log_dir=config.log_dir,
        console_level=None,
        file_level=getattr(logging, config.log_level),
    )
    app = HomeChoresApp(config)
    app.run()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
