"""Task add/edit modal dialog."""

from dataclasses import replace

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label, TextArea

from home_chores.models import Task
from home_chores.timeutils import parse_user_datetime
from home_chores.utils import blank_to_none

DEADLINE_INPUT_FORMAT = "%Y-%m-%d %H:%M"


class SubmitOnEnterTextArea(TextArea):
    """TextArea that posts a Submitted message on Enter, uses Ctrl+Enter for newlines."""

    class Submitted(TextArea.Changed):
        """Posted when Enter is pressed without a modifier."""

        pass

    def _on_key(self, event) -> None:
        """Handle key events - Enter submits, Ctrl+Enter inserts newline."""
        if event.key == "enter":
            event.prevent_default()
            event.stop()
            self.post_message(self.Submitted(self))
        elif event.key == "ctrl+enter":
            event.prevent_default()
            event.stop()
            self.insert("\n")
        else:
            super()._on_key(event)


class TaskFormModal(ModalScreen[Task | None]):
    """Modal form for creating a task or editing every mutable field of one.

    Dismisses with the resulting Task (id and created_at carried over when
    editing) or None when cancelled.
    """

    CSS = """
    TaskFormModal {
        align: center middle;
        background: $background 60%;
    }

    TaskFormModal > Vertical {
        width: 70;
        height: auto;
        background: $surface;
        border: solid $primary-muted;
        padding: 1 2;
    }

    TaskFormModal #modal-title {
        text-style: bold;
        margin-bottom: 1;
    }

    TaskFormModal .field-label {
        color: $text-muted;
    }

    TaskFormModal Input {
        margin-bottom: 1;
    }

    TaskFormModal #description-area {
        height: 6;
    }

    TaskFormModal #form-error {
        color: $error;
        height: auto;
    }

    TaskFormModal #button-row {
        margin-top: 1;
        height: auto;
    }

    TaskFormModal Button {
        margin-right: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, task: Task | None = None) -> None:
        """Initialize the modal, optionally with a task to edit."""
        super().__init__()
        self._task = task

    @property
    def is_edit(self) -> bool:
        return self._task is not None

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        task = self._task
        deadline = task.deadline.strftime(DEADLINE_INPUT_FORMAT) if task and task.deadline else ""
        with Vertical():
            yield Label("Edit Task" if self.is_edit else "Add Task", id="modal-title")
            yield Label("Task Name:", classes="field-label")
            yield Input(value=task.name if task else "", id="name-input")
            yield Label("Category:", classes="field-label")
            yield Input(value=(task.category or "") if task else "", id="category-input")
            yield Label("Deadline (YYYY-MM-DD [HH:MM]):", classes="field-label")
            yield Input(value=deadline, placeholder="No deadline", id="deadline-input")
            yield Label("Description:", classes="field-label")
            yield SubmitOnEnterTextArea((task.description or "") if task else "", id="description-area")
            yield Checkbox("Completed", value=task.completed if task else False, id="completed-checkbox")
            yield Label("", id="form-error")
            with Horizontal(id="button-row"):
                yield Button("Save", variant="primary", id="save-btn")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the name input when the modal opens."""
        self.query_one("#name-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in any input saves the task."""
        self._save()

    def on_submit_on_enter_text_area_submitted(
        self, event: SubmitOnEnterTextArea.Submitted
    ) -> None:
        """Handle Enter key in description area - save the task."""
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-btn":
            self._save()
        elif event.button.id == "cancel-btn":
            self.dismiss(None)

    def action_cancel(self) -> None:
        """Handle Escape key - cancel editing."""
        self.dismiss(None)

    def _show_error(self, message: str) -> None:
        self.query_one("#form-error", Label).update(message)

    def _save(self) -> None:
        """Validate the form and dismiss with the resulting task."""
        name = self.query_one("#name-input", Input).value.strip()
        if not name:
            self._show_error("Task name is required.")
            self.query_one("#name-input", Input).focus()
            return
        try:
            deadline = parse_user_datetime(self.query_one("#deadline-input", Input).value)
        except ValueError as e:
            self._show_error(str(e))
            self.query_one("#deadline-input", Input).focus()
            return

        fields = {
            "name": name,
            "category": blank_to_none(self.query_one("#category-input", Input).value),
            "description": blank_to_none(self.query_one("#description-area", TextArea).text),
            "completed": self.query_one("#completed-checkbox", Checkbox).value,
            "deadline": deadline,
        }
        if self._task is not None:
            self.dismiss(replace(self._task, **fields))
        else:
            self.dismiss(Task(**fields))
