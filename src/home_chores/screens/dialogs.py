"""Dialog screens for Home Chores."""

from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

DIALOG_CSS = """
{name} {{
    align: center middle;
}}

{name} > Vertical {{
    width: 64;
    height: auto;
    border: thick $primary;
    background: $surface;
    padding: 1 2;
}}

{name} .dialog-title {{
    text-align: center;
    text-style: bold;
    margin-bottom: 1;
}}

{name} .dialog-message {{
    margin-bottom: 1;
}}

{name} .dialog-detail {{
    color: $text-muted;
    margin-bottom: 1;
}}

{name} Center {{
    margin-top: 1;
}}

{name} Button {{
    margin: 0 1;
}}
"""


class CreateDatabaseDialog(ModalScreen[bool]):
    """Modal dialog prompting user to create the database."""

    CSS = DIALOG_CSS.format(name="CreateDatabaseDialog")

    BINDINGS = [
        ("enter", "create", "Create Database"),
        ("escape", "exit_app", "Exit"),
    ]

    def __init__(self, db_path: Path) -> None:
        """Initialize dialog with database path."""
        super().__init__()
        self.db_path = db_path

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        with Vertical():
            yield Static("Database Not Found", classes="dialog-title")
            yield Label(
                "No tasks database was found. Would you like to create one?",
                classes="dialog-message",
            )
            yield Static(f"Path: {self.db_path}", classes="dialog-detail", markup=False)
            with Center():
                yield Button("Create Database", variant="primary", id="create")
                yield Button("Exit", variant="default", id="exit")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        self.dismiss(event.button.id == "create")

    def action_create(self) -> None:
        """Handle Enter key - create database."""
        self.dismiss(True)

    def action_exit_app(self) -> None:
        """Handle Escape key - exit application."""
        self.dismiss(False)


class ConfirmDialog(ModalScreen[bool]):
    """Yes/no confirmation, used before deleting a task."""

    CSS = DIALOG_CSS.format(name="ConfirmDialog")

    BINDINGS = [
        ("y", "confirm", "Yes"),
        ("n", "cancel", "No"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, message: str, detail: str = "") -> None:
        super().__init__()
        self._title = title
        self._message = message
        self._detail = detail

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self._title, classes="dialog-title", markup=False)
            yield Label(self._message, classes="dialog-message", markup=False)
            if self._detail:
                yield Static(self._detail, classes="dialog-detail", markup=False)
            with Center():
                yield Button("Yes (y)", variant="error", id="confirm")
                yield Button("No (n)", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#cancel", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class MessageDialog(ModalScreen[None]):
    """Read-only information dialog, used for task details."""

    CSS = DIALOG_CSS.format(name="MessageDialog")

    BINDINGS = [
        ("escape", "close", "Close"),
        ("enter", "close", "Close"),
    ]

    def __init__(self, title: str, message: str) -> None:
        super().__init__()
        self._title = title
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self._title, classes="dialog-title", markup=False)
            yield Static(self._message, classes="dialog-message", markup=False)
            with Center():
                yield Button("Close", variant="primary", id="close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class ExportDialog(ModalScreen[Path | None]):
    """Asks for the file to export tasks to.

    A ``.csv`` suffix selects CSV; anything else is written as plain text.
    """

    CSS = DIALOG_CSS.format(name="ExportDialog")

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, default_path: Path) -> None:
        super().__init__()
        self.default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Export Tasks", classes="dialog-title")
            yield Label(
                "File to write (.csv for CSV, anything else for text):",
                classes="dialog-message",
            )
            yield Input(value=str(self.default_path), id="export-path")
            with Center():
                yield Button("Export", variant="primary", id="export")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#export-path", Input).focus()

    def _submit(self) -> None:
        value = self.query_one("#export-path", Input).value.strip()
        if not value:
            return
        self.dismiss(Path(value).expanduser())

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "export":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
