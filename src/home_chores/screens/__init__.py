"""Screen modules for Home Chores."""

from home_chores.screens.dialogs import (
    ConfirmDialog,
    CreateDatabaseDialog,
    ExportDialog,
    MessageDialog,
)
from home_chores.screens.task_form import TaskFormModal

__all__ = [
    "ConfirmDialog",
    "CreateDatabaseDialog",
    "ExportDialog",
    "MessageDialog",
    "TaskFormModal",
]
