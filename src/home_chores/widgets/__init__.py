"""Widgets for Home Chores."""

from home_chores.widgets.task_table import TaskDetail, TaskTable

__all__ = ["TaskDetail", "TaskTable"]
