"""CLI commands for Home Chores."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from home_chores.config import Config, load_config
from home_chores.errors import HomeChoresError
from home_chores.export import ExportFormat, export_tasks
from home_chores.logging_setup import setup_logging
from home_chores.models import Outcome, Task
from home_chores.service import TaskService
from home_chores.timeutils import format_datetime, parse_user_datetime
from home_chores.utils import blank_to_none, parse_task_title, truncate

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="home-chores",
        description="Home Chores - a task manager. Run without a command to open the UI.",
    )
    parser.add_argument("--db", type=Path, dest="db_path", help="Path to the tasks database")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    subparsers = parser.add_subparsers(dest="command")

    # ls command
    ls_parser = subparsers.add_parser("ls", help="List all tasks, newest first")
    ls_parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output as JSON"
    )

    # show command
    show_parser = subparsers.add_parser("show", help="Show one task")
    show_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to show"
    )
    show_parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output as JSON"
    )

    # add command
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("name", help="Task name; a trailing '#tag' sets the category")
    add_parser.add_argument("--category", type=str, help="Category")
    add_parser.add_argument("--description", type=str, help="Description")
    add_parser.add_argument("--deadline", type=str, help="YYYY-MM-DD or 'YYYY-MM-DD HH:MM'")
    add_parser.add_argument(
        "--completed", action="store_true", help="Create the task already completed"
    )

    # edit command
    edit_parser = subparsers.add_parser("edit", help="Edit a task")
    edit_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to edit"
    )
    edit_parser.add_argument("--name", type=str, help="New name for the task")
    edit_parser.add_argument("--description", type=str, help="New description")
    edit_parser.add_argument("--category", type=str, help="New category")
    deadline_group = edit_parser.add_mutually_exclusive_group()
    deadline_group.add_argument("--deadline", type=str, help="New deadline")
    deadline_group.add_argument(
        "--clear-deadline", action="store_true", help="Remove the deadline"
    )

    # mark command
    mark_parser = subparsers.add_parser("mark", help="Mark a task complete/incomplete")
    mark_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to mark"
    )
    mark_group = mark_parser.add_mutually_exclusive_group(required=True)
    mark_group.add_argument(
        "--complete", action="store_true", help="Mark task as completed"
    )
    mark_group.add_argument(
        "--incomplete", action="store_true", help="Mark task as not completed"
    )

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Delete a task")
    rm_parser.add_argument(
        "--id", type=int, required=True, dest="task_id", help="Task ID to delete"
    )

    # search command
    search_parser = subparsers.add_parser("search", help="Search names and descriptions")
    search_parser.add_argument("text", help="Text to look for (case-insensitive)")
    search_parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output as JSON"
    )

    # export command
    export_parser = subparsers.add_parser("export", help="Write all tasks to a file")
    export_parser.add_argument("path", type=Path, help="Destination file")
    export_parser.add_argument(
        "--format",
        choices=[f.value for f in ExportFormat],
        dest="export_format",
        help="Output format (default: from the file suffix)",
    )

    # reset-db command
    reset_parser = subparsers.add_parser(
        "reset-db", help="Drop and recreate the tasks table (deletes everything)"
    )
    reset_parser.add_argument(
        "--yes", action="store_true", help="Confirm that all tasks should be deleted"
    )

    return parser


def get_service(db_path: Path, create: bool = False) -> TaskService | None:
    """Open the task service if the database exists (or ``create`` is set)."""
    if not create and not db_path.exists():
        print(
            f"Error: No database found at {db_path}.\n"
            "Run 'home-chores' to create a database first.",
            file=sys.stderr,
        )
        return None
    try:
        return TaskService.open(db_path)
    except HomeChoresError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def task_to_dict(task: Task) -> dict[str, Any]:
    """JSON-friendly representation of a task."""
    return {
        "id": task.id,
        "name": task.name,
        "category": task.category,
        "description": task.description,
        "completed": task.completed,
        "created_at": task.created_at.isoformat() if task.created_at else None,
        "deadline": task.deadline.isoformat() if task.deadline else None,
    }


def print_tasks(tasks: list[Task], json_output: bool, date_format: str) -> None:
    """Print tasks as JSON or as a table."""
    if json_output:
        print(json.dumps([task_to_dict(t) for t in tasks], indent=2))
        return

    print(f"{'ID':<4} {'DONE':<5} {'CATEGORY':<12} {'DEADLINE':<17} NAME")
    for task in tasks:
        done = "[x]" if task.completed else "[ ]"
        category = truncate(task.category, 10) or "-"
        deadline = format_datetime(task.deadline, date_format) or "-"
        print(f"{task.id:<4} {done:<5} {category:<12} {deadline:<17} {task.name}")


def print_task(task: Task, date_format: str) -> None:
    """Print every field of one task."""
    print(f"ID:          {task.id}")
    print(f"Name:        {task.name}")
    print(f"Category:    {task.category or '-'}")
    print(f"Description: {task.description or '-'}")
    print(f"Created At:  {format_datetime(task.created_at, date_format) or '-'}")
    print(f"Deadline:    {format_datetime(task.deadline, date_format) or 'No deadline'}")
    print(f"Completed:   {'Yes' if task.completed else 'No'}")


def _parse_deadline(value: str | None) -> tuple[bool, Any]:
    """Return (ok, deadline), printing an error when the value is invalid."""
    try:
        return True, parse_user_datetime(value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False, None


def cmd_ls(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """List all tasks."""
    print_tasks(service.get_all(), args.json_output, config.date_format)
    return 0


def cmd_show(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Show a single task."""
    task = service.get_by_id(args.task_id)
    if task is None:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    if args.json_output:
        print(json.dumps(task_to_dict(task), indent=2))
    else:
        print_task(task, config.date_format)
    return 0


def cmd_add(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Add a new task."""
    name, tag_category = parse_task_title(args.name)
    if not name:
        print("Error: Task name is required.", file=sys.stderr)
        return 1
    ok, deadline = _parse_deadline(args.deadline)
    if not ok:
        return 1

    category = blank_to_none(args.category) if args.category is not None else tag_category
    task = Task(
        name=name,
        category=category,
        description=blank_to_none(args.description),
        completed=args.completed,
        deadline=deadline,
    )
    new_id = service.add(task)
    print(f"Added task {new_id}.")
    return 0


def cmd_edit(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Edit a task's fields, keeping the ones not given."""
    if (
        args.name is None
        and args.description is None
        and args.category is None
        and args.deadline is None
        and not args.clear_deadline
    ):
        print(
            "Error: At least one of --name, --description, --category, "
            "--deadline or --clear-deadline is required.",
            file=sys.stderr,
        )
        return 1

    task = service.get_by_id(args.task_id)
    if task is None:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1

    deadline = task.deadline
    if args.clear_deadline:
        deadline = None
    elif args.deadline is not None:
        ok, deadline = _parse_deadline(args.deadline)
        if not ok:
            return 1

    updated = Task(
        id=task.id,
        name=args.name.strip() if args.name is not None else task.name,
        category=blank_to_none(args.category) if args.category is not None else task.category,
        description=(
            blank_to_none(args.description) if args.description is not None else task.description
        ),
        completed=task.completed,
        created_at=task.created_at,
        deadline=deadline,
    )
    if service.update(updated) is Outcome.NOT_FOUND:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Updated task {args.task_id}.")
    return 0


def cmd_mark(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Mark a task as complete or incomplete."""
    if args.complete:
        outcome = service.mark_completed(args.task_id)
        status_word = "completed"
    else:
        outcome = service.mark_incomplete(args.task_id)
        status_word = "incomplete"

    if outcome is Outcome.NOT_FOUND:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Marked task {args.task_id} as {status_word}.")
    return 0


def cmd_rm(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Delete a task."""
    if service.delete(args.task_id) is Outcome.NOT_FOUND:
        print(f"Error: Task with ID {args.task_id} not found.", file=sys.stderr)
        return 1
    print(f"Deleted task {args.task_id}.")
    return 0


def cmd_search(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Search tasks by name or description."""
    print_tasks(service.search(args.text), args.json_output, config.date_format)
    return 0


def cmd_export(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Export all tasks to a file."""
    export_format = ExportFormat(args.export_format) if args.export_format else None
    count = export_tasks(service.get_all(), args.path, export_format)
    print(f"Exported {count} task(s) to {args.path}.")
    return 0


def cmd_reset_db(args: argparse.Namespace, service: TaskService, config: Config) -> int:
    """Drop and recreate the tasks table."""
    if not args.yes:
        print("Error: reset-db deletes every task; pass --yes to confirm.", file=sys.stderr)
        return 1
    schema = service.repository.schema
    schema.drop_table()
    schema.ensure_schema()
    print("Tasks table reset.")
    return 0


COMMANDS = {
    "ls": cmd_ls,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "mark": cmd_mark,
    "rm": cmd_rm,
    "search": cmd_search,
    "export": cmd_export,
    "reset-db": cmd_reset_db,
}


def run_cli(
    argv: list[str] | None = None,
    config: Config | None = None,
    configure_logging: bool = False,
) -> int | None:
    """Parse arguments and dispatch to command handlers.

    Returns:
        Exit code (0 for success, non-zero for error) if a command was handled,
        None if no command was specified (should launch the UI).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if config is None:
        config = load_config()
    if args.db_path is not None:
        config.database_path = args.db_path

    if args.command is None:
        return None

    if configure_logging:
        setup_logging(
            log_dir=config.log_dir,
            console_level=logging.DEBUG if args.verbose else logging.WARNING,
            file_level=getattr(logging, config.log_level),
        )

    handler = COMMANDS.get(args.command)
    if handler is None:
        return None

    service = get_service(config.database_path, create=args.command == "add")
    if service is None:
        return 1
    try:
        return handler(args, service, config)
    except HomeChoresError as e:
        logger.info("Command '%s' failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        service.close()
