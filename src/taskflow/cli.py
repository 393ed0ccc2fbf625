# src/taskflow/cli.py

"""
Command-line interface for taskflow.

This module:
- defines argument parsing and subcommands,
- delegates storage and domain logic to engine modules,
- keeps user interaction (prompts, confirmation) here.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from taskflow.config import ConfigError, Settings, load_settings
from taskflow.engine.filtering import filter_overdue, group_tasks_by_category, group_tasks_by_status
from taskflow.engine.model import (
    Category,
    Priority,
    SortCriterion,
    SortField,
    SortOrder,
    Status,
    TaskFilters,
    parse_constraint,
)
from taskflow.engine.ops import NewTaskRequest
from taskflow.engine.render import render_groups, render_stats, render_task_detail, render_task_table
from taskflow.engine.sorting import multi_sort, parse_criterion
from taskflow.engine.store import JsonStore, TaskBoard
from taskflow.engine.validate import ValidationError
from taskflow.logging_setup import setup_logging

logger = logging.getLogger(__name__)

_LIST_SORT_FIELDS = [
    SortField.CREATED_AT.value,
    SortField.DUE_DATE.value,
    SortField.PRIORITY.value,
    SortField.TITLE.value,
]


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_task_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("-d", "--description", type=str, help="Longer description")
    p.add_argument(
        "-p",
        "--priority",
        choices=[m.value for m in Priority],
        help="Priority (default: medium)",
    )
    p.add_argument(
        "-c",
        "--category",
        choices=[m.value for m in Category],
        help="Category (default: other)",
    )
    p.add_argument("--due", type=str, help="Due date, ISO-8601 (e.g. 2024-06-30 or 2024-06-30T17:00Z)")
    p.add_argument(
        "-t",
        "--tag",
        action="append",
        default=None,
        help="Tag (repeatable, order is kept)",
    )
    p.add_argument("--assignee", type=str, help="Assignee (e.g. an email address)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="taskflow: a local task-list manager with filtering, sorting and statistics.",
    )
    parser.add_argument(
        "--home",
        type=str,
        help="Data/config directory (default: ~/.taskflow or TASKFLOW_HOME env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_list = sub.add_parser("list", help="List tasks (filtered and sorted)")
    p_list.add_argument("-s", "--search", type=str, default="", help="Free-text search (title, description, tags)")
    p_list.add_argument(
        "-p",
        "--priority",
        choices=["all"] + [m.value for m in Priority],
        default="all",
        help="Only this priority",
    )
    p_list.add_argument(
        "-c",
        "--category",
        choices=["all"] + [m.value for m in Category],
        default="all",
        help="Only this category",
    )
    p_list.add_argument(
        "--status",
        choices=["all"] + [m.value for m in Status],
        default="all",
        help="Only this status",
    )
    p_list.add_argument("--sort-by", choices=_LIST_SORT_FIELDS, help="Sort field (default from config)")
    p_list.add_argument(
        "--order",
        choices=[m.value for m in SortOrder],
        help="Sort direction (default from config)",
    )
    p_list.add_argument(
        "--then",
        action="append",
        default=[],
        metavar="FIELD[:ORDER]",
        help=(
            "Tie-break criterion (repeatable). "
            f"Fields: {', '.join(m.value for m in SortField)}."
        ),
    )
    p_list.add_argument("--overdue", action="store_true", help="Only overdue tasks")
    p_list.add_argument("--group-by", choices=["category", "status"], help="Print one table per group")
    p_list.add_argument("--no-color", action="store_true", help="Disable coloured output")
    p_list.set_defaults(func=cmd_list)

    p_show = sub.add_parser("show", help="Show a single task (structured view)")
    p_show.add_argument("task_id", help="Task id")
    p_show.add_argument("--no-color", action="store_true", help="Disable coloured output")
    p_show.set_defaults(func=cmd_show)

    p_stats = sub.add_parser("stats", help="Show task statistics")
    p_stats.set_defaults(func=cmd_stats)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    p_add = sub.add_parser("add", help="Add a new task")
    p_add.add_argument("title", help="Task title")
    _add_task_fields(p_add)
    p_add.set_defaults(func=cmd_add)

    p_edit = sub.add_parser("edit", help="Change task fields")
    p_edit.add_argument("task_id", help="Task id")
    p_edit.add_argument("--title", type=str, help="New title")
    p_edit.add_argument(
        "--status",
        choices=[m.value for m in Status],
        help="New status",
    )
    _add_task_fields(p_edit)
    p_edit.add_argument("--no-due", action="store_true", help="Remove the due date")
    p_edit.set_defaults(func=cmd_edit)

    p_toggle = sub.add_parser("toggle", help="Advance status: todo -> in-progress -> done -> todo")
    p_toggle.add_argument("task_id", help="Task id")
    p_toggle.set_defaults(func=cmd_toggle)

    p_done = sub.add_parser("done", help="Mark task as done")
    p_done.add_argument("task_id", help="Task id")
    p_done.set_defaults(func=cmd_done)

    p_dup = sub.add_parser("dup", help="Duplicate a task")
    p_dup.add_argument("task_id", help="Task id")
    p_dup.set_defaults(func=cmd_dup)

    p_rm = sub.add_parser("rm", help="Delete a task")
    p_rm.add_argument("task_id", help="Task id")
    p_rm.set_defaults(func=cmd_rm)

    p_clear = sub.add_parser("clear", help="Delete all tasks")
    p_clear.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p_clear.set_defaults(func=cmd_clear)

    return parser


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _open_board(args: argparse.Namespace) -> TaskBoard:
    settings: Settings = args.settings
    return TaskBoard(JsonStore(settings.data_dir))


def _not_found(task_id: str) -> int:
    print(f"Task not found: {task_id}", file=sys.stderr)
    return 1


def _print_validation(e: ValidationError) -> int:
    for msg in e.errors:
        print(f"Error: {msg}", file=sys.stderr)
    return 1


def _field_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if getattr(args, "title", None) is not None:
        changes["title"] = args.title
    if getattr(args, "status", None) is not None:
        changes["status"] = args.status
    if args.description is not None:
        changes["description"] = args.description.strip() or None
    if args.priority is not None:
        changes["priority"] = args.priority
    if args.category is not None:
        changes["category"] = args.category
    if args.due is not None:
        changes["due_date"] = args.due
    if getattr(args, "no_due", False):
        changes["due_date"] = None
    if args.tag is not None:
        changes["tags"] = tuple(args.tag)
    if args.assignee is not None:
        changes["assignee"] = args.assignee.strip() or None
    return changes


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    settings: Settings = args.settings

    try:
        then = [parse_criterion(raw) for raw in args.then]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    filters = TaskFilters(
        search=args.search or "",
        priority=parse_constraint(Priority, args.priority),
        category=parse_constraint(Category, args.category),
        status=parse_constraint(Status, args.status),
        sort_by=SortField(args.sort_by) if args.sort_by else settings.sort_by,
        sort_order=SortOrder(args.order) if args.order else settings.sort_order,
    )

    board = _open_board(args)
    tasks = board.view(filters)
    if then:
        tasks = multi_sort(tasks, [SortCriterion(filters.sort_by, filters.sort_order), *then])
    if args.overdue:
        tasks = filter_overdue(tasks)

    color = not bool(args.no_color)
    if args.group_by == "category":
        render_groups(group_tasks_by_category(tasks), color=color)
    elif args.group_by == "status":
        render_groups(group_tasks_by_status(tasks), color=color)
    else:
        render_task_table(tasks, color=color)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    task = _open_board(args).get(args.task_id)
    if task is None:
        return _not_found(args.task_id)

    render_task_detail(task, color=not bool(args.no_color))
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    render_stats(_open_board(args).stats())
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    req = NewTaskRequest(
        title=args.title,
        description=args.description,
        priority=args.priority,
        category=args.category,
        due_date=args.due,
        tags=tuple(args.tag or ()),
        assignee=args.assignee,
    )

    try:
        task = _open_board(args).add(req)
    except ValidationError as e:
        return _print_validation(e)

    print(f"Added task {task.id}: {task.title}")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    changes = _field_changes(args)
    if not changes:
        print("Nothing to change.", file=sys.stderr)
        return 1

    try:
        task = _open_board(args).edit(args.task_id, **changes)
    except ValidationError as e:
        return _print_validation(e)

    if task is None:
        return _not_found(args.task_id)

    print(f"Updated task {task.id}: {task.title}")
    return 0


def cmd_toggle(args: argparse.Namespace) -> int:
    task = _open_board(args).toggle(args.task_id)
    if task is None:
        return _not_found(args.task_id)

    print(f"Task {task.id} is now {task.status.value}")
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    task = _open_board(args).edit(args.task_id, status=Status.DONE)
    if task is None:
        return _not_found(args.task_id)

    print(f"Marked task {task.id} as done.")
    return 0


def cmd_dup(args: argparse.Namespace) -> int:
    copy = _open_board(args).duplicate(args.task_id)
    if copy is None:
        return _not_found(args.task_id)

    print(f"Added task {copy.id}: {copy.title}")
    return 0


def cmd_rm(args: argparse.Namespace) -> int:
    if not _open_board(args).remove(args.task_id):
        return _not_found(args.task_id)

    print(f"Deleted task {args.task_id}")
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    if not args.yes:
        try:
            ans = input("Delete ALL tasks? [y/N] ").strip().lower()
        except EOFError:
            ans = ""
        if ans not in {"y", "yes"}:
            print("Aborted.")
            return 1

    count = _open_board(args).clear()
    print(f"Deleted {count} task(s).")
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(Path(args.home) if args.home else None)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        level=logging.DEBUG if args.verbose else settings.log_level,
        log_file=settings.log_file,
    )
    logger.debug("Using home directory %s", settings.home)

    args.settings = settings
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
