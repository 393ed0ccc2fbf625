# src/taskflow/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- the task table (list / overdue),
- grouped task tables,
- structured task detail view (show),
- the statistics panel (stats).

It is presentation-only: it must not mutate task state or touch storage.
"""

from __future__ import annotations

import re
import shutil
import sys
import textwrap
from datetime import datetime
from typing import Mapping, Optional, Sequence

from . import clock
from .dates import format_date, format_relative_date
from .filtering import is_task_overdue
from .model import Category, Priority, Status, Task, TaskStats


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_RESET = "\033[0m"
_DIM = "\033[90m"
_RED = "\033[31m"

_STATUS_COLOR = {
    Status.TODO: "\033[34m",         # blue
    Status.IN_PROGRESS: "\033[33m",  # yellow
    Status.DONE: "\033[32m",         # green
}

_PRIORITY_MARK = {
    Priority.LOW: "·",
    Priority.MEDIUM: "!",
    Priority.HIGH: "!!",
    Priority.CRITICAL: "!!!",
}


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _visible_len(s: str) -> int:
    """Return string length without ANSI colour escapes."""
    return len(_ANSI_RE.sub("", s))


def _paint(s: str, code: str, color: bool) -> str:
    if color and code and _supports_color():
        return f"{code}{s}{_RESET}"
    return s


def _due_label(task: Task, now: datetime, color: bool) -> str:
    if task.due_date is None:
        return ""
    label = format_relative_date(task.due_date, now)
    if is_task_overdue(task, now):
        return _paint(f"{label} (overdue)", _RED, color)
    return label


# ---------------------------------------------------------------------
# Task table
# ---------------------------------------------------------------------

def render_task_table(tasks: Sequence[Task], *, color: bool = True, now: Optional[datetime] = None) -> None:
    """
    Print one line per task, in the given order.

    Columns: status, priority mark, category, due, title, id.
    """
    if not tasks:
        print("No tasks found.")
        return

    moment = now if now is not None else clock.now()

    print(f"{'STATUS':<12} {'P':<3} {'CATEGORY':<9} {'DUE':<24} TITLE")
    print("-" * 72)

    for task in tasks:
        status = task.status.value.ljust(12)
        status = _paint(status, _STATUS_COLOR.get(task.status, ""), color)
        mark = _PRIORITY_MARK[task.priority]
        due = _due_label(task, moment, color)
        due = due + " " * max(0, 24 - _visible_len(due))
        tags = f" [{', '.join(task.tags)}]" if task.tags else ""
        ident = _paint(f"id: {task.id}", _DIM, color)
        print(f"{status} {mark:<3} {task.category.value:<9} {due} {task.title}{tags}  {ident}")


def render_groups(groups: Mapping[object, Sequence[Task]], *, color: bool = True) -> None:
    """Print a heading and a task table per group, skipping empty groups."""
    moment = clock.now()
    for key, tasks in groups.items():
        if not tasks:
            continue
        name = getattr(key, "value", str(key))
        sep = "=" * 6
        print(f"{sep} {name} ({len(tasks)}) {sep}")
        render_task_table(tasks, color=color, now=moment)
        print()


# ---------------------------------------------------------------------
# Task detail view (show)
# ---------------------------------------------------------------------

def render_task_detail(task: Task, *, color: bool = True) -> None:
    """
    Render a structured task detail view.

    Width is capped at 80 characters.
    """
    width = min(80, shutil.get_terminal_size(fallback=(80, 24)).columns)
    inner_w = max(20, width - 4)  # borders + padding
    now = clock.now()

    def wrap_lines(s: str, *, indent: str = "") -> list[str]:
        if not s:
            return []

        out: list[str] = []
        for ln in s.rstrip().splitlines() or [""]:
            if not ln.strip():
                out.append(indent.rstrip())
                continue

            wrapped = textwrap.wrap(
                ln,
                width=inner_w - len(indent),
                break_long_words=False,
                break_on_hyphens=False,
            ) or [""]

            out.extend([indent + x for x in wrapped])

        return out

    def box_rule(ch: str = "-") -> None:
        print(f"+{ch * (width - 2)}+")

    def box_line(content: str = "") -> None:
        raw = content[:inner_w]
        pad = inner_w - _visible_len(raw)
        if pad > 0:
            raw = raw + (" " * pad)
        print(f"| {raw} |")

    status_text = _paint(task.status.value, _STATUS_COLOR.get(task.status, ""), color)

    print()
    box_rule("=")
    box_line(f"{task.title} ({status_text})")
    box_rule("=")

    box_line(f"id: {task.id}")
    box_line(f"priority: {task.priority.value}")
    box_line(f"category: {task.category.value}")
    box_line(f"created: {format_date(task.created_at)}")
    box_line(f"updated: {format_date(task.updated_at)}")
    if task.due_date is not None:
        box_line(f"due: {format_date(task.due_date)} ({_due_label(task, now, color)})")
    if task.assignee:
        box_line(f"assignee: {task.assignee}")
    if task.tags:
        box_line(f"tags: {', '.join(task.tags)}")

    if task.description and task.description.strip():
        box_rule()
        box_line("Description:")
        for ln in wrap_lines(task.description, indent="  "):
            box_line(ln)

    box_rule("=")
    print()


# ---------------------------------------------------------------------
# Statistics panel
# ---------------------------------------------------------------------

def _bar(count: int, total: int, width: int = 20) -> str:
    if total <= 0:
        return ""
    filled = round(count / total * width)
    return "#" * filled + "." * (width - filled)


def render_stats(stats: TaskStats) -> None:
    """Print totals, completion rate and per-field breakdowns."""
    print(f"Total: {stats.total}")
    print(f"Completed: {stats.by_status[Status.DONE]} ({stats.completion_rate}%)")
    print(f"Overdue: {stats.overdue}")

    sections = (
        ("Status", [(s.value, stats.by_status[s]) for s in Status]),
        ("Priority", [(p.value, stats.by_priority[p]) for p in Priority]),
        ("Category", [(c.value, stats.by_category[c]) for c in Category]),
    )
    for title, rows in sections:
        print()
        print(f"{title}:")
        for name, count in rows:
            print(f"  {name:<12} {count:>4}  {_bar(count, stats.total)}")
