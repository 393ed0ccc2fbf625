# src/taskflow/engine/filtering.py

"""
Filter stages and the composed list-view pipeline.

Every stage is a pure list transform: it never mutates its input and a
no-op value (empty search, ALL) returns the tasks unchanged.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence, Union

from . import clock
from .model import ALL, Category, Priority, Status, Task, TaskFilters, Unconstrained
from .sorting import sort_tasks


# ---------------------------------------------------------------------
# Overdue detection
# ---------------------------------------------------------------------

def is_task_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    """
    True when the task has a due date, is not done, and that date is
    strictly before `now` (defaults to the clock).
    """
    if task.due_date is None or task.status is Status.DONE:
        return False
    moment = now if now is not None else clock.now()
    return moment > task.due_date


# ---------------------------------------------------------------------
# Individual stages
# ---------------------------------------------------------------------

def filter_tasks_by_search(tasks: Sequence[Task], query: str) -> list[Task]:
    """
    Keep tasks whose title, description or any single tag contains
    `query` (case-insensitive). A blank query keeps everything.
    """
    q = (query or "").strip().lower()
    if not q:
        return list(tasks)

    def matches(task: Task) -> bool:
        if q in task.title.lower():
            return True
        if task.description is not None and q in task.description.lower():
            return True
        return any(q in tag.lower() for tag in task.tags)

    return [t for t in tasks if matches(t)]


def filter_by_priority(
    tasks: Sequence[Task], priority: Union[Priority, Unconstrained]
) -> list[Task]:
    if priority == ALL:
        return list(tasks)
    return [t for t in tasks if t.priority == priority]


def filter_by_category(
    tasks: Sequence[Task], category: Union[Category, Unconstrained]
) -> list[Task]:
    if category == ALL:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def filter_by_status(
    tasks: Sequence[Task], status: Union[Status, Unconstrained]
) -> list[Task]:
    if status == ALL:
        return list(tasks)
    return [t for t in tasks if t.status == status]


def filter_overdue(tasks: Iterable[Task], now: Optional[datetime] = None) -> list[Task]:
    """
    Keep overdue tasks only.

    Not part of TaskFilters; meant for dashboards. The moment is read
    once so every task is judged against the same instant.
    """
    moment = now if now is not None else clock.now()
    return [t for t in tasks if is_task_overdue(t, moment)]


# ---------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------

def apply_filters(tasks: Sequence[Task], filters: TaskFilters) -> list[Task]:
    """
    Run the list-view pipeline described by `filters`.

    Steps, always in this order:
      1. free-text search (title, description, tags)
      2. priority
      3. category
      4. status
      5. sort (sort_by, sort_order)
    """
    result = filter_tasks_by_search(tasks, filters.search)
    result = filter_by_priority(result, filters.priority)
    result = filter_by_category(result, filters.category)
    result = filter_by_status(result, filters.status)
    return sort_tasks(result, filters.sort_by, filters.sort_order)


# ---------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------

def group_tasks_by_category(tasks: Iterable[Task]) -> dict[Category, list[Task]]:
    """Group by category; categories without tasks are omitted."""
    groups: dict[Category, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.category, []).append(task)
    return groups


def group_tasks_by_status(tasks: Iterable[Task]) -> dict[Status, list[Task]]:
    """Group by status; all three statuses are always present."""
    groups: dict[Status, list[Task]] = {s: [] for s in Status}
    for task in tasks:
        groups[task.status].append(task)
    return groups
