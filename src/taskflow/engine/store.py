# src/taskflow/engine/store.py

"""
Durable storage and the session container.

This module contains:
- a JSON key-value store (one file per key) with default-value fallback,
- serialisation of Task objects to plain JSON records,
- TaskBoard: the single owner of the "current collection" for a session.

The engine functions stay pure; TaskBoard is where reading, computing and
storing a new collection happen as one serialised step.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

from .dates import to_iso
from .filtering import apply_filters, filter_overdue
from .model import Task, TaskFilters, TaskStats
from .ops import NewTaskRequest, create_task, duplicate_task, find_task, toggle_task_status, update_task
from .parse import ParseError, task_from_dict
from .stats import calculate_stats
from .validate import validate_task_payload, validate_update_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")

TASKS_KEY = "taskflow_tasks"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


# ---------------------------------------------------------------------
# Key-value store
# ---------------------------------------------------------------------

class JsonStore:
    """
    Key-value persistence backed by `<root>/<key>.json` files.

    Reads never fail: a missing or unreadable entry yields the caller's
    default. Writes are atomic (temp file + rename) and propagate OSError.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str, default: T) -> Union[Any, T]:
        path = self._path(key)
        if not path.is_file():
            return default

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Cannot read %s, falling back to default: %s", path, e)
            return default

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(value, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        os.replace(tmp, path)
        logger.debug("Wrote %s", path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


# ---------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------

def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "category": task.category.value,
        "status": task.status.value,
        "due_date": to_iso(task.due_date) if task.due_date else None,
        "created_at": to_iso(task.created_at),
        "updated_at": to_iso(task.updated_at),
        "tags": list(task.tags),
        "assignee": task.assignee,
    }


def tasks_from_records(records: Any, *, key: str = TASKS_KEY) -> list[Task]:
    """
    Parse a stored collection.

    Non-fatal: malformed records are logged and skipped; a non-list value
    yields an empty collection.
    """
    if not isinstance(records, list):
        logger.warning("Stored value for %s is not a list; ignoring it", key)
        return []

    tasks: list[Task] = []
    for i, record in enumerate(records):
        try:
            tasks.append(task_from_dict(record, path=f"{key}[{i}]"))
        except ParseError as e:
            logger.warning("Skipping stored task: %s", e)
    return tasks


# ---------------------------------------------------------------------
# Session container
# ---------------------------------------------------------------------

class TaskBoard:
    """
    Owner of the current task collection for one session.

    Each mutation reads the collection, computes a new one with the pure
    helpers and stores it, all under one lock. Id-keyed operations return
    None / False for unknown ids.
    """

    def __init__(
        self,
        store: JsonStore,
        *,
        key: str = TASKS_KEY,
        initial: Sequence[Task] = (),
    ) -> None:
        self._store = store
        self._key = key
        self._lock = threading.Lock()
        self._tasks: list[Task] = self._load(initial)

    def _load(self, initial: Sequence[Task]) -> list[Task]:
        records = self._store.get(self._key, None)
        if records is None:
            return list(initial)
        return tasks_from_records(records, key=self._key)

    def _commit(self, mutate: Callable[[list[Task]], tuple[Optional[list[Task]], T]]) -> T:
        """
        Run `mutate` on a copy of the collection under the lock.

        `mutate` returns (new_tasks, result); new_tasks None means nothing
        changed and the store is not written.
        """
        with self._lock:
            new_tasks, result = mutate(list(self._tasks))
            if new_tasks is None:
                return result
            self._store.set(self._key, [task_to_dict(t) for t in new_tasks])
            self._tasks = new_tasks
            return result

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        return find_task(self._tasks, task_id)

    def view(self, filters: TaskFilters) -> list[Task]:
        return apply_filters(self._tasks, filters)

    def stats(self) -> TaskStats:
        return calculate_stats(self._tasks)

    def overdue(self) -> list[Task]:
        return filter_overdue(self._tasks)

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def add(self, request: Union[NewTaskRequest, dict[str, Any]]) -> Task:
        """
        Validate and create a task; it goes to the front of the collection.

        Raises ValidationError when the payload is rejected.
        """
        req = request if isinstance(request, NewTaskRequest) else NewTaskRequest.from_mapping(request)
        validate_task_payload(req.as_payload()).raise_for_issues()

        task = create_task(req)

        def mutate(tasks: list[Task]) -> tuple[list[Task], Task]:
            return [task, *tasks], task

        self._commit(mutate)
        logger.info("Added task %s", task.id)
        return task

    def edit(self, task_id: str, **changes: Any) -> Optional[Task]:
        validate_update_payload(changes).raise_for_issues()
        return self._replace(task_id, lambda t: update_task(t, **changes))

    def toggle(self, task_id: str) -> Optional[Task]:
        return self._replace(task_id, toggle_task_status)

    def _replace(self, task_id: str, change: Callable[[Task], Task]) -> Optional[Task]:
        def mutate(tasks: list[Task]) -> tuple[Optional[list[Task]], Optional[Task]]:
            for i, task in enumerate(tasks):
                if task.id == task_id:
                    updated = change(task)
                    tasks[i] = updated
                    return tasks, updated
            return None, None

        updated = self._commit(mutate)
        if updated is not None:
            logger.debug("Updated task %s", task_id)
        return updated

    def duplicate(self, task_id: str) -> Optional[Task]:
        """Insert a copy right after the original."""

        def mutate(tasks: list[Task]) -> tuple[Optional[list[Task]], Optional[Task]]:
            for i, task in enumerate(tasks):
                if task.id == task_id:
                    copy = duplicate_task(task)
                    tasks.insert(i + 1, copy)
                    return tasks, copy
            return None, None

        copy = self._commit(mutate)
        if copy is not None:
            logger.info("Duplicated task %s", task_id)
        return copy

    def remove(self, task_id: str) -> bool:
        def mutate(tasks: list[Task]) -> tuple[Optional[list[Task]], bool]:
            kept = [t for t in tasks if t.id != task_id]
            if len(kept) == len(tasks):
                return None, False
            return kept, True

        removed = self._commit(mutate)
        if removed:
            logger.info("Removed task %s", task_id)
        return removed

    def clear(self) -> int:
        def mutate(tasks: list[Task]) -> tuple[list[Task], int]:
            return [], len(tasks)

        count = self._commit(mutate)
        logger.info("Cleared %d task(s)", count)
        return count
