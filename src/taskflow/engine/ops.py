# src/taskflow/engine/ops.py

"""
Task record construction and lifecycle helpers.

This module contains:
- creation of new Task records from a request payload,
- merging partial updates (id / created_at are protected),
- duplication and the cyclic status transition.

Every helper returns a new Task; arguments are never mutated.
No validation is performed here (see validate.py).
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union

from . import clock
from .dates import DateLike, parse_datetime
from .model import Category, Priority, Status, Task


COPY_PREFIX = "Copy of "

_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})
_TASK_FIELDS = frozenset(f.name for f in fields(Task))


# ---------------------------------------------------------------------
# Public request objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NewTaskRequest:
    """
    Parameters for creating a new task.
    """

    title: str
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    due_date: Optional[DateLike] = None
    tags: tuple[str, ...] = ()
    assignee: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NewTaskRequest":
        return cls(
            title=str(data.get("title") or ""),
            description=data.get("description"),
            priority=data.get("priority"),
            category=data.get("category"),
            due_date=data.get("due_date"),
            tags=tuple(data.get("tags") or ()),
            assignee=data.get("assignee"),
        )

    def as_payload(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ---------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------

def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


def _optional_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_datetime(value)


def _coerce_change(name: str, value: Any) -> Any:
    """
    Normalise a single update value to the type stored on Task.
    """
    if name == "priority":
        return Priority(value)
    if name == "category":
        return Category(value)
    if name == "status":
        return Status(value)
    if name == "due_date":
        return _optional_datetime(value)
    if name == "tags":
        return tuple(value or ())
    if name == "title":
        return str(value).strip()
    return value


# ---------------------------------------------------------------------
# CRUD helpers
# ---------------------------------------------------------------------

def generate_id() -> str:
    return clock.generate_id()


def create_task(request: Union[NewTaskRequest, Mapping[str, Any]]) -> Task:
    """
    Build a complete Task from a creation request.

    Defaults: priority medium, category other, status todo, no tags.
    created_at and updated_at share one fresh timestamp.
    """
    req = request if isinstance(request, NewTaskRequest) else NewTaskRequest.from_mapping(request)
    now = clock.now()

    return Task(
        id=generate_id(),
        title=req.title.strip(),
        description=_strip_optional(req.description),
        priority=Priority(req.priority or Priority.MEDIUM),
        category=Category(req.category or Category.OTHER),
        status=Status.TODO,
        due_date=_optional_datetime(req.due_date),
        created_at=now,
        updated_at=now,
        tags=tuple(req.tags),
        assignee=req.assignee,
    )


def update_task(task: Task, **changes: Any) -> Task:
    """
    Return a copy of `task` with `changes` merged in.

    id, created_at and updated_at in `changes` are silently discarded;
    updated_at is refreshed (never earlier than created_at). Unknown
    field names raise TypeError.
    """
    unknown = set(changes) - _TASK_FIELDS
    if unknown:
        raise TypeError(f"Unknown task field(s): {', '.join(sorted(unknown))}")

    merged = {
        name: _coerce_change(name, value)
        for name, value in changes.items()
        if name not in _PROTECTED_FIELDS
    }
    return replace(task, **merged, updated_at=max(clock.now(), task.created_at))


def duplicate_task(task: Task) -> Task:
    """
    Clone `task` with a fresh id and timestamps, a "Copy of " title and
    status reset to todo.
    """
    now = clock.now()
    return replace(
        task,
        id=generate_id(),
        title=f"{COPY_PREFIX}{task.title}",
        status=Status.TODO,
        created_at=now,
        updated_at=now,
    )


def next_status(status: Status) -> Status:
    return Status(status).next()


def toggle_task_status(task: Task) -> Task:
    """Advance one step along todo -> in-progress -> done -> todo."""
    return update_task(task, status=next_status(task.status))


def find_task(tasks: Iterable[Task], task_id: str) -> Optional[Task]:
    for task in tasks:
        if task.id == task_id:
            return task
    return None
