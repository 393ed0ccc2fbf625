# src/taskflow/engine/model.py

"""
Core domain models.

This module defines the in-memory representations of tasks, the
filter/sort parameters and the statistics summary, along with the
enumerations they are built from.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping, Optional, TypeVar, Union


# ---------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------

class Priority(str, Enum):
    """
    Task urgency level.

    Declaration order is display order; comparison goes through `weight`.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}


class Category(str, Enum):
    """Broad grouping of a task's subject area (unordered)."""

    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"


class Status(str, Enum):
    """
    Task lifecycle status.

    The lifecycle is a fixed cycle with no terminal state:

    todo -> in-progress -> done -> todo
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    def next(self) -> "Status":
        """Return the successor of this status in the cycle."""
        return _NEXT_STATUS[self]

    @property
    def lifecycle_rank(self) -> int:
        return _LIFECYCLE_RANK[self]


_NEXT_STATUS = {
    Status.TODO: Status.IN_PROGRESS,
    Status.IN_PROGRESS: Status.DONE,
    Status.DONE: Status.TODO,
}

_LIFECYCLE_RANK = {
    Status.TODO: 0,
    Status.IN_PROGRESS: 1,
    Status.DONE: 2,
}


class Unconstrained(str, Enum):
    """
    "No constraint" marker for categorical filters.

    Kept apart from Priority / Category / Status so a filter value is
    either an exact enum member or this marker, never a loose string.
    """

    ALL = "all"


ALL: Final = Unconstrained.ALL


class SortField(str, Enum):
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"
    STATUS = "status"
    LIFECYCLE = "lifecycle"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


E = TypeVar("E", Priority, Category, Status)


def parse_constraint(enum_cls: type[E], raw: str) -> Union[E, Unconstrained]:
    """
    Parse a categorical filter value.

    "all" (any case) maps to ALL; anything else must be a member value
    of `enum_cls`, otherwise ValueError is raised.
    """
    s = (raw or "").strip().lower()
    if s == ALL.value:
        return ALL
    try:
        return enum_cls(s)
    except ValueError as e:
        allowed = ", ".join([ALL.value] + [m.value for m in enum_cls])
        raise ValueError(f"Invalid {enum_cls.__name__.lower()} '{raw}' (allowed: {allowed})") from e


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Task:
    """
    In-memory representation of a single task.

    Notes:
    - id and created_at are write-once.
    - updated_at is refreshed on every mutation and never precedes created_at.
    - due_date None means "no deadline"; it is not an extreme date.
    - timestamps are timezone-aware (UTC in storage).
    """

    # Identity / core metadata
    id: str
    title: str
    priority: Priority
    category: Category
    status: Status

    # Temporal fields
    created_at: datetime
    updated_at: datetime

    # Optional content
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: tuple[str, ...] = ()
    assignee: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    @property
    def has_due_date(self) -> bool:
        return self.due_date is not None


# ---------------------------------------------------------------------
# Filter / sort parameters
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SortCriterion:
    field: SortField
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True, slots=True)
class TaskFilters:
    """
    Filter and sort parameters for a task list view.

    Every field defaults independently, so any subset of fields may be
    supplied.
    """

    search: str = ""
    priority: Union[Priority, Unconstrained] = ALL
    category: Union[Category, Unconstrained] = ALL
    status: Union[Status, Unconstrained] = ALL
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    def with_changes(self, **fields: object) -> "TaskFilters":
        return replace(self, **fields)

    def toggle_sort_order(self) -> "TaskFilters":
        return replace(self, sort_order=self.sort_order.flipped())

    @property
    def is_filtered(self) -> bool:
        """
        True when any narrowing field differs from the defaults.

        Sort field and direction do not count.
        """
        return (
            self.search != DEFAULT_FILTERS.search
            or self.priority != DEFAULT_FILTERS.priority
            or self.category != DEFAULT_FILTERS.category
            or self.status != DEFAULT_FILTERS.status
        )


DEFAULT_FILTERS: Final = TaskFilters()


# ---------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TaskStats:
    """
    Aggregate figures derived from a task collection.

    Never persisted. Every enum key is present in the per-field counts.
    The counts are read-only mappings, so TaskStats is not hashable.
    """

    total: int
    by_status: Mapping[Status, int] = field(default_factory=dict)
    by_priority: Mapping[Priority, int] = field(default_factory=dict)
    by_category: Mapping[Category, int] = field(default_factory=dict)
    overdue: int = 0
    completion_rate: int = 0

    def __post_init__(self) -> None:
        for name in ("by_status", "by_priority", "by_category"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
