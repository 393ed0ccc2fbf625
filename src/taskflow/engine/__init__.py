# src/taskflow/engine/__init__.py

"""
Task query / aggregation engine.

Pure functions over immutable Task records, plus the storage-backed
TaskBoard that owns a session's collection.
"""

from .clock import generate_id
from .filtering import (
    apply_filters,
    filter_by_category,
    filter_by_priority,
    filter_by_status,
    filter_overdue,
    filter_tasks_by_search,
    group_tasks_by_category,
    group_tasks_by_status,
    is_task_overdue,
)
from .model import (
    ALL,
    DEFAULT_FILTERS,
    Category,
    Priority,
    SortCriterion,
    SortField,
    SortOrder,
    Status,
    Task,
    TaskFilters,
    TaskStats,
    Unconstrained,
    parse_constraint,
)
from .ops import (
    NewTaskRequest,
    create_task,
    duplicate_task,
    find_task,
    next_status,
    toggle_task_status,
    update_task,
)
from .sorting import (
    compare_by_created_at,
    compare_by_due_date,
    compare_by_lifecycle,
    compare_by_priority,
    compare_by_status,
    compare_by_title,
    multi_sort,
    sort_tasks,
)
from .stats import calculate_stats
from .store import JsonStore, TaskBoard
from .validate import ValidationError, ValidationResult, validate_task_payload

__all__ = [
    "ALL",
    "DEFAULT_FILTERS",
    "Category",
    "JsonStore",
    "NewTaskRequest",
    "Priority",
    "SortCriterion",
    "SortField",
    "SortOrder",
    "Status",
    "Task",
    "TaskBoard",
    "TaskFilters",
    "TaskStats",
    "Unconstrained",
    "ValidationError",
    "ValidationResult",
    "apply_filters",
    "calculate_stats",
    "compare_by_created_at",
    "compare_by_due_date",
    "compare_by_lifecycle",
    "compare_by_priority",
    "compare_by_status",
    "compare_by_title",
    "create_task",
    "duplicate_task",
    "filter_by_category",
    "filter_by_priority",
    "filter_by_status",
    "filter_overdue",
    "filter_tasks_by_search",
    "find_task",
    "generate_id",
    "group_tasks_by_category",
    "group_tasks_by_status",
    "is_task_overdue",
    "multi_sort",
    "next_status",
    "parse_constraint",
    "sort_tasks",
    "toggle_task_status",
    "update_task",
    "validate_task_payload",
]
