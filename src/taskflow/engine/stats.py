# src/taskflow/engine/stats.py

"""
Statistics aggregation over a task collection.
"""

import math
from datetime import datetime
from typing import Iterable, Optional

from . import clock
from .filtering import is_task_overdue
from .model import Category, Priority, Status, Task, TaskStats


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_stats(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
    """
    Derive aggregate statistics in a single pass.

    All counters start at zero, so every status / priority / category key
    is present. completion_rate is the rounded percentage of done tasks,
    0 for an empty collection.
    """
    moment = now if now is not None else clock.now()

    by_status = {s: 0 for s in Status}
    by_priority = {p: 0 for p in Priority}
    by_category = {c: 0 for c in Category}
    total = 0
    overdue = 0

    for task in tasks:
        total += 1
        by_status[task.status] += 1
        by_priority[task.priority] += 1
        by_category[task.category] += 1
        if is_task_overdue(task, moment):
            overdue += 1

    completion_rate = _round_half_up(by_status[Status.DONE] / total * 100) if total > 0 else 0

    return TaskStats(
        total=total,
        by_status=by_status,
        by_priority=by_priority,
        by_category=by_category,
        overdue=overdue,
        completion_rate=completion_rate,
    )
