# tests/factories.py

from __future__ import annotations

from datetime import datetime, timezone

from taskflow.engine.model import Category, Priority, Status, Task

FROZEN_NOW = datetime(2024, 2, 1, 12, 0, 0, tzinfo=timezone.utc)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


BASE_TASK = Task(
    id="x",
    title="Base task",
    priority=Priority.MEDIUM,
    category=Category.WORK,
    status=Status.TODO,
    created_at=utc(2024, 1, 1),
    updated_at=utc(2024, 1, 1),
)
