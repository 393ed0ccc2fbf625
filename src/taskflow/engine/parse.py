# src/taskflow/engine/parse.py

"""
Stored task record parser.

Turns one decoded JSON object (as written by store.task_to_dict) back
into a Task model.

This module performs *structural* parsing only: types, enum values and
timestamps. Content rules live in validate.py.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .dates import parse_datetime
from .model import Category, Priority, Status, Task


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(eq=False)
class ParseError(Exception):
    """
    Raised when a stored record is syntactically or structurally invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def task_from_dict(data: Any, *, path: str = "<task>") -> Task:
    """
    Parse a stored record into a Task.

    `path` only labels error messages (e.g. "taskflow_tasks[3]").
    """
    if not isinstance(data, dict):
        raise ParseError(path, "Task record must be a mapping/object")

    created_at = _require_datetime(path, data, "created_at")
    updated_at = _require_datetime(path, data, "updated_at")
    if updated_at < created_at:
        raise ParseError(path, "updated_at must not precede created_at")

    return Task(
        id=_require_str(path, data, "id"),
        title=_require_str(path, data, "title"),
        priority=_parse_enum(path, data, "priority", Priority, Priority.MEDIUM),
        category=_parse_enum(path, data, "category", Category, Category.OTHER),
        status=_parse_enum(path, data, "status", Status, Status.TODO),
        created_at=created_at,
        updated_at=updated_at,
        description=_optional_str(path, data, "description"),
        due_date=_optional_datetime(path, data, "due_date"),
        tags=_parse_tags(path, data),
        assignee=_optional_str(path, data, "assignee"),
    )


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def _require_str(path: str, data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ParseError(path, f"Missing required key: {key}")

    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ParseError(path, f"Key '{key}' must be a non-empty string")

    return value


def _optional_str(path: str, data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(path, f"Key '{key}' must be a string")
    return value


def _parse_enum(path: str, data: dict[str, Any], key: str, enum_cls: type, default: Any) -> Any:
    raw = data.get(key)
    if raw is None:
        return default
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError as e:
        allowed = ", ".join([m.value for m in enum_cls])
        raise ParseError(path, f"Invalid {key} '{raw}' (allowed: {allowed})") from e


def _require_datetime(path: str, data: dict[str, Any], key: str) -> datetime:
    if key not in data or data[key] is None:
        raise ParseError(path, f"Missing required key: {key}")
    return _to_datetime(path, key, data[key])


def _optional_datetime(path: str, data: dict[str, Any], key: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None or value == "":
        return None
    return _to_datetime(path, key, value)


def _to_datetime(path: str, key: str, value: Any) -> datetime:
    if not isinstance(value, str):
        raise ParseError(path, f"Key '{key}' must be an ISO date string")
    try:
        return parse_datetime(value)
    except ValueError as e:
        raise ParseError(path, f"Invalid ISO date for '{key}': '{value}'") from e


def _parse_tags(path: str, data: dict[str, Any]) -> tuple[str, ...]:
    raw = data.get("tags", [])
    if raw is None:
        return ()

    if not isinstance(raw, list):
        raise ParseError(path, "Key 'tags' must be a list")

    out: list[str] = []
    for i, item in enumerate(raw, start=1):
        if not isinstance(item, str):
            raise ParseError(path, f"tags[{i}] must be a string")
        out.append(item)

    return tuple(out)
