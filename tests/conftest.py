# tests/conftest.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

import pytest

from taskflow.engine import clock
from taskflow.engine.model import Category, Priority, Status, Task

from .factories import BASE_TASK, FROZEN_NOW


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    """
    Factory: BASE_TASK with field overrides.

    Enum fields accept their string values for brevity.
    """

    def factory(**overrides: Any) -> Task:
        for name, enum_cls in (("priority", Priority), ("category", Category), ("status", Status)):
            if name in overrides:
                overrides[name] = enum_cls(overrides[name])
        if "tags" in overrides:
            overrides["tags"] = tuple(overrides["tags"])
        return replace(BASE_TASK, **overrides)

    return factory


@pytest.fixture()
def frozen_now(monkeypatch: pytest.MonkeyPatch) -> datetime:
    """Freeze clock.now() at FROZEN_NOW for the duration of a test."""
    monkeypatch.setattr(clock, "now", lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """cli.main() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
