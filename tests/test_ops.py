import re
from datetime import datetime, timedelta, timezone

import pytest

from taskflow.engine import clock
from taskflow.engine.model import Category, Priority, Status
from taskflow.engine.ops import (
    NewTaskRequest,
    create_task,
    duplicate_task,
    find_task,
    generate_id,
    next_status,
    toggle_task_status,
    update_task,
)

ID_RE = re.compile(r"^task_(\d+)_([0-9a-z]{9})$")


def test_generate_id_format(frozen_now):
    m = ID_RE.match(generate_id())
    assert m is not None
    assert int(m.group(1)) == int(frozen_now.timestamp() * 1000)


def test_generate_id_is_unique(frozen_now):
    assert len({generate_id() for _ in range(50)}) == 50


# ---------------------------------------------------------------------
# create_task
# ---------------------------------------------------------------------

def test_create_task_defaults(frozen_now):
    task = create_task(NewTaskRequest(title="  Write report  "))

    assert task.title == "Write report"
    assert task.priority is Priority.MEDIUM
    assert task.category is Category.OTHER
    assert task.status is Status.TODO
    assert task.tags == ()
    assert task.due_date is None
    assert task.description is None
    assert task.created_at == task.updated_at == frozen_now
    assert ID_RE.match(task.id)


def test_create_task_from_mapping(frozen_now):
    task = create_task(
        {
            "title": "Buy groceries",
            "description": " Milk, eggs ",
            "priority": "high",
            "category": "shopping",
            "due_date": "2024-03-01",
            "tags": ["home", "weekly", "home"],
            "assignee": "me@example.com",
        }
    )

    assert task.priority is Priority.HIGH
    assert task.category is Category.SHOPPING
    assert task.description == "Milk, eggs"
    assert task.due_date == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert task.tags == ("home", "weekly", "home")
    assert task.assignee == "me@example.com"


# ---------------------------------------------------------------------
# update_task
# ---------------------------------------------------------------------

def test_update_merges_and_refreshes_updated_at(frozen_now, make_task):
    task = make_task(title="Old")
    updated = update_task(task, title="New", priority="critical")

    assert updated.title == "New"
    assert updated.priority is Priority.CRITICAL
    assert updated.updated_at == frozen_now
    assert task.title == "Old"
    assert task.updated_at != frozen_now


def test_update_discards_protected_fields(frozen_now, make_task):
    task = make_task(id="keep")
    updated = update_task(
        task,
        id="other",
        created_at=datetime(1999, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(1999, 1, 1, tzinfo=timezone.utc),
        title="Changed",
    )

    assert updated.id == "keep"
    assert updated.created_at == task.created_at
    assert updated.updated_at == frozen_now
    assert updated.title == "Changed"


def test_update_never_moves_updated_at_before_created_at(monkeypatch, make_task):
    task = make_task()
    monkeypatch.setattr(clock, "now", lambda: task.created_at - timedelta(days=1))

    assert update_task(task, title="Back in time").updated_at == task.created_at


def test_update_can_clear_due_date(frozen_now, make_task):
    task = make_task(due_date=frozen_now)
    assert update_task(task, due_date=None).due_date is None


def test_update_rejects_unknown_fields(make_task):
    with pytest.raises(TypeError):
        update_task(make_task(), colour="red")


# ---------------------------------------------------------------------
# duplicate / toggle
# ---------------------------------------------------------------------

def test_duplicate_task(frozen_now, make_task):
    task = make_task(id="orig", title="Plan trip", status="done", tags=["travel"])
    copy = duplicate_task(task)

    assert copy.id != task.id
    assert copy.title == "Copy of Plan trip"
    assert copy.status is Status.TODO
    assert copy.created_at == copy.updated_at == frozen_now
    assert copy.tags == ("travel",)
    assert task.status is Status.DONE


def test_status_cycle():
    assert next_status(Status.TODO) is Status.IN_PROGRESS
    assert next_status(Status.IN_PROGRESS) is Status.DONE
    assert next_status(Status.DONE) is Status.TODO


def test_toggle_walks_the_full_cycle(frozen_now, make_task):
    task = make_task(status="todo")

    seen = []
    for _ in range(3):
        task = toggle_task_status(task)
        seen.append(task.status)

    assert seen == [Status.IN_PROGRESS, Status.DONE, Status.TODO]
    assert task.updated_at == frozen_now


def test_find_task(make_task):
    tasks = [make_task(id="a"), make_task(id="b")]
    assert find_task(tasks, "b") is tasks[1]
    assert find_task(tasks, "missing") is None
