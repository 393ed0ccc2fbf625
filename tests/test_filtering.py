from datetime import timedelta

import pytest

from taskflow.engine.filtering import (
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
from taskflow.engine.model import (
    ALL,
    DEFAULT_FILTERS,
    Category,
    Priority,
    SortField,
    SortOrder,
    Status,
    TaskFilters,
)

from .factories import FROZEN_NOW, utc

PAST = utc(2020, 1, 1)


@pytest.fixture()
def tasks(make_task):
    return [
        make_task(id="1", priority="low", category="work", status="todo", due_date=None),
        make_task(id="2", priority="high", category="personal", status="in-progress", due_date=PAST),
        make_task(id="3", priority="critical", category="shopping", status="done", due_date=PAST),
        make_task(id="4", priority="medium", category="health", status="todo", due_date=None),
    ]


def ids(tasks):
    return [t.id for t in tasks]


# ---------------------------------------------------------------------
# Categorical stages
# ---------------------------------------------------------------------

def test_all_is_a_no_op(tasks):
    assert filter_by_priority(tasks, ALL) == tasks
    assert filter_by_category(tasks, ALL) == tasks
    assert filter_by_status(tasks, ALL) == tasks


def test_all_accepts_plain_string(tasks):
    assert filter_by_priority(tasks, "all") == tasks


def test_exact_matches_only(tasks):
    assert ids(filter_by_priority(tasks, Priority.HIGH)) == ["2"]
    assert ids(filter_by_category(tasks, Category.HEALTH)) == ["4"]
    assert ids(filter_by_status(tasks, Status.TODO)) == ["1", "4"]
    assert filter_by_priority(tasks[:1], Priority.CRITICAL) == []


def test_stages_do_not_mutate_input(tasks):
    original = list(tasks)
    filter_by_status(tasks, Status.DONE)
    filter_tasks_by_search(tasks, "nothing")
    assert tasks == original


# ---------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------

def test_blank_search_returns_everything(tasks):
    assert filter_tasks_by_search(tasks, "") == tasks
    assert filter_tasks_by_search(tasks, "   ") == tasks


def test_search_title_case_insensitive_and_trimmed(make_task):
    items = [make_task(id="a", title="Buy Groceries"), make_task(id="b", title="Call mom")]
    assert ids(filter_tasks_by_search(items, "  GROC ")) == ["a"]


def test_search_description(make_task):
    items = [
        make_task(id="a", description="Milk, eggs, bread"),
        make_task(id="b", description=None),
    ]
    assert ids(filter_tasks_by_search(items, "eggs")) == ["a"]


def test_search_matches_tags_one_by_one(make_task):
    items = [make_task(id="a", tags=["ab", "cd"]), make_task(id="b", tags=["DevOps"])]

    assert ids(filter_tasks_by_search(items, "devops")) == ["b"]
    # "bc" only exists across the boundary of two tags
    assert filter_tasks_by_search(items, "bc") == []


# ---------------------------------------------------------------------
# Overdue
# ---------------------------------------------------------------------

def test_filter_overdue(tasks):
    assert ids(filter_overdue(tasks, now=FROZEN_NOW)) == ["2"]


def test_filter_overdue_none_when_all_future(tasks, make_task):
    future = [make_task(id=t.id, status=t.status, due_date=utc(2099, 1, 1)) for t in tasks]
    assert filter_overdue(future, now=FROZEN_NOW) == []


def test_overdue_boundary_is_strict(make_task):
    assert is_task_overdue(make_task(due_date=FROZEN_NOW), now=FROZEN_NOW) is False
    assert is_task_overdue(make_task(due_date=FROZEN_NOW - timedelta(microseconds=1)), now=FROZEN_NOW) is True


def test_done_and_undated_are_never_overdue(make_task):
    assert is_task_overdue(make_task(status="done", due_date=PAST), now=FROZEN_NOW) is False
    assert is_task_overdue(make_task(due_date=None), now=FROZEN_NOW) is False


def test_overdue_reads_clock_by_default(frozen_now, make_task):
    assert is_task_overdue(make_task(due_date=frozen_now - timedelta(seconds=1))) is True
    assert is_task_overdue(make_task(due_date=frozen_now)) is False


# ---------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------

def test_default_filters_keep_everything(tasks):
    assert sorted(ids(apply_filters(tasks, DEFAULT_FILTERS))) == ["1", "2", "3", "4"]


def test_search_through_pipeline(tasks):
    assert len(apply_filters(tasks, TaskFilters(search="Base"))) == 4


def test_combined_priority_and_status(tasks):
    result = apply_filters(tasks, TaskFilters(priority=Priority.LOW, status=Status.TODO))
    assert ids(result) == ["1"]


def test_critical_but_not_todo_yields_nothing(make_task):
    items = [
        make_task(id="1", priority="low", status="todo"),
        make_task(id="2", priority="critical", status="done"),
    ]
    assert apply_filters(items, TaskFilters(priority=Priority.CRITICAL, status=Status.TODO)) == []


def test_pipeline_sorts_last(tasks):
    result = apply_filters(tasks, TaskFilters(sort_by=SortField.PRIORITY, sort_order=SortOrder.ASC))
    assert ids(result) == ["3", "2", "4", "1"]


def test_pipeline_is_idempotent_and_non_mutating(tasks):
    filters = TaskFilters(search="base", status=Status.TODO, sort_by=SortField.TITLE)
    first_input = list(tasks)
    second_input = list(tasks)

    first = apply_filters(first_input, filters)
    second = apply_filters(second_input, filters)

    assert first == second
    assert first_input == tasks
    assert first is not first_input


# ---------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------

def test_group_by_category_omits_empty(tasks):
    groups = group_tasks_by_category(tasks[:2])
    assert set(groups) == {Category.WORK, Category.PERSONAL}


def test_group_by_status_has_every_status(tasks):
    groups = group_tasks_by_status(tasks[:1])
    assert set(groups) == set(Status)
    assert ids(groups[Status.TODO]) == ["1"]
    assert groups[Status.DONE] == []
