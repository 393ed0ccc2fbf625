import pytest

from taskflow.engine.model import (
    ALL,
    DEFAULT_FILTERS,
    Category,
    Priority,
    SortField,
    SortOrder,
    Status,
    TaskFilters,
    Unconstrained,
    parse_constraint,
)


def test_priority_weights():
    assert [p.weight for p in Priority] == [1, 2, 3, 4]


def test_status_cycle_has_no_terminal_state():
    status = Status.TODO
    for _ in range(6):
        status = status.next()
    assert status is Status.TODO


def test_default_filters():
    assert DEFAULT_FILTERS == TaskFilters(
        search="",
        priority=ALL,
        category=ALL,
        status=ALL,
        sort_by=SortField.CREATED_AT,
        sort_order=SortOrder.DESC,
    )
    assert not DEFAULT_FILTERS.is_filtered


def test_with_changes_and_is_filtered():
    f = DEFAULT_FILTERS.with_changes(category=Category.HEALTH)
    assert f.category is Category.HEALTH
    assert f.is_filtered
    assert DEFAULT_FILTERS.category is ALL

    # sorting alone does not count as filtering
    assert not DEFAULT_FILTERS.with_changes(sort_by=SortField.TITLE).is_filtered


def test_toggle_sort_order():
    assert DEFAULT_FILTERS.toggle_sort_order().sort_order is SortOrder.ASC
    assert DEFAULT_FILTERS.toggle_sort_order().toggle_sort_order() == DEFAULT_FILTERS


def test_parse_constraint():
    assert parse_constraint(Priority, "ALL") is Unconstrained.ALL
    assert parse_constraint(Status, "in-progress") is Status.IN_PROGRESS
    with pytest.raises(ValueError):
        parse_constraint(Category, "garden")
