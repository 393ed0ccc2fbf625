# src/taskflow/engine/sorting.py

"""
Task comparators and sort utilities.

Comparators follow the classic cmp contract: negative when the first
task sorts before the second. Each one encodes a "natural" direction for
its field (priority: critical first, created_at: newest first); the
requested SortOrder is applied on top of it:

- sort_tasks(): sorted with the comparator, whole result reversed on DESC,
- multi_sort(): comparator result kept on ASC, negated on DESC.

The one exception is due_date: undated tasks sort after dated ones in
both directions.

Neither function mutates its input; both rely on Python's stable sort.
"""

from functools import cmp_to_key
from typing import Any, Callable, Iterable, Sequence, Union

from .model import SortCriterion, SortField, SortOrder, Task

Comparator = Callable[[Task, Task], int]


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


# ---------------------------------------------------------------------
# Comparators
# ---------------------------------------------------------------------

def compare_by_title(a: Task, b: Task) -> int:
    """Alphabetical, case-insensitive."""
    return _cmp(a.title.lower(), b.title.lower())


def compare_by_priority(a: Task, b: Task) -> int:
    """Higher weight first: critical before low."""
    return b.priority.weight - a.priority.weight


def compare_by_created_at(a: Task, b: Task) -> int:
    """Newest first."""
    return _cmp(b.created_at, a.created_at)


def compare_by_due_date(a: Task, b: Task) -> int:
    """
    Dated tasks before undated ones, earlier deadlines first.

    Two undated tasks compare equal.
    """
    if a.due_date is None and b.due_date is None:
        return 0
    if a.due_date is None:
        return 1
    if b.due_date is None:
        return -1
    return _cmp(a.due_date, b.due_date)


def compare_by_status(a: Task, b: Task) -> int:
    """
    Lexicographic by status label.

    Gives done < in-progress < todo, which is not the lifecycle order;
    use compare_by_lifecycle for that.
    """
    return _cmp(a.status.value, b.status.value)


def compare_by_lifecycle(a: Task, b: Task) -> int:
    """todo, then in-progress, then done."""
    return a.status.lifecycle_rank - b.status.lifecycle_rank


COMPARATORS: dict[SortField, Comparator] = {
    SortField.TITLE: compare_by_title,
    SortField.PRIORITY: compare_by_priority,
    SortField.CREATED_AT: compare_by_created_at,
    SortField.DUE_DATE: compare_by_due_date,
    SortField.STATUS: compare_by_status,
    SortField.LIFECYCLE: compare_by_lifecycle,
}


def get_comparator(field: Union[SortField, str]) -> Comparator:
    return COMPARATORS[SortField(field)]


# ---------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------

def sort_tasks(
    tasks: Iterable[Task],
    field: Union[SortField, str],
    order: Union[SortOrder, str],
) -> list[Task]:
    """
    Return a sorted copy of `tasks`.

    The comparator for `field` decides the ASC order; DESC is that
    exact list reversed (ties included), except that undated tasks stay
    last when sorting by due_date.
    """
    result = sorted(tasks, key=cmp_to_key(get_comparator(field)))
    if SortOrder(order) is SortOrder.DESC:
        result.reverse()
        if SortField(field) is SortField.DUE_DATE:
            result = [t for t in result if t.has_due_date] + [t for t in result if not t.has_due_date]
    return result


def multi_sort(tasks: Iterable[Task], criteria: Sequence[SortCriterion]) -> list[Task]:
    """
    Sort by several criteria; the first one has the highest precedence.

    A criterion only breaks ties left by the ones before it. An empty
    `criteria` sequence returns an unsorted shallow copy.
    """
    keyed = [
        (SortField(c.field), get_comparator(c.field), SortOrder(c.order) is SortOrder.DESC)
        for c in criteria
    ]
    if not keyed:
        return list(tasks)

    def compare(a: Task, b: Task) -> int:
        for field, comparator, descending in keyed:
            result = comparator(a, b)
            if result == 0:
                continue
            if field is SortField.DUE_DATE and a.has_due_date != b.has_due_date:
                # undated last in either direction
                return result
            return -result if descending else result
        return 0

    return sorted(tasks, key=cmp_to_key(compare))


def parse_criterion(raw: str) -> SortCriterion:
    """
    Parse "field[:order]" into a SortCriterion (order defaults to asc).

    Raises ValueError on unknown field or order names.
    """
    name, _, order = (raw or "").strip().partition(":")
    try:
        return SortCriterion(
            field=SortField(name.strip().lower()),
            order=SortOrder((order or SortOrder.ASC.value).strip().lower()),
        )
    except ValueError as e:
        raise ValueError(f"Invalid sort criterion '{raw}' (expected field[:asc|desc])") from e
