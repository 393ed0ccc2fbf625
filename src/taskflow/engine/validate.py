# src/taskflow/engine/validate.py

"""
Task payload validation rules.

This module checks creation / update payloads before they reach the
CRUD helpers, which assume well-typed input and do not re-validate.

Responsibilities:
- field-level rules (lengths, enum membership, dates, tags),
- collecting every failing rule in one pass.

It does NOT construct or mutate tasks.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from . import clock
from .dates import parse_datetime
from .model import Category, Priority, Status


# ---------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 1000
MAX_TAGS = 10
TAG_MAX_LENGTH = 30


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Raised when a payload is rejected and the operation must abort.

    `errors` holds every message collected by the validator.
    """

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        super().__init__(" ".join(self.errors) or "Invalid task payload")


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` is a stable identifier suitable for tests and filtering.
    """

    code: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    issues: Sequence[ValidationIssue] = ()

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> list[str]:
        return [i.message for i in self.issues]

    def raise_for_issues(self) -> None:
        if self.issues:
            raise ValidationError(self.errors)


# ---------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------

def _check_title(title: Any, issues: list[ValidationIssue]) -> None:
    if not isinstance(title, str) or not title.strip():
        issues.append(ValidationIssue("title_required", "Title is required."))
        return

    n = len(title.strip())
    if n < TITLE_MIN_LENGTH:
        issues.append(
            ValidationIssue(
                "title_too_short",
                f"Title must be at least {TITLE_MIN_LENGTH} characters.",
            )
        )
    elif n > TITLE_MAX_LENGTH:
        issues.append(
            ValidationIssue(
                "title_too_long",
                f"Title must not exceed {TITLE_MAX_LENGTH} characters.",
            )
        )


def _check_description(description: Any, issues: list[ValidationIssue]) -> None:
    if not description:
        return
    if len(str(description)) > DESCRIPTION_MAX_LENGTH:
        issues.append(
            ValidationIssue(
                "description_too_long",
                f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters.",
            )
        )


def _check_member(
    value: Any,
    enum_cls: type,
    code: str,
    issues: list[ValidationIssue],
    *,
    allow_empty: bool = True,
) -> None:
    """
    Empty values are allowed on creation, where they are defaulted.

    Updates pass allow_empty=False: a present key must name a member.
    """
    if not value and allow_empty:
        return
    try:
        enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        name = enum_cls.__name__
        issues.append(ValidationIssue(code, f"{name} must be one of: {allowed}."))


def _check_due_date(due_date: Any, now: datetime, issues: list[ValidationIssue]) -> None:
    if not due_date:
        return
    try:
        parsed = parse_datetime(due_date)
    except (TypeError, ValueError):
        issues.append(ValidationIssue("due_date_invalid", "Due date is not a valid date."))
        return

    if parsed < now:
        issues.append(ValidationIssue("due_date_past", "Due date must be in the future."))


def _check_tags(tags: Optional[Iterable[Any]], issues: list[ValidationIssue]) -> None:
    if not tags:
        return

    items = list(tags)
    if len(items) > MAX_TAGS:
        issues.append(
            ValidationIssue("tags_too_many", f"A task may have at most {MAX_TAGS} tags.")
        )
        return

    for i, tag in enumerate(items, start=1):
        s = str(tag)
        if not s.strip():
            issues.append(ValidationIssue("tag_blank", f"Tag at position {i} is blank."))
        elif len(s) > TAG_MAX_LENGTH:
            issues.append(
                ValidationIssue(
                    "tag_too_long",
                    f'Tag "{s}" exceeds {TAG_MAX_LENGTH} characters.',
                )
            )


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def validate_task_payload(
    payload: Mapping[str, Any],
    *,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """
    Validate a full creation payload, collecting all errors.

    Keys: title, description, priority, category, due_date, tags.
    """
    moment = now if now is not None else clock.now()
    issues: list[ValidationIssue] = []

    _check_title(payload.get("title"), issues)
    _check_description(payload.get("description"), issues)
    _check_member(payload.get("priority"), Priority, "priority_invalid", issues)
    _check_member(payload.get("category"), Category, "category_invalid", issues)
    _check_due_date(payload.get("due_date"), moment, issues)
    _check_tags(payload.get("tags"), issues)

    return ValidationResult(issues=tuple(issues))


def validate_update_payload(
    changes: Mapping[str, Any],
    *,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """
    Validate a partial update: only the keys present are checked.

    Unlike creation, a present priority / category / status may not be
    empty: update_task has no default to fall back on.
    """
    moment = now if now is not None else clock.now()
    issues: list[ValidationIssue] = []

    if "title" in changes:
        _check_title(changes["title"], issues)
    if "description" in changes:
        _check_description(changes["description"], issues)
    if "priority" in changes:
        _check_member(changes["priority"], Priority, "priority_invalid", issues, allow_empty=False)
    if "category" in changes:
        _check_member(changes["category"], Category, "category_invalid", issues, allow_empty=False)
    if "status" in changes:
        _check_member(changes["status"], Status, "status_invalid", issues, allow_empty=False)
    if "due_date" in changes:
        _check_due_date(changes["due_date"], moment, issues)
    if "tags" in changes:
        _check_tags(changes["tags"], issues)

    return ValidationResult(issues=tuple(issues))
