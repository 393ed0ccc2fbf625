import pytest

from taskflow.engine.validate import (
    MAX_TAGS,
    ValidationError,
    validate_task_payload,
    validate_update_payload,
)

from .factories import FROZEN_NOW


def codes(result):
    return [i.code for i in result.issues]


def test_valid_payload():
    result = validate_task_payload(
        {
            "title": "Write report",
            "priority": "high",
            "category": "work",
            "due_date": "2024-03-01",
            "tags": ["q1"],
        },
        now=FROZEN_NOW,
    )
    assert result.valid
    assert result.errors == []


@pytest.mark.parametrize(
    "title, code",
    [
        (None, "title_required"),
        ("   ", "title_required"),
        ("ab", "title_too_short"),
        ("x" * 121, "title_too_long"),
    ],
)
def test_title_rules(title, code):
    assert codes(validate_task_payload({"title": title}, now=FROZEN_NOW)) == [code]


def test_enum_values_are_checked():
    result = validate_task_payload({"title": "Valid", "priority": "urgent", "category": "misc"}, now=FROZEN_NOW)
    assert codes(result) == ["priority_invalid", "category_invalid"]


def test_due_date_rules():
    assert codes(validate_task_payload({"title": "Valid", "due_date": "soon"}, now=FROZEN_NOW)) == ["due_date_invalid"]
    assert codes(validate_task_payload({"title": "Valid", "due_date": "2020-01-01"}, now=FROZEN_NOW)) == ["due_date_past"]


def test_tag_rules():
    too_many = validate_task_payload({"title": "Valid", "tags": ["t"] * (MAX_TAGS + 1)}, now=FROZEN_NOW)
    assert codes(too_many) == ["tags_too_many"]

    bad = validate_task_payload({"title": "Valid", "tags": ["ok", " ", "y" * 31]}, now=FROZEN_NOW)
    assert codes(bad) == ["tag_blank", "tag_too_long"]
    assert bad.errors[0] == "Tag at position 2 is blank."


def test_collects_every_error():
    result = validate_task_payload({"title": "", "description": "d" * 1001, "priority": "x"}, now=FROZEN_NOW)
    assert not result.valid
    assert len(result.errors) == 3


def test_update_checks_present_keys_only():
    assert validate_update_payload({"status": "done"}, now=FROZEN_NOW).valid
    assert codes(validate_update_payload({"status": "blocked"}, now=FROZEN_NOW)) == ["status_invalid"]
    assert codes(validate_update_payload({"title": ""}, now=FROZEN_NOW)) == ["title_required"]


@pytest.mark.parametrize(
    "key, code",
    [
        ("priority", "priority_invalid"),
        ("category", "category_invalid"),
        ("status", "status_invalid"),
    ],
)
@pytest.mark.parametrize("empty", ["", None])
def test_update_rejects_empty_enum_values(key, code, empty):
    result = validate_update_payload({key: empty}, now=FROZEN_NOW)
    assert codes(result) == [code]


def test_create_still_defaults_empty_enum_values():
    assert validate_task_payload({"title": "Valid", "priority": "", "category": None}, now=FROZEN_NOW).valid


def test_raise_for_issues():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload({"title": "ab"}, now=FROZEN_NOW).raise_for_issues()

    assert exc.value.errors == ("Title must be at least 3 characters.",)
