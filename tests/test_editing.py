import pytest

from timeline.editing import (
    add_task,
    add_topic,
    default_selection,
    delete_task,
    delete_topic,
    resolve_task_dates,
    restore_selection,
    task_table_rows,
    update_task,
    update_topic,
)
from timeline.errors import NotFoundError, ValidationError
from timeline.model import NEW_TOPIC_COLOR, UNASSIGNED_TOPIC_ID, Project


def test_add_topic_uses_slug_id(sample_project):
    updated, topic = add_topic(sample_project, "  QA Review ")
    assert topic.id == "qa-review"
    assert topic.name == "QA Review"
    assert topic.color == NEW_TOPIC_COLOR
    assert updated.topics[-1] == topic
    assert sample_project.topic("qa-review") is None


def test_add_topic_rejects_blank_and_duplicates(sample_project):
    with pytest.raises(ValidationError):
        add_topic(sample_project, "   ")
    with pytest.raises(ValidationError):
        add_topic(sample_project, "design")


def test_sentinel_topic_is_locked(sample_project):
    with pytest.raises(ValidationError):
        update_topic(sample_project, UNASSIGNED_TOPIC_ID, "Other")
    with pytest.raises(ValidationError):
        delete_topic(sample_project, UNASSIGNED_TOPIC_ID)


def test_update_topic_keeps_color_when_not_given(sample_project):
    updated = update_topic(sample_project, "design", "UX")
    assert updated.topic("design").name == "UX"
    assert updated.topic("design").color == "#ff0000"
    with pytest.raises(NotFoundError):
        update_topic(sample_project, "nope", "X")


def test_delete_topic_reassigns_tasks(sample_project):
    updated = delete_topic(sample_project, "design")
    assert updated.topic("design") is None
    assert {task.topic_id for task in updated.tasks} == {UNASSIGNED_TOPIC_ID}
    assert sample_project.tasks[0].topic_id == "design"


def test_resolve_task_dates_uses_duration_when_end_missing():
    assert resolve_task_dates("2024-01-10", None, 3) == ("2024-01-10", "2024-01-12")
    assert resolve_task_dates("2024-01-10", "2024-01-11", 9) == ("2024-01-10", "2024-01-11")


@pytest.mark.parametrize(
    "start, end, duration",
    [
        ("", "2024-01-11", None),
        ("2024-01-10", "", None),
        ("2024-01-10", "", 0),
        ("2024-01-10", "2024-01-09", None),
        ("10/01/2024", "2024-01-11", None),
        ("bad-date", None, 3),
        ("31/01/2024", "", "2"),
    ],
)
def test_resolve_task_dates_rejects_invalid_input(start, end, duration):
    with pytest.raises(ValidationError):
        resolve_task_dates(start, end, duration)


def test_add_task_maps_unknown_topic_to_sentinel(sample_project):
    updated, task = add_task(sample_project, "Ship", "2024-02-01", duration=2, topic_id="ghost")
    assert task.topic_id == UNASSIGNED_TOPIC_ID
    assert task.end == "2024-02-02"
    assert updated.tasks[-1] == task
    assert len(sample_project.tasks) == 2


def test_add_task_requires_title(sample_project):
    with pytest.raises(ValidationError):
        add_task(sample_project, "  ", "2024-02-01", "2024-02-02")


def test_update_and_delete_task(sample_project):
    updated = update_task(sample_project, "t1", "Mockups", "2024-01-11", "2024-01-15", topic_id="build", desc="hi-fi")
    task = updated.task("t1")
    assert (task.title, task.start, task.end, task.topic_id, task.desc) == (
        "Mockups",
        "2024-01-11",
        "2024-01-15",
        "build",
        "hi-fi",
    )
    with pytest.raises(NotFoundError):
        update_task(sample_project, "missing", "X", "2024-01-01", "2024-01-02")
    with pytest.raises(ValidationError):
        update_task(sample_project, "t1", "X", "2024-01-01", "")

    trimmed = delete_task(updated, "t1")
    assert trimmed.task("t1") is None
    with pytest.raises(NotFoundError):
        delete_task(trimmed, "t1")


def test_task_table_rows_sorted_by_start(sample_project):
    rows = task_table_rows(sample_project)
    assert [row["id"] for row in rows] == ["t2", "t1"]
    assert rows[1]["duration_days"] == 3
    assert rows[1]["topic"] == "Design"
    assert rows[1]["color"] == "#ff0000"


def test_selection_defaults_and_restore(sample_project):
    assert default_selection(sample_project) == {UNASSIGNED_TOPIC_ID, "design", "build"}
    assert restore_selection(sample_project, None) == default_selection(sample_project)
    assert restore_selection(sample_project, ["design"]) == {"design"}
    assert restore_selection(sample_project, []) == set()
    assert default_selection(Project()) == {UNASSIGNED_TOPIC_ID}
