from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List

from timeline import dates
from timeline.errors import NotFoundError, ValidationError
from timeline.model import (
    NEW_TOPIC_COLOR,
    UNASSIGNED_TOPIC_ID,
    Project,
    Task,
    Topic,
    new_id,
    slug_id,
)


def _clean(value) -> str:
    return str(value or "").strip()


def add_topic(project: Project, name: str, color: str | None = None) -> tuple[Project, Topic]:
    name = _clean(name)
    if not name:
        raise ValidationError("Topic name is required")
    topic = Topic(id=slug_id(name), name=name, color=color or NEW_TOPIC_COLOR)
    if project.topic(topic.id) is not None:
        raise ValidationError(f"Topic '{topic.id}' already exists")
    return replace(project, topics=project.topics + (topic,)), topic


def update_topic(project: Project, topic_id: str, name: str, color: str | None = None) -> Project:
    if topic_id == UNASSIGNED_TOPIC_ID:
        raise ValidationError("The unassigned topic cannot be changed")
    current = project.topic(topic_id)
    if current is None:
        raise NotFoundError(f"Topic not found: {topic_id}")
    name = _clean(name)
    if not name:
        raise ValidationError("Topic name is required")
    updated = replace(current, name=name, color=color or current.color)
    topics = tuple(updated if topic.id == topic_id else topic for topic in project.topics)
    return replace(project, topics=topics)


def delete_topic(project: Project, topic_id: str) -> Project:
    if topic_id == UNASSIGNED_TOPIC_ID:
        raise ValidationError("The unassigned topic cannot be deleted")
    if project.topic(topic_id) is None:
        raise NotFoundError(f"Topic not found: {topic_id}")
    tasks = tuple(
        replace(task, topic_id=UNASSIGNED_TOPIC_ID) if task.topic_id == topic_id else task
        for task in project.tasks
    )
    topics = tuple(topic for topic in project.topics if topic.id != topic_id)
    return replace(project, topics=topics, tasks=tasks)


def resolve_task_dates(start, end=None, duration=None) -> tuple[str, str]:
    start_text = _clean(start)
    if not start_text:
        raise ValidationError("Start date is required")
    start_iso = dates.try_normalize(start_text)
    if start_iso is None:
        raise ValidationError("Dates must be YYYY-MM-DD")
    end_text = _clean(end)
    if not end_text and duration not in (None, ""):
        end_text = dates.end_from_duration(start_iso, duration) or ""
    if not end_text:
        raise ValidationError("End date or duration is required")
    end_iso = dates.try_normalize(end_text)
    if end_iso is None:
        raise ValidationError("Dates must be YYYY-MM-DD")
    if end_iso < start_iso:
        raise ValidationError("End date cannot be before start date")
    return start_iso, end_iso


def _task_fields(project: Project, topic_id, title, desc, start, end, duration) -> Dict[str, Any]:
    title = _clean(title)
    if not title:
        raise ValidationError("Task title is required")
    start_iso, end_iso = resolve_task_dates(start, end, duration)
    topic_id = _clean(topic_id)
    if project.topic(topic_id) is None:
        topic_id = UNASSIGNED_TOPIC_ID
    return {
        "topic_id": topic_id,
        "title": title,
        "desc": _clean(desc),
        "start": start_iso,
        "end": end_iso,
    }


def add_task(
    project: Project,
    title: str,
    start,
    end=None,
    duration=None,
    topic_id: str = UNASSIGNED_TOPIC_ID,
    desc: str = "",
) -> tuple[Project, Task]:
    fields = _task_fields(project, topic_id, title, desc, start, end, duration)
    task = Task(id=new_id(), **fields)
    return replace(project, tasks=project.tasks + (task,)), task


def update_task(
    project: Project,
    task_id: str,
    title: str,
    start,
    end,
    topic_id: str = UNASSIGNED_TOPIC_ID,
    desc: str = "",
) -> Project:
    current = project.task(task_id)
    if current is None:
        raise NotFoundError(f"Task not found: {task_id}")
    if not _clean(end):
        raise ValidationError("End date is required")
    fields = _task_fields(project, topic_id, title, desc, start, end, None)
    updated = replace(current, **fields)
    tasks = tuple(updated if task.id == task_id else task for task in project.tasks)
    return replace(project, tasks=tasks)


def delete_task(project: Project, task_id: str) -> Project:
    if project.task(task_id) is None:
        raise NotFoundError(f"Task not found: {task_id}")
    return replace(project, tasks=tuple(task for task in project.tasks if task.id != task_id))


def task_duration(task: Task) -> int | None:
    if not task.start or not task.end:
        return None
    try:
        return dates.duration_days(task.start, task.end)
    except ValueError:
        return None


def task_table_rows(project: Project) -> List[Dict[str, Any]]:
    rows = []
    for task in sorted(project.tasks, key=lambda item: item.start or ""):
        topic = project.topic_for_task(task)
        rows.append(
            {
                "id": task.id,
                "topic": topic.name,
                "color": topic.color,
                "title": task.title,
                "start": task.start,
                "end": task.end,
                "duration_days": task_duration(task),
                "desc": task.desc,
            }
        )
    return rows


def default_selection(project: Project) -> set[str]:
    return {topic.id for topic in project.topics}


def restore_selection(project: Project, saved) -> set[str]:
    if not isinstance(saved, (list, tuple, set)):
        return default_selection(project)
    return {str(item) for item in saved}
