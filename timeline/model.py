from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

UNASSIGNED_TOPIC_ID = "unassigned"
UNASSIGNED_TOPIC_NAME = "לא משויך"
DEFAULT_TOPIC_COLOR = "#9aa4b2"
NEW_TOPIC_COLOR = "#1f77b4"
DEFAULT_PROJECT_NAME = "פרויקט"
UNTITLED_PROJECT_NAME = "פרויקט ללא שם"


@dataclass(frozen=True)
class Topic:
    id: str
    name: str
    color: str = DEFAULT_TOPIC_COLOR

    @property
    def is_sentinel(self) -> bool:
        return self.id == UNASSIGNED_TOPIC_ID

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}


@dataclass(frozen=True)
class Task:
    id: str
    topic_id: str
    title: str
    start: str
    end: str
    desc: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "topicId": self.topic_id,
            "title": self.title,
            "desc": self.desc,
            "start": self.start,
            "end": self.end,
        }


SENTINEL_TOPIC = Topic(UNASSIGNED_TOPIC_ID, UNASSIGNED_TOPIC_NAME, DEFAULT_TOPIC_COLOR)


@dataclass(frozen=True)
class Project:
    name: str = DEFAULT_PROJECT_NAME
    topics: Tuple[Topic, ...] = (SENTINEL_TOPIC,)
    tasks: Tuple[Task, ...] = field(default_factory=tuple)

    def topic(self, topic_id: str) -> Optional[Topic]:
        for topic in self.topics:
            if topic.id == topic_id:
                return topic
        return None

    def task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def topic_for_task(self, task: Task) -> Topic:
        return self.topic(task.topic_id) or SENTINEL_TOPIC

    def as_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "topics": [topic.as_dict() for topic in self.topics],
            "tasks": [task.as_dict() for task in self.tasks],
        }


def new_id() -> str:
    return uuid4().hex


def slug_id(name: str) -> str:
    slug = re.sub(r"\s+", "-", str(name or "").strip().lower())
    return slug or new_id()


def color_from_name(name: str) -> str:
    value = 0
    raw = str(name or "").encode("utf-16-le")
    for offset in range(0, len(raw), 2):
        value = (value * 31 + int.from_bytes(raw[offset : offset + 2], "little")) & 0xFFFFFFFF
    return f"hsl({value % 360} 70% 60%)"


def safe_file_name(name: str) -> str:
    return re.sub(r"[^\w\u0590-\u05ff-]+", "_", str(name or "project"), flags=re.ASCII)[:80]


def _as_list(value) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _text(value, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def normalize_topics(raw_topics: Iterable[Any]) -> Tuple[Topic, ...]:
    topics = []
    for item in raw_topics:
        if isinstance(item, Topic):
            topics.append(item)
            continue
        if not isinstance(item, dict):
            continue
        topics.append(
            Topic(
                id=_text(item.get("id")),
                name=_text(item.get("name")),
                color=_text(item.get("color"), DEFAULT_TOPIC_COLOR),
            )
        )
    if not any(topic.id == UNASSIGNED_TOPIC_ID for topic in topics):
        topics.insert(0, SENTINEL_TOPIC)
    return tuple(topics)


def normalize_tasks(raw_tasks: Iterable[Any]) -> Tuple[Task, ...]:
    tasks = []
    for item in raw_tasks:
        if isinstance(item, Task):
            tasks.append(item)
            continue
        if not isinstance(item, dict):
            continue
        tasks.append(
            Task(
                id=_text(item.get("id")) or new_id(),
                topic_id=_text(item.get("topicId", item.get("topic_id")), UNASSIGNED_TOPIC_ID),
                title=_text(item.get("title")),
                desc=_text(item.get("desc")),
                start=_text(item.get("start")),
                end=_text(item.get("end")),
            )
        )
    return tuple(tasks)


def normalize_project(document: Dict[str, Any] | None) -> Project:
    payload = document if isinstance(document, dict) else {}
    return Project(
        name=_text(payload.get("name"), DEFAULT_PROJECT_NAME),
        topics=normalize_topics(_as_list(payload.get("topics"))),
        tasks=normalize_tasks(_as_list(payload.get("tasks"))),
    )


def new_project(name: str | None = None) -> Project:
    return Project(name=(name or "").strip() or UNTITLED_PROJECT_NAME)
