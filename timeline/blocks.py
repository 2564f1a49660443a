from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from timeline import dates
from timeline.coords import CoordinateMapper
from timeline.model import UNASSIGNED_TOPIC_ID, Project, Task, Topic

ROW_RANGE = "range"
ROW_SINGLE = "single"
ROW_PLACEHOLDER = "placeholder"

PIN_SIZE = 10


@dataclass(frozen=True)
class RowGeometry:
    connector_left: float
    connector_width: float
    start_pin_left: float
    start_tag_x: float
    range_left: Optional[float] = None
    range_width: Optional[float] = None
    end_pin_left: Optional[float] = None
    end_tag_x: Optional[float] = None


@dataclass(frozen=True)
class RowLayout:
    kind: str
    topic_id: str
    task_id: Optional[str] = None
    title: str = ""
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    start_label: str = ""
    end_label: str = ""
    geometry: Optional[RowGeometry] = None

    @property
    def has_start_pin(self) -> bool:
        return self.kind != ROW_PLACEHOLDER


@dataclass(frozen=True)
class TopicBlock:
    topic: Topic
    visible: bool
    rows: Tuple[RowLayout, ...]


def group_tasks(project: Project) -> Dict[str, List[Task]]:
    groups: Dict[str, List[Task]] = {topic.id: [] for topic in project.topics}
    for task in project.tasks:
        topic_id = task.topic_id if task.topic_id in groups else UNASSIGNED_TOPIC_ID
        groups.setdefault(topic_id, []).append(task)
    return {topic_id: sorted(items, key=lambda task: task.start or "") for topic_id, items in groups.items()}


def _resolve_index(days: Sequence[str], value, mapper: CoordinateMapper) -> int:
    iso = dates.try_normalize(value)
    if iso is None or not days:
        return 0
    return mapper.clamp_index(dates.day_difference(days[0], iso))


def position_row(row: RowLayout, mapper: CoordinateMapper) -> Optional[RowGeometry]:
    if row.kind == ROW_PLACEHOLDER or row.start_index is None:
        return None
    start_x = mapper.center(row.start_index)
    boundary = mapper.boundary_x
    geometry = {
        "connector_left": min(start_x, boundary),
        "connector_width": abs(boundary - start_x),
        "start_pin_left": start_x - PIN_SIZE / 2,
        "start_tag_x": start_x,
    }
    if row.kind == ROW_RANGE and row.end_index is not None:
        range_left, range_width = mapper.span(row.start_index, row.end_index)
        end_x = mapper.center(row.end_index)
        geometry.update(
            range_left=range_left,
            range_width=range_width,
            end_pin_left=end_x - PIN_SIZE / 2,
            end_tag_x=end_x,
        )
    return RowGeometry(**geometry)


def layout_task_row(task: Task, topic_id: str, days: Sequence[str], mapper: CoordinateMapper) -> RowLayout:
    start_index = _resolve_index(days, task.start, mapper)
    end_index = _resolve_index(days, task.end, mapper)
    start_label = dates.format_day_month(task.start) if dates.try_normalize(task.start) else ""
    end_label = dates.format_day_month(task.end) if dates.try_normalize(task.end) else ""
    kind = ROW_RANGE if end_index > start_index else ROW_SINGLE
    row = RowLayout(
        kind=kind,
        topic_id=topic_id,
        task_id=task.id,
        title=task.title,
        start_index=start_index,
        end_index=end_index if kind == ROW_RANGE else start_index,
        start_label=start_label,
        end_label=end_label if kind == ROW_RANGE else "",
    )
    return replace(row, geometry=position_row(row, mapper))


def layout_blocks(
    project: Project,
    days: Sequence[str],
    mapper: CoordinateMapper,
    visible_topic_ids: Optional[Iterable[str]] = None,
) -> List[TopicBlock]:
    visible = None if visible_topic_ids is None else set(visible_topic_ids)
    groups = group_tasks(project)
    blocks = []
    for topic in project.topics:
        tasks = groups.get(topic.id, [])
        rows = tuple(layout_task_row(task, topic.id, days, mapper) for task in tasks)
        if not rows:
            rows = (RowLayout(kind=ROW_PLACEHOLDER, topic_id=topic.id),)
        blocks.append(
            TopicBlock(
                topic=topic,
                visible=visible is None or topic.id in visible,
                rows=rows,
            )
        )
    return blocks
