from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from timeline.blocks import TopicBlock, layout_blocks
from timeline.coords import DEFAULT_DAY_WIDTH, CoordinateMapper, clamp_day_width
from timeline.date_range import DateRange, min_visible_days, resolve_date_range
from timeline.day_grid import (
    MonthSegment,
    WeekSegment,
    build_days,
    build_month_segments,
    build_week_segments,
    day_labels,
)
from timeline.model import Project


@dataclass(frozen=True)
class ViewConfig:
    day_width: int = DEFAULT_DAY_WIDTH
    viewport_width: float = 0
    mirrored: bool = True
    visible_topic_ids: Optional[FrozenSet[str]] = None
    today: Optional[date] = None


@dataclass(frozen=True)
class LayoutResult:
    date_range: DateRange
    days: Tuple[str, ...]
    day_labels: Tuple[str, ...]
    weeks: Tuple[WeekSegment, ...]
    months: Tuple[MonthSegment, ...]
    day_width: int
    total_width: float
    mirrored: bool
    cell_lefts: Tuple[float, ...]
    today_index: int
    today_x: float
    blocks: Tuple[TopicBlock, ...] = field(default_factory=tuple)

    @property
    def mapper(self) -> CoordinateMapper:
        return CoordinateMapper(self.day_width, len(self.days), self.mirrored)

    def visible_blocks(self) -> List[TopicBlock]:
        return [block for block in self.blocks if block.visible]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_layout(project: Project, view: ViewConfig | None = None) -> LayoutResult:
    view = view or ViewConfig()
    day_width = clamp_day_width(view.day_width)
    date_range = resolve_date_range(
        project.tasks,
        min_visible_days(view.viewport_width, day_width),
        view.today,
    )
    days = build_days(date_range.min, date_range.max)
    mapper = CoordinateMapper(day_width, len(days), view.mirrored)
    blocks = layout_blocks(project, days, mapper, view.visible_topic_ids)
    return LayoutResult(
        date_range=date_range,
        days=tuple(days),
        day_labels=tuple(day_labels(days)),
        weeks=tuple(build_week_segments(days)),
        months=tuple(build_month_segments(days, day_width)),
        day_width=day_width,
        total_width=mapper.total_width,
        mirrored=view.mirrored,
        cell_lefts=tuple(mapper.cell_left(idx) for idx in range(len(days))),
        today_index=mapper.today_index(days[0], view.today),
        today_x=mapper.today_x(days[0], view.today),
        blocks=tuple(blocks),
    )
