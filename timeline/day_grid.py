from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from timeline import dates


@dataclass(frozen=True)
class WeekSegment:
    week_number: int
    start_index: int
    end_index: int

    @property
    def length(self) -> int:
        return self.end_index - self.start_index


@dataclass(frozen=True)
class MonthSegment:
    label: str
    start_index: int
    end_index: int
    width: float


def build_days(min_date, max_date) -> List[str]:
    count = dates.day_difference(min_date, max_date) + 1
    first = dates.normalize(min_date)
    return [dates.add_days(first, offset) for offset in range(max(count, 0))]


def build_week_segments(days: Sequence[str]) -> List[WeekSegment]:
    segments: List[WeekSegment] = []
    if not days:
        return segments
    seg_start = 0
    week = dates.iso_week_number(days[0])
    for idx in range(1, len(days)):
        if dates.is_week_start(days[idx]):
            segments.append(WeekSegment(week, seg_start, idx))
            seg_start = idx
            week = dates.iso_week_number(days[idx])
    segments.append(WeekSegment(week, seg_start, len(days)))
    return segments


def build_month_segments(days: Sequence[str], day_width: float) -> List[MonthSegment]:
    segments: List[MonthSegment] = []
    if not days:
        return segments
    seg_start = 0
    label = dates.month_label(days[0])
    for idx in range(1, len(days)):
        current = dates.month_label(days[idx])
        if current != label:
            segments.append(MonthSegment(label, seg_start, idx, (idx - seg_start) * day_width))
            seg_start = idx
            label = current
    segments.append(MonthSegment(label, seg_start, len(days), (len(days) - seg_start) * day_width))
    return segments


def day_labels(days: Sequence[str]) -> List[str]:
    return [dates.format_day_month(day) for day in days]
