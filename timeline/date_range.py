from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from timeline import dates
from timeline.model import Task

MIN_VISIBLE_DAYS = 30
EDGE_PADDING_DAYS = 2
EMPTY_DAYS_BEFORE = 15
EMPTY_DAYS_AFTER = 45


@dataclass(frozen=True)
class DateRange:
    min: str
    max: str

    @property
    def span_days(self) -> int:
        return dates.duration_days(self.min, self.max)


def min_visible_days(viewport_width: float, day_width: float) -> int:
    if not viewport_width or viewport_width <= 0 or day_width <= 0:
        return MIN_VISIBLE_DAYS
    return max(MIN_VISIBLE_DAYS, math.ceil(viewport_width / day_width))


def _task_bounds(tasks: Iterable[Task]) -> tuple[str | None, str | None]:
    low = None
    high = None
    for task in tasks:
        start = dates.try_normalize(task.start)
        end = dates.try_normalize(task.end)
        if start and (low is None or start < low):
            low = start
        if end and (high is None or end > high):
            high = end
    if low is None and high is not None:
        low = high
    if high is None and low is not None:
        high = low
    return low, high


def resolve_date_range(
    tasks: Iterable[Task],
    min_days: int = MIN_VISIBLE_DAYS,
    today: date | None = None,
) -> DateRange:
    low, high = _task_bounds(tasks)
    if low is None:
        today = today or date.today()
        low = dates.add_days(today, -EMPTY_DAYS_BEFORE)
        high = dates.add_days(today, EMPTY_DAYS_AFTER)
    else:
        if high < low:
            low, high = high, low
        low = dates.add_days(low, -EDGE_PADDING_DAYS)
        high = dates.add_days(high, EDGE_PADDING_DAYS)

    span = dates.duration_days(low, high)
    wanted = max(1, int(min_days or 1))
    if span < wanted:
        # Only the late edge grows so early dates stay put across resizes.
        high = dates.add_days(high, wanted - span)
    return DateRange(low, high)
