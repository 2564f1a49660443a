from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from timeline import dates

MIN_DAY_WIDTH = 16
MAX_DAY_WIDTH = 48
DEFAULT_DAY_WIDTH = 26
ZOOM_STEP = 2


def clamp(value, low, high):
    return max(low, min(high, value))


def clamp_day_width(value) -> int:
    try:
        width = int(round(float(value)))
    except (TypeError, ValueError):
        return DEFAULT_DAY_WIDTH
    return clamp(width, MIN_DAY_WIDTH, MAX_DAY_WIDTH)


def zoom(day_width, direction: int) -> int:
    if direction == 0:
        return DEFAULT_DAY_WIDTH
    step = ZOOM_STEP if direction > 0 else -ZOOM_STEP
    return clamp_day_width(int(day_width) + step)


@dataclass(frozen=True)
class CoordinateMapper:
    day_width: int
    day_count: int
    mirrored: bool = True

    def left_edge(self, index: int) -> float:
        return index * self.day_width

    @property
    def total_width(self) -> float:
        return self.left_edge(self.day_count)

    @property
    def boundary_x(self) -> float:
        # Edge of the day column that faces the label column.
        return self.total_width if self.mirrored else 0

    def cell_left(self, index: int) -> float:
        if self.mirrored:
            return self.total_width - (index + 1) * self.day_width
        return self.left_edge(index)

    def center(self, index: int) -> float:
        return self.cell_left(index) + self.day_width / 2

    def clamp_index(self, index: int) -> int:
        return clamp(int(index), 0, max(self.day_count - 1, 0))

    def span(self, first: int, second: int) -> tuple[float, float]:
        x1 = self.center(first)
        x2 = self.center(second)
        return min(x1, x2), abs(x2 - x1)

    def today_index(self, first_day, today: date | None = None) -> int:
        today = today or date.today()
        return self.clamp_index(round(dates.day_difference(first_day, today)))

    def today_x(self, first_day, today: date | None = None) -> float:
        return self.center(self.today_index(first_day, today))
