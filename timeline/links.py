from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

MIN_CONTAINER_SIZE = 10
LINK_INSET = 6
DEFAULT_LINK_COLOR = "#ddd"


@dataclass(frozen=True)
class Box:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class PinAnchor:
    topic_id: str
    task_id: str | None
    pin: Box
    color: str = ""
    visible: bool = True


@dataclass(frozen=True)
class LinkLine:
    topic_id: str
    task_id: str | None
    x1: float
    y1: float
    x2: float
    y2: float
    color: str


def seam_x(container: Box, label_column: Box, mirrored: bool = True) -> float:
    # Mirrored layouts put the label column on the right of the day column.
    if mirrored:
        return label_column.left - container.left + LINK_INSET
    return label_column.right - container.left - LINK_INSET


def compute_link_lines(
    container: Box,
    label_column: Box,
    anchors: Iterable[PinAnchor],
    mirrored: bool = True,
) -> List[LinkLine]:
    if container.width < MIN_CONTAINER_SIZE or container.height < MIN_CONTAINER_SIZE:
        return []
    x1 = seam_x(container, label_column, mirrored)
    lines = []
    for anchor in anchors:
        if not anchor.visible:
            continue
        x2 = anchor.pin.center_x - container.left
        y = anchor.pin.center_y - container.top
        if not all(math.isfinite(value) for value in (x1, x2, y)):
            continue
        lines.append(
            LinkLine(
                topic_id=anchor.topic_id,
                task_id=anchor.task_id,
                x1=round(x1, 1),
                y1=round(y, 1),
                x2=round(x2, 1),
                y2=round(y, 1),
                color=anchor.color.strip() or DEFAULT_LINK_COLOR,
            )
        )
    return lines
