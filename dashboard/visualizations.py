from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import plotly.graph_objects as go

from timeline.blocks import PIN_SIZE, ROW_RANGE
from timeline.coords import CoordinateMapper
from timeline.layout import LayoutResult
from timeline.links import Box, PinAnchor, compute_link_lines


HEADER_BAND_HEIGHT = 20
HEADER_HEIGHT = HEADER_BAND_HEIGHT * 3
ROW_HEIGHT = 28
LABEL_COLUMN_WIDTH = 220
GRID_COLOR = "#e6e8ec"
HEADER_FILL = "#f4f5f7"
TODAY_COLOR = "#d95252"
TEXT_COLOR = "#2b2f36"
SOFT_TEXT_COLOR = "#6b7280"


@dataclass(frozen=True)
class FigureGeometry:
    label_width: float = LABEL_COLUMN_WIDTH
    row_height: float = ROW_HEIGHT
    header_height: float = HEADER_HEIGHT
    scroll_x: float = 0


def day_origin(layout: LayoutResult, geometry: FigureGeometry) -> float:
    # Day column sits left of the labels when mirrored.
    return 0 if layout.mirrored else geometry.label_width


def count_rows(layout: LayoutResult) -> int:
    return sum(1 + len(block.rows) for block in layout.visible_blocks())


def container_box(layout: LayoutResult, geometry: FigureGeometry) -> Box:
    height = geometry.header_height + count_rows(layout) * geometry.row_height
    return Box(0, 0, layout.total_width + geometry.label_width, height)


def label_column_box(layout: LayoutResult, geometry: FigureGeometry) -> Box:
    container = container_box(layout, geometry)
    left = layout.total_width if layout.mirrored else 0
    return Box(left, 0, geometry.label_width, container.height)


def plotly_color(color: str) -> str:
    # Plotly only accepts the comma form of hsl().
    text = str(color or "").strip()
    if text.startswith("hsl(") and "," not in text:
        return "hsl(" + ",".join(text[4:-1].split()) + ")"
    return text


def _cells_bounds(mapper: CoordinateMapper, first: int, last: int) -> Tuple[float, float]:
    a = mapper.cell_left(first)
    b = mapper.cell_left(last)
    return min(a, b), max(a, b) + mapper.day_width


def measure_pin_anchors(layout: LayoutResult, geometry: FigureGeometry | None = None) -> List[PinAnchor]:
    geometry = geometry or FigureGeometry()
    origin = day_origin(layout, geometry) - geometry.scroll_x
    anchors = []
    row_top = geometry.header_height
    for block in layout.visible_blocks():
        row_top += geometry.row_height
        for row in block.rows:
            if row.has_start_pin and row.geometry is not None:
                pin = Box(
                    origin + row.geometry.start_pin_left,
                    row_top + (geometry.row_height - PIN_SIZE) / 2,
                    PIN_SIZE,
                    PIN_SIZE,
                )
                anchors.append(PinAnchor(block.topic.id, row.task_id, pin, block.topic.color, block.visible))
            row_top += geometry.row_height
    return anchors


def build_link_lines(layout: LayoutResult, geometry: FigureGeometry | None = None):
    geometry = geometry or FigureGeometry()
    return compute_link_lines(
        container_box(layout, geometry),
        label_column_box(layout, geometry),
        measure_pin_anchors(layout, geometry),
        layout.mirrored,
    )


def _add_header(fig, layout: LayoutResult, origin: float):
    mapper = layout.mapper
    band = HEADER_BAND_HEIGHT
    for month in layout.months:
        x0, x1 = _cells_bounds(mapper, month.start_index, month.end_index - 1)
        fig.add_shape(
            type="rect", x0=origin + x0, x1=origin + x1, y0=0, y1=band,
            fillcolor=HEADER_FILL, line=dict(color=GRID_COLOR, width=1), layer="below",
        )
        fig.add_annotation(
            x=origin + (x0 + x1) / 2, y=band / 2, text=month.label, showarrow=False,
            font=dict(size=11, color=TEXT_COLOR),
        )
    for week in layout.weeks:
        x0, x1 = _cells_bounds(mapper, week.start_index, week.end_index - 1)
        fig.add_shape(
            type="rect", x0=origin + x0, x1=origin + x1, y0=band, y1=band * 2,
            fillcolor="rgba(0,0,0,0)", line=dict(color=GRID_COLOR, width=1), layer="below",
        )
        if week.length * layout.day_width >= 24:
            fig.add_annotation(
                x=origin + (x0 + x1) / 2, y=band * 1.5, text=f"W{week.week_number}", showarrow=False,
                font=dict(size=10, color=SOFT_TEXT_COLOR),
            )
    fig.add_trace(
        go.Scatter(
            x=[origin + left + layout.day_width / 2 for left in layout.cell_lefts],
            y=[band * 2.5] * len(layout.cell_lefts),
            text=list(layout.day_labels),
            mode="text",
            textfont=dict(size=8, color=SOFT_TEXT_COLOR),
            hoverinfo="skip",
            showlegend=False,
        )
    )


def _add_rows(fig, layout: LayoutResult, origin: float, geometry: FigureGeometry):
    label_left = layout.total_width if layout.mirrored else 0
    label_anchor_x = label_left + geometry.label_width - 8 if layout.mirrored else label_left + 8
    label_align = "right" if layout.mirrored else "left"
    row_top = geometry.header_height
    for block in layout.visible_blocks():
        fig.add_shape(
            type="rect", x0=0, x1=layout.total_width + geometry.label_width,
            y0=row_top, y1=row_top + geometry.row_height,
            fillcolor=HEADER_FILL, line=dict(width=0), layer="below",
        )
        fig.add_annotation(
            x=label_anchor_x, y=row_top + geometry.row_height / 2, text=f"<b>{block.topic.name}</b>",
            showarrow=False, xanchor=label_align, font=dict(color=plotly_color(block.topic.color), size=12),
        )
        row_top += geometry.row_height
        for row in block.rows:
            mid = row_top + geometry.row_height / 2
            if row.title:
                fig.add_annotation(
                    x=label_anchor_x, y=mid, text=row.title, showarrow=False, xanchor=label_align,
                    font=dict(color=TEXT_COLOR, size=11),
                )
            shape = row.geometry
            if shape is not None:
                fig.add_shape(
                    type="line", x0=origin + shape.connector_left, x1=origin + shape.connector_left + shape.connector_width,
                    y0=mid, y1=mid, line=dict(color=GRID_COLOR, width=1, dash="dot"),
                )
                if row.kind == ROW_RANGE and shape.range_left is not None:
                    fig.add_shape(
                        type="rect", x0=origin + shape.range_left, x1=origin + shape.range_left + shape.range_width,
                        y0=mid - 3, y1=mid + 3, fillcolor=plotly_color(block.topic.color), opacity=0.55, line=dict(width=0),
                    )
                    _add_pin(fig, origin + shape.end_pin_left, mid, plotly_color(block.topic.color))
                    fig.add_annotation(
                        x=origin + shape.end_tag_x, y=mid - PIN_SIZE, text=row.end_label, showarrow=False,
                        font=dict(size=9, color=SOFT_TEXT_COLOR),
                    )
                _add_pin(fig, origin + shape.start_pin_left, mid, plotly_color(block.topic.color))
                fig.add_annotation(
                    x=origin + shape.start_tag_x, y=mid - PIN_SIZE, text=row.start_label, showarrow=False,
                    font=dict(size=9, color=SOFT_TEXT_COLOR),
                )
            row_top += geometry.row_height


def _add_pin(fig, left, mid, color):
    fig.add_shape(
        type="rect", x0=left, x1=left + PIN_SIZE, y0=mid - PIN_SIZE / 2, y1=mid + PIN_SIZE / 2,
        fillcolor=color, line=dict(color="white", width=1),
    )


def build_timeline_figure(layout: LayoutResult, geometry: FigureGeometry | None = None):
    geometry = geometry or FigureGeometry()
    container = container_box(layout, geometry)
    origin = day_origin(layout, geometry)
    fig = go.Figure()

    _add_header(fig, layout, origin)

    for line in build_link_lines(layout, geometry):
        fig.add_shape(
            type="line", x0=line.x1, x1=line.x2, y0=line.y1, y1=line.y2,
            line=dict(color=plotly_color(line.color), width=1, dash="dash"), layer="below",
        )

    _add_rows(fig, layout, origin, geometry)

    today_x = origin + layout.today_x
    fig.add_shape(
        type="line", x0=today_x, x1=today_x, y0=geometry.header_height - HEADER_BAND_HEIGHT, y1=container.height,
        line=dict(color=TODAY_COLOR, width=2),
    )

    fig.update_layout(
        width=int(container.width),
        height=int(max(container.height, geometry.header_height + geometry.row_height)),
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(range=[0, container.width], visible=False, fixedrange=True),
        yaxis=dict(range=[max(container.height, 1), 0], visible=False, fixedrange=True),
        showlegend=False,
    )
    return fig
