import math

from timeline.links import DEFAULT_LINK_COLOR, Box, PinAnchor, compute_link_lines, seam_x


CONTAINER = Box(0, 0, 620, 300)
LABELS_RIGHT = Box(400, 0, 220, 300)
LABELS_LEFT = Box(0, 0, 220, 300)


def test_seam_sits_inside_the_label_column():
    assert seam_x(CONTAINER, LABELS_RIGHT, mirrored=True) == 406
    assert seam_x(CONTAINER, LABELS_LEFT, mirrored=False) == 214


def test_one_line_per_visible_pin():
    anchors = [
        PinAnchor("design", "t1", Box(305, 70, 10, 10), "#ff0000"),
        PinAnchor("design", "t2", Box(100, 98, 10, 10), "", visible=False),
    ]
    lines = compute_link_lines(CONTAINER, LABELS_RIGHT, anchors, mirrored=True)
    assert len(lines) == 1
    line = lines[0]
    assert (line.x1, line.y1, line.x2, line.y2) == (406, 75, 310, 75)
    assert line.color == "#ff0000"
    assert line.task_id == "t1"


def test_coordinates_are_relative_to_the_container():
    container = Box(100, 50, 620, 300)
    labels = Box(500, 50, 220, 300)
    anchors = [PinAnchor("design", "t1", Box(405, 120, 10, 10), " ")]
    line = compute_link_lines(container, labels, anchors)[0]
    assert (line.x1, line.x2, line.y1) == (406, 310, 75)
    assert line.color == DEFAULT_LINK_COLOR


def test_values_are_rounded_to_one_decimal():
    anchors = [PinAnchor("design", "t1", Box(305.04, 70.02, 10, 10))]
    line = compute_link_lines(CONTAINER, LABELS_RIGHT, anchors)[0]
    assert line.x2 == 310.0
    assert line.y1 == 75.0


def test_degenerate_inputs_produce_nothing():
    anchors = [PinAnchor("design", "t1", Box(305, 70, 10, 10))]
    assert compute_link_lines(Box(0, 0, 5, 300), LABELS_RIGHT, anchors) == []
    assert compute_link_lines(Box(0, 0, 620, 0), LABELS_RIGHT, anchors) == []
    broken = [PinAnchor("design", "t1", Box(math.nan, 70, 10, 10))]
    assert compute_link_lines(CONTAINER, LABELS_RIGHT, broken) == []
