from __future__ import annotations

import math

from adapters.layout.routing import is_on_boundary, place_label, route
from domain.models import Point, Rect


def test_horizontal_route_uses_facing_sides() -> None:
    left = Rect(0, 0, 100, 50)
    right = Rect(300, 10, 100, 50)

    forward = route(left, right)
    backward = route(right, left)

    assert forward.from_point == Point(100, 25)
    assert forward.to_point == Point(300, 35)
    assert backward.from_point == Point(300, 35)
    assert backward.to_point == Point(100, 25)


def test_vertical_route_uses_top_and_bottom() -> None:
    top = Rect(0, 0, 100, 50)
    bottom = Rect(20, 200, 80, 40)

    down = route(top, bottom)
    up = route(bottom, top)

    assert down.from_point == Point(50, 50)
    assert down.to_point == Point(60, 200)
    assert up.from_point == Point(60, 200)
    assert up.to_point == Point(50, 50)


def test_diagonal_tie_anchors_vertically() -> None:
    origin = Rect(0, 0, 100, 100)
    diagonal = Rect(200, 200, 100, 100)

    anchors = route(origin, diagonal)

    assert anchors.from_point == Point(50, 100)
    assert anchors.to_point == Point(250, 200)


def test_anchors_always_lie_on_boundaries() -> None:
    source = Rect(400, 300, 140, 80)
    for angle in range(0, 360, 15):
        radians = math.radians(angle)
        target = Rect(
            400 + math.cos(radians) * 300,
            300 + math.sin(radians) * 300,
            110,
            70,
        )
        anchors = route(source, target)
        assert is_on_boundary(anchors.from_point, source)
        assert is_on_boundary(anchors.to_point, target)


def test_label_at_midpoint_without_offset() -> None:
    assert place_label(Point(0, 0), Point(100, 40)) == Point(50, 20)


def test_label_offset_is_perpendicular() -> None:
    start, end = Point(0, 0), Point(0, 100)

    label = place_label(start, end, offset=12)

    assert label == Point(-12, 50)
    direction = (end.x - start.x, end.y - start.y)
    shift = (label.x - 0, label.y - 50)
    assert direction[0] * shift[0] + direction[1] * shift[1] == 0


def test_label_on_zero_length_segment_stays_at_midpoint() -> None:
    assert place_label(Point(5, 5), Point(5, 5), offset=10) == Point(5, 5)


def test_is_on_boundary_rejects_interior_and_exterior_points() -> None:
    rect = Rect(0, 0, 10, 10)
    assert is_on_boundary(Point(0, 5), rect)
    assert is_on_boundary(Point(10, 10), rect)
    assert not is_on_boundary(Point(5, 5), rect)
    assert not is_on_boundary(Point(11, 5), rect)
