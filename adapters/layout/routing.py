from __future__ import annotations

import math
from dataclasses import dataclass

from domain.models import Point, Rect


@dataclass(frozen=True)
class Route:
    from_point: Point
    to_point: Point


def route(from_rect: Rect, to_rect: Rect) -> Route:
    from_center = from_rect.center
    to_center = to_rect.center
    dx = to_center.x - from_center.x
    dy = to_center.y - from_center.y

    if abs(dx) > abs(dy):
        if dx > 0:
            return Route(
                from_point=Point(from_rect.right, from_center.y),
                to_point=Point(to_rect.x, to_center.y),
            )
        return Route(
            from_point=Point(from_rect.x, from_center.y),
            to_point=Point(to_rect.right, to_center.y),
        )
    # Ties anchor vertically.
    if dy > 0:
        return Route(
            from_point=Point(from_center.x, from_rect.bottom),
            to_point=Point(to_center.x, to_rect.y),
        )
    return Route(
        from_point=Point(from_center.x, from_rect.y),
        to_point=Point(to_center.x, to_rect.bottom),
    )


def place_label(from_point: Point, to_point: Point, offset: float = 0.0) -> Point:
    mid_x = (from_point.x + to_point.x) / 2
    mid_y = (from_point.y + to_point.y) / 2
    dx = to_point.x - from_point.x
    dy = to_point.y - from_point.y
    length = math.hypot(dx, dy)
    if not offset or length == 0:
        return Point(mid_x, mid_y)
    return Point(mid_x - dy / length * offset, mid_y + dx / length * offset)


def is_on_boundary(point: Point, rect: Rect, tolerance: float = 1e-9) -> bool:
    within_x = rect.x - tolerance <= point.x <= rect.right + tolerance
    within_y = rect.y - tolerance <= point.y <= rect.bottom + tolerance
    if not (within_x and within_y):
        return False
    return (
        abs(point.x - rect.x) <= tolerance
        or abs(point.x - rect.right) <= tolerance
        or abs(point.y - rect.y) <= tolerance
        or abs(point.y - rect.bottom) <= tolerance
    )
