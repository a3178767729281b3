from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from adapters.layout.config import LayoutConfig
from domain.models import Point, Size


def grid_dimensions(count: int) -> tuple[int, int]:
    if count <= 0:
        return 0, 0
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    return cols, rows


def place_grid(
    node_ids: Sequence[str],
    sizes: Mapping[str, Size],
    node_spacing: float,
    row_spacing: float,
    config: LayoutConfig,
) -> dict[str, Point]:
    cols, _ = grid_dimensions(len(node_ids))
    if not cols:
        return {}
    cell_width = max(sizes[node_id].width for node_id in node_ids)
    cell_height = max(sizes[node_id].height for node_id in node_ids)

    origins: dict[str, Point] = {}
    for index, node_id in enumerate(node_ids):
        row, col = divmod(index, cols)
        size = sizes[node_id]
        origins[node_id] = Point(
            x=config.padding + col * (cell_width + node_spacing) + (cell_width - size.width) / 2,
            y=config.padding + row * (cell_height + row_spacing) + (cell_height - size.height) / 2,
        )
    return origins
