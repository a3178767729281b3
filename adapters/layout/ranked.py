from __future__ import annotations

from collections.abc import Mapping, Sequence

from adapters.layout.config import LayoutConfig
from domain.models import Point, Size

VERTICAL_DIRECTIONS = {"TB", "BT"}
MIRRORED_DIRECTIONS = {"BT", "RL"}


def place_ranks(
    ranks: Sequence[Sequence[str]],
    sizes: Mapping[str, Size],
    direction: str,
    node_spacing: float,
    rank_spacing: float,
    config: LayoutConfig,
) -> dict[str, Point]:
    vertical = direction in VERTICAL_DIRECTIONS
    mirrored = direction in MIRRORED_DIRECTIONS

    def main_size(node_id: str) -> float:
        size = sizes[node_id]
        return size.height if vertical else size.width

    def cross_size(node_id: str) -> float:
        size = sizes[node_id]
        return size.width if vertical else size.height

    ranks = [list(rank) for rank in ranks if rank]
    bands = [max(main_size(node_id) for node_id in rank) for rank in ranks]
    rows = [
        sum(cross_size(node_id) for node_id in rank) + node_spacing * (len(rank) - 1)
        for rank in ranks
    ]
    total_extent = sum(bands) + rank_spacing * max(len(ranks) - 1, 0)
    canvas_cross = config.canvas_width if vertical else config.canvas_height
    midline = max(canvas_cross, max(rows, default=0.0) + 2 * config.padding) / 2

    origins: dict[str, Point] = {}
    offset = 0.0
    for rank, band, row in zip(ranks, bands, rows):
        band_start = config.padding + offset
        if mirrored:
            band_start = config.padding + total_extent - offset - band
        cursor = midline - row / 2
        for node_id in rank:
            main = band_start + (band - main_size(node_id)) / 2
            origins[node_id] = Point(cursor, main) if vertical else Point(main, cursor)
            cursor += cross_size(node_id) + node_spacing
        offset += band + rank_spacing
    return origins
