from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    canvas_width: float = 1200.0
    canvas_height: float = 800.0
    padding: float = 50.0
    node_spacing: float = 80.0
    rank_spacing: float = 100.0
    layered_rank_spacing: float = 120.0
    group_padding: float = 20.0
    label_offset: float = 0.0
    child_padding_top: float = 40.0
    child_padding_side: float = 20.0
    child_gap: float = 10.0
