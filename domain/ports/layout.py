from __future__ import annotations

from typing import Protocol

from domain.models import ArchitectureDocument, PositionedLayout


class LayoutEngine(Protocol):
    def build_plan(self, document: ArchitectureDocument) -> PositionedLayout:
        ...
