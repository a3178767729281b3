from __future__ import annotations

from typing import Protocol

from domain.models import ArchitectureDocument


class ArchitectureSource(Protocol):
    def load(self) -> ArchitectureDocument: ...
