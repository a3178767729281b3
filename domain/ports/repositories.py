from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from domain.models import ArchitectureDocument, ExcalidrawDocument


class ArchitectureRepository(Protocol):
    def load_raw(self, path: Path) -> dict[str, Any]: ...

    def load_by_path(self, path: Path) -> ArchitectureDocument: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, ArchitectureDocument]]: ...


class ExcalidrawRepository(Protocol):
    def load_by_path(self, path: Path) -> ExcalidrawDocument: ...

    def save(self, document: ExcalidrawDocument, path: Path) -> None: ...
