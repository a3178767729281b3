from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from adapters.filesystem.json_utils import loads_object
from domain.models import ArchitectureDocument
from domain.ports.repositories import ArchitectureRepository
from domain.services.validate_architecture import parse_architecture


class FileSystemArchitectureRepository(ArchitectureRepository):
    def load_raw(self, path: Path) -> dict[str, Any]:
        text = path.read_text(encoding="utf-8")
        return loads_object(self._strip_comments(text), origin=str(path))

    def load_by_path(self, path: Path) -> ArchitectureDocument:
        return parse_architecture(self.load_raw(path))

    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, ArchitectureDocument]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        yield from directory.glob("*.json")

    def _strip_comments(self, content: str) -> str:
        result_lines: list[str] = []
        for line in content.splitlines():
            in_string = False
            escaped = False
            cleaned: list[str] = []
            for idx, char in enumerate(line):
                if char == '"' and not escaped:
                    in_string = not in_string
                if not in_string and char == "/" and line[idx + 1 : idx + 2] == "/":
                    break
                cleaned.append(char)
                escaped = char == "\\" and not escaped
            result_lines.append("".join(cleaned))
        return "\n".join(result_lines)


@dataclass(frozen=True)
class FileArchitectureSource:
    path: Path
    repository: ArchitectureRepository = field(default_factory=FileSystemArchitectureRepository)

    def load(self) -> ArchitectureDocument:
        return self.repository.load_by_path(self.path)
