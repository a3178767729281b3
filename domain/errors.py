from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ArchitectureValidationError(ValueError):
    def __init__(self, issues: list[FieldIssue]) -> None:
        self.issues = list(issues)
        summary = "; ".join(str(issue) for issue in self.issues) or "invalid architecture"
        super().__init__(f"Architecture validation failed: {summary}")

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]


class UnknownTemplateError(KeyError):
    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(name)
        self.name = name
        self.available = list(available)

    def __str__(self) -> str:
        return f"Template '{self.name}' not found (available: {', '.join(self.available)})"
