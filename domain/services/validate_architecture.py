from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from domain.errors import ArchitectureValidationError, FieldIssue
from domain.models import ArchitectureDocument, DuplicateNodeIdError

ROOT_PATH = "<root>"
NESTING_TOO_DEEP = "node nesting is too deep (about 250 levels is the limit)"


def parse_architecture(payload: Mapping[str, Any] | ArchitectureDocument) -> ArchitectureDocument:
    if isinstance(payload, ArchitectureDocument):
        return payload
    if not isinstance(payload, Mapping):
        raise ArchitectureValidationError(
            [FieldIssue(ROOT_PATH, f"expected an object, got {type(payload).__name__}")]
        )
    try:
        return ArchitectureDocument.model_validate(dict(payload))
    except ValidationError as exc:
        raise ArchitectureValidationError(_issues_from(exc)) from exc


def _issues_from(exc: ValidationError) -> list[FieldIssue]:
    issues: list[FieldIssue] = []
    for error in exc.errors():
        cause = (error.get("ctx") or {}).get("error")
        if isinstance(cause, DuplicateNodeIdError):
            issues.append(FieldIssue(cause.path, str(cause)))
            continue
        if error.get("type") == "recursion_loop":
            issues.append(FieldIssue(format_field_path(error.get("loc", ())), NESTING_TOO_DEEP))
            continue
        issues.append(FieldIssue(format_field_path(error.get("loc", ())), error.get("msg", "")))
    return issues


def format_field_path(loc: tuple[int | str, ...] | list[int | str]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or ROOT_PATH
