from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def loads_object(content: bytes | str, origin: str = "<memory>") -> dict[str, Any]:
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {origin}: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {origin}, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def load_json(path: Path) -> dict[str, Any]:
    return loads_object(path.read_bytes(), origin=str(path))


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS)


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)
