from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from adapters.layout.config import LayoutConfig
from adapters.layout.engine import ArchitectureLayoutEngine
from domain.services.convert_architecture_to_excalidraw import ArchitectureToExcalidrawConverter
from domain.services.generate_diagram import DiagramGenerator
from domain.services.render_context import RenderContext


def _clear_archdraw_env() -> None:
    for key in list(os.environ):
        if key.startswith("ARCHDRAW_"):
            os.environ.pop(key, None)


_clear_archdraw_env()


@pytest.fixture(autouse=True)
def clear_archdraw_env() -> Generator[None, None, None]:
    _clear_archdraw_env()
    yield
    _clear_archdraw_env()


@pytest.fixture
def layout_engine() -> ArchitectureLayoutEngine:
    return ArchitectureLayoutEngine(LayoutConfig())


@pytest.fixture
def generator(layout_engine: ArchitectureLayoutEngine) -> DiagramGenerator:
    return DiagramGenerator(layout_engine, ArchitectureToExcalidrawConverter())


@pytest.fixture
def render_context_factory() -> Callable[..., RenderContext]:
    def _factory(seed: int = 7, timestamp: int = 1_700_000_000_000) -> RenderContext:
        return RenderContext(seed=seed, timestamp=timestamp)

    return _factory


@pytest.fixture
def actor_service_payload() -> dict[str, Any]:
    return {
        "nodes": [
            {"id": "u", "type": "actor", "label": "User"},
            {"id": "s", "type": "service", "label": "Service"},
        ],
        "connections": [{"from": "u", "to": "s", "type": "http"}],
        "layout": {"type": "hierarchical", "direction": "TB"},
    }
