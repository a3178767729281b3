from __future__ import annotations

from adapters.layout.engine import ArchitectureLayoutEngine
from app.config import AppSettings
from domain.services.convert_architecture_to_excalidraw import ArchitectureToExcalidrawConverter
from domain.services.generate_diagram import DiagramGenerator
from domain.services.render_context import RenderContext


def build_generator(settings: AppSettings) -> DiagramGenerator:
    layout_engine = ArchitectureLayoutEngine(settings.layout.to_layout_config())
    converter = ArchitectureToExcalidrawConverter(
        source=settings.render.source,
        grid_size=settings.render.grid_size,
    )
    return DiagramGenerator(layout_engine, converter)


def build_render_context(settings: AppSettings, seed: int | None = None) -> RenderContext:
    return RenderContext(seed=seed if seed is not None else settings.render.seed)
