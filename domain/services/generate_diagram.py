from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from domain.models import ArchitectureDocument, ExcalidrawDocument, PositionedLayout
from domain.ports.layout import LayoutEngine
from domain.ports.sources import ArchitectureSource
from domain.services.convert_architecture_to_excalidraw import ArchitectureToExcalidrawConverter
from domain.services.render_context import RenderContext
from domain.services.validate_architecture import parse_architecture

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramResult:
    document: ExcalidrawDocument
    layout: PositionedLayout
    diagnostics: list[str]

    def to_dict(self) -> dict[str, Any]:
        return self.document.to_dict()


class DiagramGenerator:
    def __init__(
        self,
        layout_engine: LayoutEngine,
        converter: ArchitectureToExcalidrawConverter | None = None,
    ) -> None:
        self.layout_engine = layout_engine
        self.converter = converter or ArchitectureToExcalidrawConverter()

    def generate(
        self,
        payload: Mapping[str, Any] | ArchitectureDocument,
        context: RenderContext | None = None,
    ) -> DiagramResult:
        architecture = parse_architecture(payload)
        logger.info(
            "Validated architecture: %d nodes, %d connections, %d groups",
            len(architecture.nodes),
            len(architecture.connections),
            len(architecture.groups),
        )
        plan = self.layout_engine.build_plan(architecture)
        document = self.converter.convert(plan, context)
        logger.info(
            "Generated %d elements (%d diagnostics)", len(document.elements), len(plan.diagnostics)
        )
        return DiagramResult(document=document, layout=plan, diagnostics=list(plan.diagnostics))

    def generate_from_source(
        self, source: ArchitectureSource, context: RenderContext | None = None
    ) -> DiagramResult:
        return self.generate(source.load(), context)
