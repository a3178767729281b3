from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.config import LayoutConfig
from domain.models import DOCUMENT_SOURCE

DEFAULT_CONFIG_PATH = Path("config/archdraw.yaml")


class LayoutSettings(BaseModel):
    canvas_width: float = Field(default=1200.0, gt=0)
    canvas_height: float = Field(default=800.0, gt=0)
    padding: float = Field(default=50.0, ge=0)
    node_spacing: float = Field(default=80.0, ge=0)
    rank_spacing: float = Field(default=100.0, ge=0)
    layered_rank_spacing: float = Field(default=120.0, ge=0)
    group_padding: float = Field(default=20.0, ge=0)
    label_offset: float = 0.0

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            padding=self.padding,
            node_spacing=self.node_spacing,
            rank_spacing=self.rank_spacing,
            layered_rank_spacing=self.layered_rank_spacing,
            group_padding=self.group_padding,
            label_offset=self.label_offset,
        )


class RenderSettings(BaseModel):
    seed: int | None = None
    source: str = DOCUMENT_SOURCE
    grid_size: int = Field(default=20, ge=0)
    output_dir: Path = Path("data/excalidraw")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ARCHDRAW_", env_nested_delimiter="__")

    log_level: str = "WARNING"
    layout: LayoutSettings = LayoutSettings()
    render: RenderSettings = RenderSettings()

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "WARNING").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("ARCHDRAW_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
